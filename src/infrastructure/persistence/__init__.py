"""
Module de persistance de credaccess.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Engine, fournisseur de sessions, initialisation des tables
- models.py : Modèles SQLModel représentant les tables de la base de données
- transaction.py : Coordinateur de transaction (TransactionScope)
- hash_service.py : Hachage salé des secrets
- repositories/ : Stores Credential et User

Les modèles ici sont des adapters de persistance, distincts des entités de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from src.infrastructure.persistence import init_db, create_session, TransactionScope

    init_db()  # Cree les tables si nécessaire
    with TransactionScope(create_session()) as tx:
        tx.begin()
        ...
        tx.commit()
"""

from src.infrastructure.persistence.database import (
    build_engine,
    create_session,
    get_engine,
    init_db,
)
from src.infrastructure.persistence.models import CredentialModel, UserModel
from src.infrastructure.persistence.transaction import TransactionScope, TransactionState

__all__ = [
    "build_engine",
    "create_session",
    "get_engine",
    "init_db",
    "CredentialModel",
    "UserModel",
    "TransactionScope",
    "TransactionState",
]
