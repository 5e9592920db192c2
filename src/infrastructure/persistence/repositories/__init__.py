"""
Implementations SQLModel des repositories.

Ce module contient les implémentations concrètes des interfaces repository
définies dans src/core/ports/repositories.py, utilisant SQLModel pour
la persistance.

Chaque repository :
- Hérite de l'interface ABC correspondante du domaine
- Reçoit une fabrique de TransactionScope via injection de dépendances
- Convertit entre entités de domaine (dataclass) et modèles DB (SQLModel)
"""

from src.infrastructure.persistence.repositories.credential_repository import (
    SQLModelCredentialRepository,
)
from src.infrastructure.persistence.repositories.user_repository import (
    SQLModelUserRepository,
)

__all__ = [
    "SQLModelCredentialRepository",
    "SQLModelUserRepository",
]
