"""
Socle commun des repositories SQLModel.

Chaque opération s'exécute soit dans la transaction de l'appelant (tx fourni,
mode participant), soit dans une unité de travail dédiée ouverte puis
libérée par le repository (tx=None, mode autonome).
"""

from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from src.core.exceptions import ConflictError, PersistenceError
from src.infrastructure.persistence.transaction import TransactionScope

T = TypeVar("T")

ScopeFactory = Callable[[], TransactionScope]


class ScopedRepository:
    """Execute les opérations d'un repository dans une unité de travail."""

    def __init__(self, scope_factory: ScopeFactory) -> None:
        """
        Initialise le repository avec une fabrique de TransactionScope.

        Args :
            scope_factory : Cree un scope neuf (session dédiée) par appel autonome
        """
        self._scope_factory = scope_factory

    def _run(self, operation: Callable[[Session], T], tx: Optional[TransactionScope] = None) -> T:
        """
        Execute operation(session) en mode participant ou autonome.

        Raises :
            TransactionStateError : tx fourni mais inactif
            ConflictError : Contrainte d'unicité ou d'intégrité violée en base
            PersistenceError : Autre erreur SQLAlchemy pendant l'opération
        """
        try:
            if tx is not None:
                tx.ensure_active()
                return operation(tx.session)
            with self._scope_factory() as scope:
                scope.begin()
                result = operation(scope.session)
                scope.commit()
                return result
        except IntegrityError as exc:
            raise ConflictError(f"Contrainte de la base violée : {exc.orig}") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Erreur de base de données : {exc}") from exc
