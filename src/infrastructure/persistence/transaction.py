"""
Coordinateur de transaction (unité de travail).

TransactionScope encapsule une session SQLModel et garantit qu'au plus un
commit ou un rollback atteint la base :

    with TransactionScope(create_session()) as tx:
        tx.begin()
        credential_repo.create(credential, tx)
        user_repo.create(user, tx)
        tx.commit()

Un commit oublié ou une exception levée dans le bloc se traduit toujours
par un rollback à la sortie du bloc, puis la session est libérée.

États : UNSTARTED -> ACTIVE -> (COMMITTED | ROLLED_BACK) -> CLOSED
"""

from enum import Enum
from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import SessionTransaction
from sqlmodel import Session

from src.core.exceptions import StoreConnectionError, TransactionStateError


class TransactionState(Enum):
    """État du coordinateur de transaction."""

    UNSTARTED = "unstarted"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    CLOSED = "closed"


class TransactionScope:
    """
    Unité de travail sur une session SQLModel dédiée.

    La session est possédée par le scope : close() (ou la sortie du bloc
    with) la ferme et rend la connexion à l'engine.
    """

    def __init__(self, session: Optional[Session]) -> None:
        """
        Args :
            session : Session fraîchement acquise, non partagée

        Raises :
            StoreConnectionError : Si aucune session n'est fournie
        """
        if session is None:
            raise StoreConnectionError("La session ne peut pas être None")
        self._session: Optional[Session] = session
        self._transaction: Optional[SessionTransaction] = None
        self._state = TransactionState.UNSTARTED

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is TransactionState.ACTIVE

    @property
    def session(self) -> Session:
        """Session de l'unité de travail (indisponible après close)."""
        if self._session is None:
            raise StoreConnectionError("La transaction est fermée : session indisponible")
        return self._session

    def ensure_active(self) -> None:
        """Lève TransactionStateError si la transaction n'est pas active."""
        if not self.is_active:
            raise TransactionStateError(
                f"Aucune transaction active (état: {self._state.value})"
            )

    def begin(self) -> None:
        """
        Demarre la transaction explicite et ouvre la connexion.

        Raises :
            StoreConnectionError : Session fermée ou base injoignable
            TransactionStateError : Transaction déjà démarrée
        """
        if self._state is TransactionState.CLOSED or self._session is None:
            raise StoreConnectionError(
                "Impossible de démarrer la transaction : connexion fermée"
            )
        if self._state is not TransactionState.UNSTARTED:
            raise TransactionStateError(
                f"Transaction déjà démarrée (état: {self._state.value})"
            )
        try:
            self._transaction = self._session.begin()
            # Force l'acquisition de la connexion pour échouer tôt
            self._session.connection()
        except SQLAlchemyError as exc:
            raise StoreConnectionError(
                f"Impossible de démarrer la transaction : {exc}"
            ) from exc
        self._state = TransactionState.ACTIVE
        logger.debug("Transaction démarrée")

    def commit(self) -> None:
        """
        Valide la transaction.

        Si le commit échoue, la transaction reste active et sera annulée
        à la fermeture.

        Raises :
            TransactionStateError : Si la transaction n'est pas active
        """
        if not self.is_active or self._transaction is None:
            raise TransactionStateError(
                f"Aucune transaction active pour le commit (état: {self._state.value})"
            )
        self._transaction.commit()
        self._state = TransactionState.COMMITTED
        logger.debug("Transaction validée")

    def rollback(self) -> None:
        """
        Annule la transaction (best-effort).

        Les erreurs d'annulation sont journalisées et jamais relancées pour
        ne pas masquer l'erreur d'origine. Sans effet hors de l'état ACTIVE.
        """
        if not self.is_active or self._transaction is None:
            return
        logger.warning("Erreur durant la transaction, rollback en cours")
        try:
            self._transaction.rollback()
        except SQLAlchemyError as exc:
            logger.error(f"Erreur durant le rollback : {exc}")
        finally:
            self._state = TransactionState.ROLLED_BACK

    def close(self) -> None:
        """Annule si encore active, puis libère la session. Idempotent."""
        if self._state is TransactionState.CLOSED:
            return
        if self.is_active:
            self.rollback()
        if self._session is not None:
            try:
                self._session.close()
            except SQLAlchemyError as exc:
                logger.error(f"Erreur à la fermeture de la connexion : {exc}")
        self._session = None
        self._transaction = None
        self._state = TransactionState.CLOSED

    def __enter__(self) -> "TransactionScope":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.close()
        return False
