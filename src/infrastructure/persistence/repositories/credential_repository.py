"""
Implementation SQLModel du repository Credential.

Implemente l'interface ICredentialRepository pour la persistance des
credentials d'accès dans la table credencial_acceso.
"""

from typing import Optional

from loguru import logger
from sqlalchemy import update
from sqlmodel import Session, select

from src.core.entities.user import Credential, HashedSecret
from src.core.exceptions import NotFoundError, PersistenceError
from src.core.ports.repositories import ICredentialRepository
from src.infrastructure.persistence.models import CredentialModel
from src.infrastructure.persistence.repositories.base import ScopedRepository
from src.infrastructure.persistence.transaction import TransactionScope


class SQLModelCredentialRepository(ScopedRepository, ICredentialRepository):
    """
    Repository SQLModel pour les credentials.

    Implemente ICredentialRepository avec conversion bidirectionnelle
    entre l'entité Credential (domaine) et CredentialModel (persistance).
    Les lectures ignorent les lignes supprimées logiquement.
    """

    @staticmethod
    def _to_entity(model: CredentialModel) -> Credential:
        """
        Convertit un modèle DB en entité domaine.

        Args :
            model : Le modèle CredentialModel depuis la DB

        Retourne :
            L'entité Credential correspondante
        """
        return Credential(
            id=model.id,
            secret=HashedSecret(digest=model.secret_digest, salt=model.salt or ""),
            last_changed=model.last_changed,
            requires_reset=model.requires_reset,
            deleted=model.deleted,
        )

    @staticmethod
    def _hashed_secret(credential: Credential) -> HashedSecret:
        """Retourne le secret haché ou refuse un secret en clair."""
        if not isinstance(credential.secret, HashedSecret):
            raise PersistenceError(
                "Refus de persister une credential dont le secret n'est pas haché"
            )
        return credential.secret

    def create(self, credential: Credential, tx: Optional[TransactionScope] = None) -> Credential:
        """Insere une credential et renseigne son id généré."""
        secret = self._hashed_secret(credential)

        def operation(session: Session) -> Credential:
            model = CredentialModel(
                secret_digest=secret.digest,
                salt=secret.salt,
                requires_reset=credential.requires_reset,
            )
            if credential.last_changed is not None:
                model.last_changed = credential.last_changed
            session.add(model)
            session.flush()
            if model.id is None:
                raise PersistenceError("Echec de l'insertion de la credential : aucun id généré")
            credential.id = model.id
            credential.last_changed = model.last_changed
            credential.deleted = False
            logger.debug(f"Credential insérée (id={model.id})")
            return credential

        return self._run(operation, tx)

    def update(self, credential: Credential, tx: Optional[TransactionScope] = None) -> None:
        """Met à jour une credential non supprimée."""
        secret = self._hashed_secret(credential)

        def operation(session: Session) -> None:
            statement = (
                update(CredentialModel)
                .where(CredentialModel.id == credential.id)
                .where(CredentialModel.deleted == False)  # noqa: E712
                .values(
                    secret_digest=secret.digest,
                    salt=secret.salt,
                    last_changed=credential.last_changed,
                    requires_reset=credential.requires_reset,
                )
            )
            result = session.exec(statement)
            if result.rowcount == 0:
                raise NotFoundError(
                    f"Impossible de mettre à jour la credential avec l'ID : {credential.id}"
                )
            logger.debug(f"Credential mise à jour (id={credential.id})")

        self._run(operation, tx)

    def _set_deleted(
        self, credential_id: int, deleted: bool, tx: Optional[TransactionScope]
    ) -> None:
        def operation(session: Session) -> None:
            statement = (
                update(CredentialModel)
                .where(CredentialModel.id == credential_id)
                .values(deleted=deleted)
            )
            result = session.exec(statement)
            if result.rowcount == 0:
                raise NotFoundError(f"Aucune credential trouvée avec l'ID : {credential_id}")

        self._run(operation, tx)

    def soft_delete(self, credential_id: int, tx: Optional[TransactionScope] = None) -> None:
        """Marque la credential supprimée (deleted=True)."""
        self._set_deleted(credential_id, True, tx)
        logger.debug(f"Credential supprimée logiquement (id={credential_id})")

    def restore(self, credential_id: int, tx: Optional[TransactionScope] = None) -> None:
        """Annule la suppression logique (deleted=False)."""
        self._set_deleted(credential_id, False, tx)
        logger.debug(f"Credential restaurée (id={credential_id})")

    def get_by_id(
        self, credential_id: int, tx: Optional[TransactionScope] = None
    ) -> Optional[Credential]:
        """Recupere une credential non supprimée par son ID."""

        def operation(session: Session) -> Optional[Credential]:
            statement = (
                select(CredentialModel)
                .where(CredentialModel.id == credential_id)
                .where(CredentialModel.deleted == False)  # noqa: E712
            )
            model = session.exec(statement).first()
            if model:
                return self._to_entity(model)
            return None

        return self._run(operation, tx)

    def get_all(self, tx: Optional[TransactionScope] = None) -> list[Credential]:
        """Liste les credentials non supprimées, par ID croissant."""

        def operation(session: Session) -> list[Credential]:
            statement = (
                select(CredentialModel)
                .where(CredentialModel.deleted == False)  # noqa: E712
                .order_by(CredentialModel.id)
            )
            return [self._to_entity(model) for model in session.exec(statement).all()]

        return self._run(operation, tx)
