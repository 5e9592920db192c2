"""
Implementation SQLModel du repository User.

Implemente l'interface IUserRepository pour la persistance des utilisateurs
dans la table usuarios. Les lectures chargent la credential associée par
LEFT OUTER JOIN sur credencial_acceso.
"""

from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy import func, update
from sqlmodel import Session, select

from src.core.entities.user import Credential, HashedSecret, User
from src.core.exceptions import InvalidArgumentError, NotFoundError, PersistenceError
from src.core.ports.repositories import IUserRepository
from src.infrastructure.persistence.models import CredentialModel, UserModel
from src.infrastructure.persistence.repositories.base import ScopedRepository
from src.infrastructure.persistence.transaction import TransactionScope


def _users_with_credentials():
    """SELECT usuarios LEFT JOIN credencial_acceso, limite aux non supprimés."""
    return (
        select(UserModel, CredentialModel)
        .join(
            CredentialModel,
            UserModel.credential_id == CredentialModel.id,
            isouter=True,
        )
        .where(UserModel.deleted == False)  # noqa: E712
    )


class SQLModelUserRepository(ScopedRepository, IUserRepository):
    """
    Repository SQLModel pour les utilisateurs.

    Implemente IUserRepository avec conversion bidirectionnelle
    entre l'entité User (domaine) et UserModel (persistance).
    """

    @staticmethod
    def _to_entity(model: UserModel, credential_model: Optional[CredentialModel]) -> User:
        """
        Convertit une ligne (utilisateur, credential éventuelle) en entité.

        Une credential absente de la jointure donne user.credential = None.
        """
        credential = None
        if credential_model is not None and credential_model.id is not None:
            credential = Credential(
                id=credential_model.id,
                secret=HashedSecret(
                    digest=credential_model.secret_digest,
                    salt=credential_model.salt or "",
                ),
                last_changed=credential_model.last_changed,
                requires_reset=credential_model.requires_reset,
                deleted=credential_model.deleted,
            )
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            active=model.active,
            registered_at=model.registered_at,
            deleted=model.deleted,
            credential=credential,
        )

    @staticmethod
    def _credential_id(user: User) -> int:
        """Clé étrangère à écrire : la credential doit déjà être persistée."""
        credential_id = user.credential_id
        if credential_id is None:
            raise InvalidArgumentError(
                f"L'utilisateur '{user.username}' doit référencer une credential persistée"
            )
        return credential_id

    def create(self, user: User, tx: Optional[TransactionScope] = None) -> User:
        """Insere un utilisateur et renseigne son id généré."""
        credential_id = self._credential_id(user)

        def operation(session: Session) -> User:
            model = UserModel(
                username=user.username,
                email=user.email,
                active=user.active,
                registered_at=user.registered_at or datetime.now(),
                credential_id=credential_id,
            )
            session.add(model)
            session.flush()
            if model.id is None:
                raise PersistenceError("Echec de l'insertion de l'utilisateur : aucun id généré")
            user.id = model.id
            user.registered_at = model.registered_at
            user.deleted = False
            logger.debug(f"Utilisateur inséré (id={model.id}, username={user.username})")
            return user

        return self._run(operation, tx)

    def update(self, user: User, tx: Optional[TransactionScope] = None) -> None:
        """Met à jour username, email, active et credential_id d'un utilisateur non supprimé."""
        credential_id = self._credential_id(user)

        def operation(session: Session) -> None:
            statement = (
                update(UserModel)
                .where(UserModel.id == user.id)
                .where(UserModel.deleted == False)  # noqa: E712
                .values(
                    username=user.username,
                    email=user.email,
                    active=user.active,
                    credential_id=credential_id,
                )
            )
            result = session.exec(statement)
            if result.rowcount == 0:
                raise NotFoundError(
                    f"Impossible de mettre à jour l'utilisateur avec l'ID : {user.id}"
                )
            logger.debug(f"Utilisateur mis à jour (id={user.id})")

        self._run(operation, tx)

    def _set_deleted(self, user_id: int, deleted: bool, tx: Optional[TransactionScope]) -> None:
        def operation(session: Session) -> None:
            statement = update(UserModel).where(UserModel.id == user_id).values(deleted=deleted)
            result = session.exec(statement)
            if result.rowcount == 0:
                raise NotFoundError(f"Aucun utilisateur trouvé avec l'ID : {user_id}")

        self._run(operation, tx)

    def soft_delete(self, user_id: int, tx: Optional[TransactionScope] = None) -> None:
        """Marque l'utilisateur supprimé (deleted=True)."""
        self._set_deleted(user_id, True, tx)
        logger.debug(f"Utilisateur supprimé logiquement (id={user_id})")

    def restore(self, user_id: int, tx: Optional[TransactionScope] = None) -> None:
        """Annule la suppression logique (deleted=False)."""
        self._set_deleted(user_id, False, tx)
        logger.debug(f"Utilisateur restauré (id={user_id})")

    def _first(self, statement, tx: Optional[TransactionScope]) -> Optional[User]:
        def operation(session: Session) -> Optional[User]:
            row = session.exec(statement).first()
            if row:
                return self._to_entity(*row)
            return None

        return self._run(operation, tx)

    def get_by_id(self, user_id: int, tx: Optional[TransactionScope] = None) -> Optional[User]:
        """Recupere un utilisateur non supprimé par son ID."""
        return self._first(_users_with_credentials().where(UserModel.id == user_id), tx)

    def get_all(self, tx: Optional[TransactionScope] = None) -> list[User]:
        """Liste les utilisateurs non supprimés, par ID croissant."""

        def operation(session: Session) -> list[User]:
            statement = _users_with_credentials().order_by(UserModel.id)
            return [self._to_entity(*row) for row in session.exec(statement).all()]

        return self._run(operation, tx)

    @staticmethod
    def _search_term(term: Optional[str], label: str) -> str:
        if term is None or not term.strip():
            raise InvalidArgumentError(f"Le {label} de recherche ne peut pas être vide")
        return term.strip()

    def find_by_username(
        self, username: str, tx: Optional[TransactionScope] = None
    ) -> Optional[User]:
        """Recherche exacte par username (après suppression des espaces)."""
        term = self._search_term(username, "username")
        return self._first(_users_with_credentials().where(UserModel.username == term), tx)

    def find_by_email(self, email: str, tx: Optional[TransactionScope] = None) -> Optional[User]:
        """Recherche exacte par email (après suppression des espaces)."""
        term = self._search_term(email, "email")
        return self._first(_users_with_credentials().where(UserModel.email == term), tx)

    def find_by_credential_id(
        self, credential_id: int, tx: Optional[TransactionScope] = None
    ) -> Optional[User]:
        """Utilisateur non supprimé qui référence la credential."""
        return self._first(
            _users_with_credentials().where(UserModel.credential_id == credential_id), tx
        )

    def count(self, tx: Optional[TransactionScope] = None) -> int:
        """Nombre d'utilisateurs non supprimés."""

        def operation(session: Session) -> int:
            statement = (
                select(func.count())
                .select_from(UserModel)
                .where(UserModel.deleted == False)  # noqa: E712
            )
            return session.exec(statement).one()

        return self._run(operation, tx)
