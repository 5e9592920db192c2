"""
Service d'orchestration Utilisateur / Credential.

Chaque cas d'utilisation s'exécute dans une seule transaction : la
credential et l'utilisateur sont créés, modifiés, supprimés ou restaurés
ensemble, ou pas du tout.

Responsabilités:
- Validation des champs (longueurs, valeurs vides, ID > 0)
- Unicité du username et de l'email parmi les utilisateurs non supprimés
- Coordination CredentialService + IUserRepository dans une transaction
- Aucun état partiel observable si l'opération échoue

Limite connue : la vérification d'unicité (lecture puis écriture) n'est pas
atomique ; sous appels concurrents seules les contraintes UNIQUE de la base
font foi.
"""

import copy
from typing import Callable, Optional

from loguru import logger

from src.core.entities.user import Credential, User
from src.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from src.core.ports.repositories import IUserRepository
from src.infrastructure.persistence.models import EMAIL_MAX_LENGTH, USERNAME_MAX_LENGTH
from src.infrastructure.persistence.transaction import TransactionScope
from src.services.credential_service import CredentialService, validate_id
from src.services.transactional import transactional


class UserService:
    """
    Service métier des utilisateurs.

    Example:
        service = UserService(
            user_repo=user_repo,
            credential_service=credential_service,
            scope_factory=scope_factory,
        )
        user = service.create(
            User(username="ana", email="ana@x.com", credential=Credential.from_plaintext("p@ss1"))
        )
        service.delete(user.id)
        service.restore(user.id)
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        credential_service: CredentialService,
        scope_factory: Callable[[], TransactionScope],
    ) -> None:
        """
        Initialise le service des utilisateurs.

        Args:
            user_repo: Store des utilisateurs
            credential_service: Service des credentials (opérations participantes)
            scope_factory: Fabrique de TransactionScope
        """
        self._user_repo = user_repo
        self._credential_service = credential_service
        self._scope_factory = scope_factory

    @property
    def credential_service(self) -> CredentialService:
        return self._credential_service

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_user(user: Optional[User]) -> None:
        """
        Valide la forme d'un utilisateur et normalise username/email.

        Raises:
            InvalidArgumentError: Champ vide, trop long, ou credential absente
        """
        if user is None:
            raise InvalidArgumentError("L'utilisateur ne peut pas être None")

        username = (user.username or "").strip()
        if not username:
            raise InvalidArgumentError("Le username ne peut pas être vide")
        if len(username) > USERNAME_MAX_LENGTH:
            raise InvalidArgumentError(
                f"Le username ne peut pas dépasser {USERNAME_MAX_LENGTH} caractères"
            )

        email = (user.email or "").strip()
        if not email:
            raise InvalidArgumentError("L'email ne peut pas être vide")
        if len(email) > EMAIL_MAX_LENGTH:
            raise InvalidArgumentError(
                f"L'email ne peut pas dépasser {EMAIL_MAX_LENGTH} caractères"
            )

        if user.credential is None:
            raise InvalidArgumentError("La credential ne peut pas être None")
        CredentialService.validate(user.credential)

        user.username = username
        user.email = email

    def _ensure_unique(self, user: User, exclude_id: Optional[int]) -> None:
        """
        Verifie l'unicité du username et de l'email parmi les non supprimés.

        Args:
            user: Utilisateur à vérifier
            exclude_id: ID de l'utilisateur lui-même (None à la création)

        Raises:
            ConflictError: Si un AUTRE utilisateur utilise déjà la valeur
        """
        existing = self._user_repo.find_by_username(user.username)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"Un utilisateur avec le username '{user.username}' existe déjà")

        existing = self._user_repo.find_by_email(user.email)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"Un utilisateur avec l'email '{user.email}' existe déjà")

    @staticmethod
    def _apply_state(staged: User, target: User) -> None:
        """Reporte sur l'objet de l'appelant l'état valide en base."""
        target.id = staged.id
        target.registered_at = staged.registered_at
        target.deleted = staged.deleted
        if staged.credential is not None and target.credential is not None:
            CredentialService.apply_state(staged.credential, target.credential)

    # ------------------------------------------------------------------
    # Cas d'utilisation transactionnels
    # ------------------------------------------------------------------

    def create(self, user: User) -> User:
        """
        Cree un utilisateur et sa credential dans une même transaction.

        Flux : validation -> unicité -> BEGIN -> credential (hachage + INSERT)
        -> utilisateur (INSERT avec credential_id) -> COMMIT.

        Le travail se fait sur une copie : en cas d'échec, user.id et
        user.credential.id restent non renseignés.

        Raises:
            InvalidArgumentError: Données invalides
            ConflictError: Username ou email déjà utilise
            PersistenceError: Echec de la base de données (rollback effectué)
        """
        self._validate_user(user)
        if not user.credential.needs_hashing:
            raise InvalidArgumentError("Une nouvelle credential doit fournir son secret en clair")
        self._ensure_unique(user, exclude_id=None)

        staged = copy.deepcopy(user)
        with transactional(self._scope_factory, "la création de l'utilisateur") as tx:
            self._credential_service.create_in(staged.credential, tx)
            self._user_repo.create(staged, tx)

        self._apply_state(staged, user)
        logger.info(f"Utilisateur créé : {user.username} (id={user.id})")
        return user

    def update(self, user: User) -> User:
        """
        Met à jour un utilisateur et sa credential dans une même transaction.

        Le secret n'est re-haché que si la credential est en rotation
        (Credential.rotate) ; last_changed est toujours rafraîchi.

        Raises:
            InvalidArgumentError: ID <= 0 ou données invalides
            ConflictError: Username ou email utilise par un autre utilisateur
            NotFoundError: Utilisateur ou credential absent ou supprimé
        """
        validate_id(user.id if user is not None else None, "L'ID de l'utilisateur")
        self._validate_user(user)
        self._ensure_unique(user, exclude_id=user.id)

        staged = copy.deepcopy(user)
        with transactional(self._scope_factory, "la mise à jour de l'utilisateur") as tx:
            if staged.credential is not None:
                self._credential_service.update_in(staged.credential, tx)
            self._user_repo.update(staged, tx)

        self._apply_state(staged, user)
        logger.info(f"Utilisateur mis à jour : {user.username} (id={user.id})")
        return user

    def delete(self, user_id: int) -> None:
        """
        Supprime logiquement un utilisateur et sa credential.

        Raises:
            InvalidArgumentError: ID <= 0
            NotFoundError: Utilisateur absent ou déjà supprimé
        """
        validate_id(user_id, "L'ID de l'utilisateur")
        with transactional(self._scope_factory, "la suppression de l'utilisateur") as tx:
            user = self._user_repo.get_by_id(user_id, tx)
            if user is None:
                raise NotFoundError(f"Aucun utilisateur trouvé avec l'ID : {user_id}")

            self._user_repo.soft_delete(user_id, tx)
            if user.credential is not None and user.credential.id:
                self._credential_service.delete_in(user.credential.id, tx)
        logger.info(f"Utilisateur supprimé (id={user_id})")

    def restore(self, user_id: int) -> User:
        """
        Restaure un utilisateur supprimé et sa credential.

        Raises:
            InvalidArgumentError: ID <= 0
            NotFoundError: Aucun utilisateur n'a jamais eu cet ID
        """
        validate_id(user_id, "L'ID de l'utilisateur")
        with transactional(self._scope_factory, "la restauration de l'utilisateur") as tx:
            self._user_repo.restore(user_id, tx)

            user = self._user_repo.get_by_id(user_id, tx)
            if user is None:
                raise NotFoundError(f"Aucun utilisateur trouvé avec l'ID : {user_id}")

            if user.credential is not None and user.credential.id:
                self._credential_service.restore_in(user.credential.id, tx)
                user.credential.deleted = False
        logger.info(f"Utilisateur restauré : {user.username} (id={user_id})")
        return user

    def change_secret(
        self, user_id: int, new_plaintext: str, requires_reset: bool = False
    ) -> Credential:
        """
        Change le secret de la credential d'un utilisateur.

        Raises:
            InvalidArgumentError: ID <= 0 ou secret invalide
            NotFoundError: Utilisateur absent ou sans credential
        """
        validate_id(user_id, "L'ID de l'utilisateur")
        CredentialService.validate(Credential.from_plaintext(new_plaintext))

        with transactional(self._scope_factory, "le changement de secret") as tx:
            user = self._user_repo.get_by_id(user_id, tx)
            if user is None:
                raise NotFoundError(f"Aucun utilisateur trouvé avec l'ID : {user_id}")
            if user.credential is None:
                raise NotFoundError(f"L'utilisateur {user_id} n'a pas de credential")

            credential = user.credential
            credential.rotate(new_plaintext)
            credential.requires_reset = requires_reset
            self._credential_service.update_in(credential, tx)
        logger.info(f"Secret changé pour l'utilisateur {user_id}")
        return credential

    # ------------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------------

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Recupere un utilisateur non supprimé, None si absent."""
        validate_id(user_id, "L'ID de l'utilisateur")
        return self._user_repo.get_by_id(user_id)

    def get_all(self) -> list[User]:
        """Liste les utilisateurs non supprimés."""
        return self._user_repo.get_all()

    def count(self) -> int:
        """Nombre d'utilisateurs non supprimés."""
        return self._user_repo.count()

    def find_by_username(self, username: str) -> Optional[User]:
        """Recherche exacte par username. InvalidArgumentError si vide."""
        return self._user_repo.find_by_username(username)

    def find_by_email(self, email: str) -> Optional[User]:
        """Recherche exacte par email. InvalidArgumentError si vide."""
        return self._user_repo.find_by_email(email)
