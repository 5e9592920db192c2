"""
Service des credentials d'accès.

Le CredentialService applique les règles métier sur les credentials et
expose deux familles de méthodes :

Responsabilités:
- Opérations autonomes (create, update, delete, restore) : une transaction dédiée
- Opérations participantes (*_in) : exécutées dans la transaction d'un autre
  service (UserService) sans la valider ni la fermer
- Préparation du secret : hachage du texte en clair, horodatage du changement
- Sécurité référentielle : refus de supprimer une credential encore utilisée
"""

import copy
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from src.core.entities.user import Credential, HashedSecret, PendingRotation
from src.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from src.core.ports.repositories import ICredentialRepository, IUserRepository
from src.infrastructure.persistence.hash_service import (
    SECRET_MAX_BYTES,
    hash_secret,
    verify_secret,
)
from src.infrastructure.persistence.models import DIGEST_MAX_LENGTH, SALT_MAX_LENGTH
from src.infrastructure.persistence.transaction import TransactionScope
from src.services.transactional import transactional


def validate_id(value: Optional[int], label: str = "L'ID") -> int:
    """
    Verifie qu'un identifiant est un entier strictement positif.

    Raises:
        InvalidArgumentError: Si l'ID est absent ou <= 0
    """
    if value is None or isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(f"{label} doit être supérieur à 0")
    return value


class CredentialService:
    """
    Service métier des credentials.

    Example:
        service = CredentialService(
            credential_repo=credential_repo,
            user_repo=user_repo,
            scope_factory=scope_factory,
        )
        credential = service.create(Credential.from_plaintext("p@ss1"))
        service.delete(credential.id)
    """

    def __init__(
        self,
        credential_repo: ICredentialRepository,
        user_repo: IUserRepository,
        scope_factory: Callable[[], TransactionScope],
    ) -> None:
        """
        Initialise le service des credentials.

        Args:
            credential_repo: Store des credentials
            user_repo: Store des utilisateurs (vérification référentielle)
            scope_factory: Fabrique de TransactionScope
        """
        self._credential_repo = credential_repo
        self._user_repo = user_repo
        self._scope_factory = scope_factory

    # ------------------------------------------------------------------
    # Validation et préparation
    # ------------------------------------------------------------------

    @staticmethod
    def validate(credential: Optional[Credential]) -> None:
        """
        Valide le secret d'une credential avant persistance.

        Un secret en clair doit être non vide et tenir dans les 72 octets
        pris en compte par bcrypt ; un secret haché doit avoir empreinte et
        sel non vides, dans les longueurs des colonnes.

        Raises:
            InvalidArgumentError: Si une règle n'est pas respectée
        """
        if credential is None:
            raise InvalidArgumentError("La credential ne peut pas être None")
        secret = credential.secret
        if isinstance(secret, PendingRotation):
            if secret.plaintext is None or not secret.plaintext.strip():
                raise InvalidArgumentError("Le secret ne peut pas être vide")
            if len(secret.plaintext.encode("utf-8")) > SECRET_MAX_BYTES:
                raise InvalidArgumentError(
                    f"Le secret ne peut pas dépasser {SECRET_MAX_BYTES} octets"
                )
        elif isinstance(secret, HashedSecret):
            if not secret.digest or not secret.digest.strip():
                raise InvalidArgumentError("L'empreinte du secret ne peut pas être vide")
            if len(secret.digest) > DIGEST_MAX_LENGTH:
                raise InvalidArgumentError(
                    f"L'empreinte ne peut pas dépasser {DIGEST_MAX_LENGTH} caractères"
                )
            if not secret.salt or not secret.salt.strip():
                raise InvalidArgumentError("Le sel ne peut pas être vide")
            if len(secret.salt) > SALT_MAX_LENGTH:
                raise InvalidArgumentError(
                    f"Le sel ne peut pas dépasser {SALT_MAX_LENGTH} caractères"
                )
        else:
            raise InvalidArgumentError("La credential doit avoir un secret")

    @staticmethod
    def prepare_for_insert(credential: Credential) -> None:
        """Hache toujours le secret en clair et horodate le changement."""
        if not isinstance(credential.secret, PendingRotation):
            raise InvalidArgumentError(
                "Une nouvelle credential doit fournir son secret en clair"
            )
        credential.secret = hash_secret(credential.secret.plaintext)
        credential.last_changed = datetime.now()

    @staticmethod
    def prepare_for_update(credential: Credential) -> None:
        """
        Prepare une credential pour la mise à jour.

        Le secret n'est re-haché que s'il est en attente de rotation ;
        l'horodatage est toujours rafraîchi.
        """
        if isinstance(credential.secret, PendingRotation):
            credential.secret = hash_secret(credential.secret.plaintext)
        credential.last_changed = datetime.now()

    @staticmethod
    def apply_state(staged: Credential, target: Credential) -> None:
        """Reporte sur l'objet de l'appelant l'état valide en base."""
        target.id = staged.id
        target.secret = staged.secret
        target.last_changed = staged.last_changed
        target.requires_reset = staged.requires_reset
        target.deleted = staged.deleted

    # ------------------------------------------------------------------
    # Opérations participantes (transaction de l'appelant)
    # ------------------------------------------------------------------

    def create_in(self, credential: Credential, tx: TransactionScope) -> Credential:
        """Valide, hache et insère la credential dans la transaction fournie."""
        self.validate(credential)
        self.prepare_for_insert(credential)
        return self._credential_repo.create(credential, tx)

    def update_in(self, credential: Credential, tx: TransactionScope) -> None:
        """Valide, prépare et met à jour la credential dans la transaction fournie."""
        validate_id(credential.id, "L'ID de la credential")
        self.validate(credential)
        self.prepare_for_update(credential)
        self._credential_repo.update(credential, tx)

    def delete_in(self, credential_id: int, tx: TransactionScope) -> None:
        """Suppression logique dans la transaction fournie (sans vérification)."""
        validate_id(credential_id, "L'ID de la credential")
        self._credential_repo.soft_delete(credential_id, tx)

    def restore_in(self, credential_id: int, tx: TransactionScope) -> None:
        """Restauration dans la transaction fournie."""
        validate_id(credential_id, "L'ID de la credential")
        self._credential_repo.restore(credential_id, tx)

    # ------------------------------------------------------------------
    # Opérations autonomes
    # ------------------------------------------------------------------

    def create(self, credential: Credential) -> Credential:
        """
        Cree une credential isolée.

        L'id et l'empreinte ne sont reportés sur l'objet qu'après le commit.
        """
        self.validate(credential)
        staged = copy.deepcopy(credential)
        with transactional(self._scope_factory, "la création de la credential") as tx:
            self.create_in(staged, tx)
        self.apply_state(staged, credential)
        logger.info(f"Credential créée (id={credential.id})")
        return credential

    def update(self, credential: Credential) -> None:
        """Met à jour une credential (re-hache le secret s'il est en rotation)."""
        validate_id(credential.id, "L'ID de la credential")
        self.validate(credential)
        staged = copy.deepcopy(credential)
        with transactional(self._scope_factory, "la mise à jour de la credential") as tx:
            self.update_in(staged, tx)
        self.apply_state(staged, credential)
        logger.info(f"Credential mise à jour (id={credential.id})")

    def delete(self, credential_id: int) -> None:
        """
        Supprime logiquement une credential qui n'est plus utilisée.

        Raises:
            InvalidArgumentError: ID <= 0
            ConflictError: Un utilisateur non supprimé référence encore la credential
            NotFoundError: Credential inexistante
        """
        validate_id(credential_id, "L'ID de la credential")
        with transactional(self._scope_factory, "la suppression de la credential") as tx:
            owner = self._user_repo.find_by_credential_id(credential_id, tx)
            if owner is not None:
                raise ConflictError(
                    f"La credential {credential_id} est utilisée par l'utilisateur "
                    f"'{owner.username}' (id={owner.id})"
                )
            self._credential_repo.soft_delete(credential_id, tx)
        logger.info(f"Credential supprimée (id={credential_id})")

    def restore(self, credential_id: int) -> None:
        """Restaure une credential supprimée logiquement."""
        validate_id(credential_id, "L'ID de la credential")
        with transactional(self._scope_factory, "la restauration de la credential") as tx:
            self._credential_repo.restore(credential_id, tx)
        logger.info(f"Credential restaurée (id={credential_id})")

    def get_by_id(self, credential_id: int) -> Optional[Credential]:
        """Recupere une credential non supprimée, None si absente."""
        validate_id(credential_id, "L'ID de la credential")
        return self._credential_repo.get_by_id(credential_id)

    def get_all(self) -> list[Credential]:
        """Liste les credentials non supprimées."""
        return self._credential_repo.get_all()

    def verify(self, credential_id: int, plaintext: str) -> bool:
        """
        Verifie un secret candidat contre la credential stockée.

        Raises:
            NotFoundError: Credential inexistante ou supprimée
        """
        credential = self.get_by_id(credential_id)
        if credential is None or not isinstance(credential.secret, HashedSecret):
            raise NotFoundError(f"Aucune credential trouvée avec l'ID : {credential_id}")
        return verify_secret(plaintext, credential.secret)
