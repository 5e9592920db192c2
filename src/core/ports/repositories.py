"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des données.
Les implémentations (adaptateurs) fournissent les mécanismes de stockage concrets
(SQLModel sur SQLite ou MySQL).

Chaque opération existe en deux variantes selon le paramètre `tx` :
- tx=None : opération autonome, ouvre et libère sa propre unité de travail
- tx fourni : opération participante, s'exécute dans la transaction de
  l'appelant sans jamais la valider ni la fermer
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from src.core.entities.user import Credential, User

if TYPE_CHECKING:
    from src.infrastructure.persistence.transaction import TransactionScope


class ICredentialRepository(ABC):
    """
    Interface de stockage des credentials d'accès.

    Le store ne valide pas les champs : c'est le rôle de la couche service.
    """

    @abstractmethod
    def create(self, credential: Credential, tx: Optional["TransactionScope"] = None) -> Credential:
        """Insere une credential et renseigne son id généré."""
        ...

    @abstractmethod
    def update(self, credential: Credential, tx: Optional["TransactionScope"] = None) -> None:
        """Met à jour une credential non supprimée. NotFoundError si aucune ligne."""
        ...

    @abstractmethod
    def soft_delete(self, credential_id: int, tx: Optional["TransactionScope"] = None) -> None:
        """Marque la credential supprimée. NotFoundError si aucune ligne."""
        ...

    @abstractmethod
    def restore(self, credential_id: int, tx: Optional["TransactionScope"] = None) -> None:
        """Annule la suppression logique. NotFoundError si aucune ligne."""
        ...

    @abstractmethod
    def get_by_id(
        self, credential_id: int, tx: Optional["TransactionScope"] = None
    ) -> Optional[Credential]:
        """Recupere une credential non supprimée, None si absente."""
        ...

    @abstractmethod
    def get_all(self, tx: Optional["TransactionScope"] = None) -> list[Credential]:
        """Liste les credentials non supprimées."""
        ...


class IUserRepository(ABC):
    """
    Interface de stockage des utilisateurs.

    Les lectures chargent la credential associée par jointure externe.
    """

    @abstractmethod
    def create(self, user: User, tx: Optional["TransactionScope"] = None) -> User:
        """Insere un utilisateur et renseigne son id généré."""
        ...

    @abstractmethod
    def update(self, user: User, tx: Optional["TransactionScope"] = None) -> None:
        """Met à jour un utilisateur non supprimé. NotFoundError si aucune ligne."""
        ...

    @abstractmethod
    def soft_delete(self, user_id: int, tx: Optional["TransactionScope"] = None) -> None:
        """Marque l'utilisateur supprimé. NotFoundError si aucune ligne."""
        ...

    @abstractmethod
    def restore(self, user_id: int, tx: Optional["TransactionScope"] = None) -> None:
        """Annule la suppression logique. NotFoundError si aucune ligne."""
        ...

    @abstractmethod
    def get_by_id(self, user_id: int, tx: Optional["TransactionScope"] = None) -> Optional[User]:
        """Recupere un utilisateur non supprimé avec sa credential."""
        ...

    @abstractmethod
    def get_all(self, tx: Optional["TransactionScope"] = None) -> list[User]:
        """Liste les utilisateurs non supprimés avec leurs credentials."""
        ...

    @abstractmethod
    def find_by_username(
        self, username: str, tx: Optional["TransactionScope"] = None
    ) -> Optional[User]:
        """Recherche exacte par username parmi les non supprimés."""
        ...

    @abstractmethod
    def find_by_email(self, email: str, tx: Optional["TransactionScope"] = None) -> Optional[User]:
        """Recherche exacte par email parmi les non supprimés."""
        ...

    @abstractmethod
    def find_by_credential_id(
        self, credential_id: int, tx: Optional["TransactionScope"] = None
    ) -> Optional[User]:
        """Utilisateur non supprimé qui référence la credential, None sinon."""
        ...

    @abstractmethod
    def count(self, tx: Optional["TransactionScope"] = None) -> int:
        """Nombre d'utilisateurs non supprimés."""
        ...
