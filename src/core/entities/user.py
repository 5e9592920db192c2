"""
Entités utilisateur et credential d'accès.

Un User possède exactement une Credential (relation 1-1, le User porte la
clé étrangère). Le secret d'une Credential est une valeur étiquetée :

- HashedSecret : empreinte salée déjà calculée, seule forme persistable
- PendingRotation : texte en clair en attente de hachage, jamais persisté
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True)
class HashedSecret:
    """
    Secret haché prêt à être stocké.

    Attributs :
        digest : Empreinte bcrypt (60 caractères, sel en préfixe)
        salt : Sel bcrypt aléatoire (29 caractères)
    """

    digest: str
    salt: str


@dataclass(frozen=True)
class PendingRotation:
    """Secret en clair qui doit être haché avant toute persistance."""

    plaintext: str = field(repr=False)


Secret = Union[HashedSecret, PendingRotation]


@dataclass
class Credential:
    """
    Credential d'accès d'un utilisateur.

    Attributs :
        id : Identifiant généré par la base (None tant que non persisté)
        secret : HashedSecret une fois préparé, PendingRotation avant
        last_changed : Date du dernier changement de secret
        requires_reset : L'utilisateur doit changer son secret
        deleted : Drapeau de suppression logique
    """

    id: Optional[int] = None
    secret: Optional[Secret] = None
    last_changed: Optional[datetime] = None
    requires_reset: bool = False
    deleted: bool = False

    @classmethod
    def from_plaintext(cls, plaintext: str, requires_reset: bool = False) -> "Credential":
        """Cree une credential transitoire à partir d'un secret en clair."""
        return cls(secret=PendingRotation(plaintext), requires_reset=requires_reset)

    def rotate(self, plaintext: str) -> None:
        """Marque le secret pour re-hachage lors de la prochaine mise à jour."""
        self.secret = PendingRotation(plaintext)

    @property
    def needs_hashing(self) -> bool:
        """True si le secret est encore en clair."""
        return isinstance(self.secret, PendingRotation)

    @property
    def digest(self) -> Optional[str]:
        if isinstance(self.secret, HashedSecret):
            return self.secret.digest
        return None

    @property
    def salt(self) -> Optional[str]:
        if isinstance(self.secret, HashedSecret):
            return self.secret.salt
        return None


@dataclass
class User:
    """
    Utilisateur de l'application.

    Attributs :
        id : Identifiant généré par la base (None tant que non persisté)
        username : Nom d'utilisateur unique parmi les non supprimés (30 car. max)
        email : Email unique parmi les non supprimés (120 car. max)
        active : Compte actif
        registered_at : Date d'inscription
        deleted : Drapeau de suppression logique
        credential : Credential possédée (côté propriétaire de la clé étrangère)
    """

    id: Optional[int] = None
    username: str = ""
    email: str = ""
    active: bool = False
    registered_at: Optional[datetime] = None
    deleted: bool = False
    credential: Optional[Credential] = None

    @property
    def credential_id(self) -> Optional[int]:
        """
        Valeur à stocker dans la clé étrangère credential_id.

        Seul un id déjà attribué (entier positif) est encodé, jamais un
        placeholder.
        """
        if self.credential is not None and self.credential.id and self.credential.id > 0:
            return self.credential.id
        return None
