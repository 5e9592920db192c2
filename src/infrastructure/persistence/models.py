"""
Modèles SQLModel pour la base de données credaccess.

Ces modèles représentent les tables de la base de données.
Ils sont distincts des entités de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- credencial_acceso: Credentials d'accès (empreinte + sel, jamais le clair)
- usuarios: Utilisateurs, propriétaires de la clé étrangère vers leur credential

Les deux tables utilisent une suppression logique (colonne deleted).
Les horodatages sont des datetime locaux sans fuseau, colonnes déclarées
explicitement en DateTime(timezone=False).
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlmodel import Field, SQLModel

# Longueurs maximales des colonnes texte
USERNAME_MAX_LENGTH = 30
EMAIL_MAX_LENGTH = 120
DIGEST_MAX_LENGTH = 255
SALT_MAX_LENGTH = 64


class CredentialModel(SQLModel, table=True):
    """
    Modèle représentant une credential d'accès.

    Le sel n'est nullable qu'avant persistance côté domaine ; le store refuse
    d'écrire une credential sans empreinte ni sel.
    """

    __tablename__ = "credencial_acceso"

    id: int | None = Field(default=None, primary_key=True)
    deleted: bool = Field(default=False, index=True)
    secret_digest: str = Field(max_length=DIGEST_MAX_LENGTH)
    salt: str | None = Field(default=None, max_length=SALT_MAX_LENGTH)
    last_changed: datetime | None = Field(
        default_factory=datetime.now, sa_column=Column(DateTime(timezone=False))
    )
    requires_reset: bool = Field(default=False)


class UserModel(SQLModel, table=True):
    """
    Modèle représentant un utilisateur.

    credential_id est unique (relation 1-1) et obligatoire au niveau SQL.
    Les cascades SQL existent mais l'application passe toujours par la
    suppression logique coordonnée du service.
    """

    __tablename__ = "usuarios"

    id: int | None = Field(default=None, primary_key=True)
    deleted: bool = Field(default=False, index=True)
    username: str = Field(max_length=USERNAME_MAX_LENGTH, unique=True)
    email: str = Field(max_length=EMAIL_MAX_LENGTH, unique=True)
    active: bool = Field(default=False)
    registered_at: datetime | None = Field(
        default_factory=datetime.now, sa_column=Column(DateTime(timezone=False))
    )
    credential_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("credencial_acceso.id", ondelete="CASCADE", onupdate="CASCADE"),
            unique=True,
            nullable=False,
        ),
    )
