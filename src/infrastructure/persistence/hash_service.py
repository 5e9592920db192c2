"""
Service de hachage salé des secrets, basé sur bcrypt.

Algorithme :
    1. Génère un sel bcrypt (16 octets aléatoires, préfixe $2b$ et coût)
    2. Calcule bcrypt(secret_en_clair, sel) en UTF-8
    3. Conserve le sel et l'empreinte sous forme texte (alphabet bcrypt)

Le calcul est déterministe : même secret et même sel donnent toujours la
même empreinte. L'empreinte n'est pas réversible vers le secret.
"""

from typing import Optional

import bcrypt

from src.core.entities.user import HashedSecret
from src.core.exceptions import InvalidArgumentError

# Facteur de coût bcrypt (log2 du nombre d'itérations)
BCRYPT_ROUNDS = 12

# bcrypt ne prend en compte que les 72 premiers octets du secret
SECRET_MAX_BYTES = 72


def generate_salt(rounds: Optional[int] = None) -> str:
    """
    Génère un sel bcrypt cryptographiquement aléatoire.

    Args :
        rounds : Facteur de coût (défaut: BCRYPT_ROUNDS)

    Retourne :
        Le sel au format texte bcrypt (29 caractères)
    """
    return bcrypt.gensalt(rounds=rounds or BCRYPT_ROUNDS).decode("ascii")


def derive_digest(plaintext: str, salt: str) -> str:
    """
    Calcule l'empreinte salée d'un secret.

    Args :
        plaintext : Secret en clair (72 octets UTF-8 au plus)
        salt : Sel produit par generate_salt()

    Retourne :
        Empreinte bcrypt (60 caractères, le sel en préfixe)

    Raises :
        InvalidArgumentError : Secret trop long ou sel mal formé
    """
    secret = plaintext.encode("utf-8")
    if len(secret) > SECRET_MAX_BYTES:
        raise InvalidArgumentError(
            f"Le secret ne peut pas dépasser {SECRET_MAX_BYTES} octets"
        )
    try:
        return bcrypt.hashpw(secret, salt.encode("ascii")).decode("ascii")
    except (ValueError, UnicodeEncodeError) as exc:
        raise InvalidArgumentError(f"Sel bcrypt invalide : {exc}") from exc


def hash_secret(plaintext: str) -> HashedSecret:
    """Hache un secret avec un sel neuf."""
    salt = generate_salt()
    return HashedSecret(digest=derive_digest(plaintext, salt), salt=salt)


def verify_secret(plaintext: str, hashed: HashedSecret) -> bool:
    """Compare un secret candidat à une empreinte stockée."""
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.digest.encode("ascii"))
    except (ValueError, TypeError, UnicodeEncodeError):
        # Empreinte mal formée ou secret hors limites
        return False
