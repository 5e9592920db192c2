"""
Entités métier représentant les concepts du domaine.

Les entités sont des objets mutables avec une identité persistante.

Exports:
- User: Utilisateur avec sa credential d'accès
- Credential: Credential d'accès (secret haché, drapeau de réinitialisation)
- HashedSecret: Secret haché prêt à être persisté
- PendingRotation: Secret en clair en attente de hachage
"""

from src.core.entities.user import (
    Credential,
    HashedSecret,
    PendingRotation,
    Secret,
    User,
)

__all__ = [
    "User",
    "Credential",
    "HashedSecret",
    "PendingRotation",
    "Secret",
]
