"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- ICredentialRepository : Stockage des credentials d'accès
- IUserRepository : Stockage des utilisateurs
"""

from src.core.ports.repositories import (
    ICredentialRepository,
    IUserRepository,
)

__all__ = [
    "ICredentialRepository",
    "IUserRepository",
]
