"""
Container d'injection de dépendances via dependency-injector.

Fournit une gestion centralisée des dépendances pour la CLI :
configuration, fournisseur de sessions, coordinateur de transaction,
repositories SQLModel et services métier.
"""

from dependency_injector import containers, providers

from .config import Settings
from .infrastructure.persistence.database import create_session, init_db
from .infrastructure.persistence.repositories import (
    SQLModelCredentialRepository,
    SQLModelUserRepository,
)
from .infrastructure.persistence.transaction import TransactionScope
from .services.credential_service import CredentialService
from .services.user_service import UserService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        user_service = container.user_service()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Session - nouvelle session (connexion dédiée) à chaque appel
    session = providers.Factory(create_session)

    # Unité de travail - un scope neuf par opération autonome
    transaction_scope = providers.Factory(TransactionScope, session=session)

    # Repositories - reçoivent la fabrique de scopes, pas une session partagée
    credential_repository = providers.Singleton(
        SQLModelCredentialRepository,
        scope_factory=transaction_scope.provider,
    )
    user_repository = providers.Singleton(
        SQLModelUserRepository,
        scope_factory=transaction_scope.provider,
    )

    # Services
    credential_service = providers.Singleton(
        CredentialService,
        credential_repo=credential_repository,
        user_repo=user_repository,
        scope_factory=transaction_scope.provider,
    )
    user_service = providers.Singleton(
        UserService,
        user_repo=user_repository,
        credential_service=credential_service,
        scope_factory=transaction_scope.provider,
    )
