"""
Fixtures pytest partagées pour les tests credaccess.

Ce module contient les fixtures communes utilisées dans les tests:
- Base SQLite temporaire (fichier sous tmp_path) avec tables créées
- Fabrique de TransactionScope, repositories et services câblés à cette base
- Settings de test avec chemins temporaires
"""

from pathlib import Path
from typing import Callable

import pytest
from sqlalchemy import Engine
from sqlmodel import Session

from src.config import Settings
from src.core.entities.user import Credential, User
from src.infrastructure.persistence import hash_service
from src.infrastructure.persistence.database import build_engine, init_db
from src.infrastructure.persistence.repositories import (
    SQLModelCredentialRepository,
    SQLModelUserRepository,
)
from src.infrastructure.persistence.transaction import TransactionScope
from src.services.credential_service import CredentialService
from src.services.user_service import UserService


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Coût bcrypt minimal pour garder des tests rapides."""
    monkeypatch.setattr(hash_service, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings de test isolés dans tmp_path."""
    return Settings(
        database_url=f"sqlite:///{tmp_path}/test.db",
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def engine(test_settings: Settings) -> Engine:
    """Engine SQLite fichier avec les tables créées."""
    engine = build_engine(test_settings.database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def scope_factory(engine: Engine) -> Callable[[], TransactionScope]:
    """Fabrique un TransactionScope sur une session neuve à chaque appel."""
    return lambda: TransactionScope(Session(engine))


@pytest.fixture
def credential_repo(scope_factory) -> SQLModelCredentialRepository:
    return SQLModelCredentialRepository(scope_factory)


@pytest.fixture
def user_repo(scope_factory) -> SQLModelUserRepository:
    return SQLModelUserRepository(scope_factory)


@pytest.fixture
def credential_service(credential_repo, user_repo, scope_factory) -> CredentialService:
    return CredentialService(
        credential_repo=credential_repo,
        user_repo=user_repo,
        scope_factory=scope_factory,
    )


@pytest.fixture
def user_service(user_repo, credential_service, scope_factory) -> UserService:
    return UserService(
        user_repo=user_repo,
        credential_service=credential_service,
        scope_factory=scope_factory,
    )


@pytest.fixture
def make_user() -> Callable[..., User]:
    """Construit un utilisateur transitoire avec un secret en clair."""

    def _make(
        username: str = "ana",
        email: str = "ana@x.com",
        secret: str = "p@ss1",
        active: bool = False,
    ) -> User:
        return User(
            username=username,
            email=email,
            active=active,
            credential=Credential.from_plaintext(secret),
        )

    return _make
