"""
Tests pour les modèles SQLModel de persistance.

Verifie les noms de tables, les valeurs par défaut et les contraintes
portées par la clé étrangère credential_id.
"""

from sqlalchemy import DateTime, inspect
from sqlmodel import Session

from src.infrastructure.persistence.models import CredentialModel, UserModel


class TestCredentialModel:
    """Tests pour CredentialModel."""

    def test_table_name(self):
        assert CredentialModel.__tablename__ == "credencial_acceso"

    def test_defaults(self):
        model = CredentialModel(secret_digest="d", salt="s")
        assert model.id is None
        assert model.deleted is False
        assert model.requires_reset is False
        assert model.last_changed is not None

    def test_last_changed_column_is_naive(self):
        column = CredentialModel.__table__.c.last_changed
        assert isinstance(column.type, DateTime)
        assert column.type.timezone is False

    def test_naive_timestamp_round_trip(self, engine):
        """Un datetime local sans fuseau est relu tel quel."""
        with Session(engine) as session:
            model = CredentialModel(secret_digest="d", salt="s")
            stamp = model.last_changed
            session.add(model)
            session.commit()
            session.refresh(model)

        assert stamp.tzinfo is None
        assert model.last_changed == stamp


class TestUserModel:
    """Tests pour UserModel."""

    def test_table_name(self):
        assert UserModel.__tablename__ == "usuarios"

    def test_defaults(self):
        model = UserModel(username="ana", email="ana@x.com", credential_id=1)
        assert model.active is False
        assert model.deleted is False
        assert model.registered_at is not None
        assert model.credential_id == 1

    def test_registered_at_column_is_naive(self):
        column = UserModel.__table__.c.registered_at
        assert isinstance(column.type, DateTime)
        assert column.type.timezone is False

    def test_credential_fk_is_unique_and_required(self):
        column = UserModel.__table__.c.credential_id
        assert column.unique is True
        assert column.nullable is False

        (fk,) = column.foreign_keys
        assert fk.target_fullname == "credencial_acceso.id"
        assert fk.ondelete == "CASCADE"
        assert fk.onupdate == "CASCADE"

    def test_tables_created(self, engine):
        tables = inspect(engine).get_table_names()
        assert "usuarios" in tables
        assert "credencial_acceso" in tables
