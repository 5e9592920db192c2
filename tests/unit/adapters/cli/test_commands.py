"""
Tests unitaires pour les commandes CLI.

Tests couvrant:
- user-*: création, liste, recherche, mise à jour, suppression, restauration
- cred-*: credentials isolées, vérification du secret
- Conversion des erreurs métier en code de sortie (jamais de traceback)
"""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from src.core.exceptions import PersistenceError
from src.main import app

runner = CliRunner()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_container(user_service, credential_service):
    """Container dont les services sont câblés sur la base de test.

    Patche Container dans helpers.py car c'est la que build_container()
    l'instancie.
    """
    with patch("src.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance
        container_instance.database.init = MagicMock()
        container_instance.user_service.return_value = user_service
        container_instance.credential_service.return_value = credential_service
        yield container_instance


@pytest.fixture
def ana(user_service, make_user):
    return user_service.create(make_user())


def _create_args(username="ana", email="ana@x.com", secret="p@ss1"):
    return [
        "user-create",
        "--username", username,
        "--email", email,
        "--secret", secret,
    ]


# ============================================================================
# Commandes utilisateur
# ============================================================================


class TestUserCreate:

    def test_create_success(self, mock_container, user_service):
        result = runner.invoke(app, _create_args() + ["--active"])

        assert result.exit_code == 0
        assert "Utilisateur créé" in result.output
        user = user_service.find_by_username("ana")
        assert user is not None
        assert user.active is True

    def test_create_prompts_for_missing_values(self, mock_container, user_service):
        result = runner.invoke(
            app, ["user-create"], input="ana\nana@x.com\np@ss1\np@ss1\n"
        )

        assert result.exit_code == 0
        assert user_service.count() == 1

    def test_create_duplicate_exits_with_error(self, mock_container, ana, user_service):
        result = runner.invoke(app, _create_args(email="other@x.com"))

        assert result.exit_code == 1
        assert "existe déjà" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert user_service.count() == 1

    def test_create_invalid_username(self, mock_container):
        result = runner.invoke(app, _create_args(username="u" * 31))
        assert result.exit_code == 1
        assert "Erreur" in result.output


class TestUserReadCommands:

    def test_list_empty(self, mock_container):
        result = runner.invoke(app, ["user-list"])
        assert result.exit_code == 0
        assert "Aucun utilisateur" in result.output

    def test_list_shows_users_without_secret(self, mock_container, ana):
        result = runner.invoke(app, ["user-list"])

        assert result.exit_code == 0
        assert "ana@x.com" in result.output
        assert "p@ss1" not in result.output
        assert ana.credential.digest not in result.output

    def test_find_requires_a_criterion(self, mock_container):
        result = runner.invoke(app, ["user-find"])
        assert result.exit_code == 1

    @pytest.mark.parametrize(
        "args", [["--username", "ana"], ["--email", "ana@x.com"]]
    )
    def test_find_by_criteria(self, mock_container, ana, args):
        result = runner.invoke(app, ["user-find", *args])
        assert result.exit_code == 0
        assert "ana@x.com" in result.output

    def test_find_by_id(self, mock_container, ana):
        result = runner.invoke(app, ["user-find", "--id", str(ana.id)])
        assert result.exit_code == 0
        assert "ana" in result.output

    def test_find_absent(self, mock_container):
        result = runner.invoke(app, ["user-find", "--username", "nobody"])
        assert result.exit_code == 0
        assert "Aucun utilisateur" in result.output

    def test_find_invalid_id(self, mock_container):
        result = runner.invoke(app, ["user-find", "--id", "0"])
        assert result.exit_code == 1
        assert "supérieur à 0" in result.output


class TestUserWriteCommands:

    def test_update_email_and_state(self, mock_container, ana, user_service):
        result = runner.invoke(
            app, ["user-update", str(ana.id), "--email", "ana@new.com", "--active"]
        )

        assert result.exit_code == 0
        stored = user_service.get_by_id(ana.id)
        assert stored.email == "ana@new.com"
        assert stored.active is True

    def test_update_with_new_secret(self, mock_container, ana, credential_service):
        result = runner.invoke(
            app,
            ["user-update", str(ana.id), "--change-secret"],
            input="nouveau\nnouveau\n",
        )

        assert result.exit_code == 0
        assert credential_service.verify(ana.credential.id, "nouveau") is True

    def test_update_unknown_user(self, mock_container):
        result = runner.invoke(app, ["user-update", "42", "--email", "x@x.com"])
        assert result.exit_code == 1

    def test_delete_with_confirmation_declined(self, mock_container, ana, user_service):
        result = runner.invoke(app, ["user-delete", str(ana.id)], input="n\n")

        assert result.exit_code == 0
        assert "annulée" in result.output
        assert user_service.get_by_id(ana.id) is not None

    def test_delete_then_restore(self, mock_container, ana, user_service):
        result = runner.invoke(app, ["user-delete", str(ana.id), "--yes"])
        assert result.exit_code == 0
        assert user_service.get_by_id(ana.id) is None

        result = runner.invoke(app, ["user-restore", str(ana.id)])
        assert result.exit_code == 0
        assert "Utilisateur restauré" in result.output
        assert user_service.get_by_id(ana.id) is not None

    def test_restore_failure_is_a_warning(self, mock_container):
        """Une restauration en échec n'arrête pas la commande."""
        result = runner.invoke(app, ["user-restore", "999"])

        assert result.exit_code == 0
        assert "Avertissement" in result.output

    def test_secret_change(self, mock_container, ana, credential_service):
        result = runner.invoke(
            app, ["user-secret", str(ana.id)], input="nouveau\nnouveau\n"
        )

        assert result.exit_code == 0
        assert "Secret changé" in result.output
        assert credential_service.verify(ana.credential.id, "nouveau") is True


# ============================================================================
# Commandes credential
# ============================================================================


class TestCredentialCommands:

    def test_create_and_list(self, mock_container, credential_service):
        result = runner.invoke(app, ["cred-create", "--secret", "p@ss1"])
        assert result.exit_code == 0
        assert "Credential créée" in result.output

        result = runner.invoke(app, ["cred-list"])
        assert result.exit_code == 0
        assert "p@ss1" not in result.output
        assert len(credential_service.get_all()) == 1

    def test_show_absent(self, mock_container):
        result = runner.invoke(app, ["cred-show", "7"])
        assert result.exit_code == 0
        assert "Aucune credential" in result.output

    def test_delete_in_use_conflicts(self, mock_container, ana, credential_service):
        result = runner.invoke(app, ["cred-delete", str(ana.credential.id)])

        assert result.exit_code == 1
        assert "utilisée" in result.output
        assert credential_service.get_by_id(ana.credential.id) is not None

    def test_update_require_reset(self, mock_container, ana, credential_service):
        result = runner.invoke(
            app, ["cred-update", str(ana.credential.id), "--require-reset"]
        )

        assert result.exit_code == 0
        assert credential_service.get_by_id(ana.credential.id).requires_reset is True

    @pytest.mark.parametrize("secret, exit_code", [("p@ss1", 0), ("mauvais", 1)])
    def test_verify(self, mock_container, ana, secret, exit_code):
        result = runner.invoke(
            app, ["cred-verify", str(ana.credential.id), "--secret", secret]
        )
        assert result.exit_code == exit_code

    def test_restore_unknown_is_a_warning(self, mock_container):
        result = runner.invoke(app, ["cred-restore", "55"])
        assert result.exit_code == 0
        assert "Avertissement" in result.output


class TestErrorHandling:

    def test_persistence_error_exits_cleanly(self):
        """Une panne de stockage donne un message et le code 1, sans traceback."""
        with patch("src.adapters.cli.helpers.Container") as mock_cls:
            container_instance = MagicMock()
            mock_cls.return_value = container_instance
            container_instance.user_service.return_value.get_all.side_effect = (
                PersistenceError("base indisponible")
            )

            result = runner.invoke(app, ["user-list"])

        assert result.exit_code == 1
        assert "base indisponible" in result.output


class TestMiscCommands:

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "credaccess v" in result.output

    def test_info(self):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "Base de données" in result.output
