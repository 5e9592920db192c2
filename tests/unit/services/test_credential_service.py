"""
Tests pour CredentialService.

Couvre la validation du secret, la préparation (hachage, horodatage),
les opérations autonomes et la sécurité référentielle à la suppression.
"""

from datetime import datetime, timedelta

import pytest

from src.core.entities.user import Credential, HashedSecret, PendingRotation
from src.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from src.infrastructure.persistence.hash_service import hash_secret, verify_secret
from src.services.credential_service import CredentialService, validate_id


class TestValidateId:
    """Tests pour validate_id."""

    @pytest.mark.parametrize("value", [None, 0, -1, True, "3", 2.0])
    def test_rejects_invalid_ids(self, value):
        with pytest.raises(InvalidArgumentError):
            validate_id(value)

    def test_accepts_positive_int(self):
        assert validate_id(4) == 4


class TestValidate:
    """Tests pour CredentialService.validate."""

    def test_none_credential(self):
        with pytest.raises(InvalidArgumentError):
            CredentialService.validate(None)

    def test_missing_secret(self):
        with pytest.raises(InvalidArgumentError):
            CredentialService.validate(Credential())

    @pytest.mark.parametrize("plaintext", ["", "   "])
    def test_empty_plaintext(self, plaintext):
        with pytest.raises(InvalidArgumentError):
            CredentialService.validate(Credential.from_plaintext(plaintext))

    def test_plaintext_limited_to_72_bytes(self):
        CredentialService.validate(Credential.from_plaintext("x" * 72))
        with pytest.raises(InvalidArgumentError):
            CredentialService.validate(Credential.from_plaintext("x" * 73))
        with pytest.raises(InvalidArgumentError):
            CredentialService.validate(Credential.from_plaintext("é" * 37))

    def test_hashed_secret_needs_digest_and_salt(self):
        with pytest.raises(InvalidArgumentError):
            CredentialService.validate(Credential(secret=HashedSecret(digest="", salt="s")))
        with pytest.raises(InvalidArgumentError):
            CredentialService.validate(Credential(secret=HashedSecret(digest="d", salt="")))

    def test_hashed_salt_too_long(self):
        with pytest.raises(InvalidArgumentError):
            CredentialService.validate(
                Credential(secret=HashedSecret(digest="d", salt="s" * 65))
            )


class TestPrepare:
    """Tests pour prepare_for_insert et prepare_for_update."""

    def test_insert_hashes_and_stamps(self):
        credential = Credential.from_plaintext("p@ss1")
        CredentialService.prepare_for_insert(credential)

        assert isinstance(credential.secret, HashedSecret)
        assert credential.digest != "p@ss1"
        assert verify_secret("p@ss1", credential.secret)
        assert credential.last_changed is not None

    def test_insert_refuses_hashed_secret(self):
        with pytest.raises(InvalidArgumentError):
            CredentialService.prepare_for_insert(Credential(secret=hash_secret("x")))

    def test_update_keeps_hashed_secret(self):
        secret = hash_secret("p@ss1")
        credential = Credential(id=1, secret=secret, last_changed=datetime(2000, 1, 1))
        CredentialService.prepare_for_update(credential)

        assert credential.secret is secret
        assert credential.last_changed > datetime(2000, 1, 1)

    def test_update_rehashes_pending_rotation(self):
        credential = Credential(id=1, secret=PendingRotation("nouveau"))
        CredentialService.prepare_for_update(credential)

        assert credential.needs_hashing is False
        assert verify_secret("nouveau", credential.secret)


class TestStandaloneOperations:
    """Opérations autonomes (transaction dédiée)."""

    def test_create(self, credential_service):
        credential = Credential.from_plaintext("p@ss1")
        credential_service.create(credential)

        assert credential.id is not None and credential.id > 0
        assert credential.needs_hashing is False
        stored = credential_service.get_by_id(credential.id)
        assert stored.digest == credential.digest

    def test_create_failure_leaves_caller_untouched(self, credential_service):
        credential = Credential.from_plaintext("")
        with pytest.raises(InvalidArgumentError):
            credential_service.create(credential)
        assert credential.id is None
        assert credential.needs_hashing is True

    def test_create_with_hashed_secret_is_rejected(self, credential_service):
        credential = Credential(secret=hash_secret("x"))
        with pytest.raises(InvalidArgumentError):
            credential_service.create(credential)
        assert credential.id is None
        assert credential_service.get_all() == []

    def test_update_without_rotation_keeps_digest(self, credential_service):
        credential = credential_service.create(Credential.from_plaintext("p@ss1"))
        digest = credential.digest
        credential.requires_reset = True
        credential_service.update(credential)

        stored = credential_service.get_by_id(credential.id)
        assert stored.digest == digest
        assert stored.requires_reset is True

    def test_update_with_rotation_rehashes(self, credential_service):
        credential = credential_service.create(Credential.from_plaintext("p@ss1"))
        old_digest = credential.digest
        credential.rotate("nouveau")
        credential_service.update(credential)

        assert credential.digest != old_digest
        assert credential_service.verify(credential.id, "nouveau") is True
        assert credential_service.verify(credential.id, "p@ss1") is False

    def test_update_refreshes_last_changed(self, credential_service):
        credential = credential_service.create(Credential.from_plaintext("p@ss1"))
        credential.last_changed = datetime.now() - timedelta(days=30)
        credential_service.update(credential)
        assert credential.last_changed > datetime.now() - timedelta(days=1)

    def test_update_requires_positive_id(self, credential_service):
        with pytest.raises(InvalidArgumentError):
            credential_service.update(Credential(secret=hash_secret("x")))

    def test_delete_and_restore(self, credential_service):
        credential = credential_service.create(Credential.from_plaintext("p@ss1"))

        credential_service.delete(credential.id)
        assert credential_service.get_by_id(credential.id) is None

        credential_service.restore(credential.id)
        assert credential_service.get_by_id(credential.id) is not None

    def test_delete_unknown_raises_not_found(self, credential_service):
        with pytest.raises(NotFoundError):
            credential_service.delete(404)

    @pytest.mark.parametrize("bad_id", [0, -3])
    def test_invalid_ids(self, credential_service, bad_id):
        with pytest.raises(InvalidArgumentError):
            credential_service.delete(bad_id)
        with pytest.raises(InvalidArgumentError):
            credential_service.restore(bad_id)
        with pytest.raises(InvalidArgumentError):
            credential_service.get_by_id(bad_id)


class TestReferentialSafety:
    """Une credential utilisée par un utilisateur actif ne peut pas être supprimée."""

    def test_delete_in_use_raises_conflict(self, credential_service, user_service, make_user):
        user = user_service.create(make_user())

        with pytest.raises(ConflictError, match="ana"):
            credential_service.delete(user.credential.id)
        assert credential_service.get_by_id(user.credential.id) is not None

    def test_delete_allowed_once_owner_is_deleted(
        self, credential_service, user_service, user_repo, make_user
    ):
        user = user_service.create(make_user())
        user_repo.soft_delete(user.id)

        credential_service.delete(user.credential.id)
        assert credential_service.get_by_id(user.credential.id) is None


class TestVerify:
    """Tests pour verify."""

    def test_verify_matches_only_stored_secret(self, credential_service):
        credential = credential_service.create(Credential.from_plaintext("p@ss1"))
        assert credential_service.verify(credential.id, "p@ss1") is True
        assert credential_service.verify(credential.id, "P@ss1") is False

    def test_verify_unknown_raises_not_found(self, credential_service):
        with pytest.raises(NotFoundError):
            credential_service.verify(99, "x")
