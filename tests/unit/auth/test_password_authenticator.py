"""
Tests unitaires PasswordAuthenticator

Règles testées:
    - Succès: backend accepte ET groupe admin
    - Deux motifs de refus distincts dans l'audit
    - Origine distante attachée au credential
    - Un seul audit de succès par session
"""

from typing import List, Set

import pytest

from ssh_admin.audit.interfaces import AuditEventType
from ssh_admin.auth.interfaces import (
    IIdentityBackend,
    Identity,
    IdentityBackendError,
    IPasswordAuthenticator,
    LoginFailedError,
    PasswordCredential,
    SessionState,
)
from ssh_admin.auth.password_authenticator import NOT_IN_ADMIN_GROUP, PasswordAuthenticator
from ssh_admin.logging import LogLevel


# ══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ══════════════════════════════════════════════════════════════════════════════


class FakeIdentity(Identity):
    def __init__(self, username: str, groups: Set[int]):
        self._username = username
        self._groups = groups

    @property
    def username(self) -> str:
        return self._username

    def has_group(self, group_id: int) -> bool:
        return group_id in self._groups


class FakeBackend(IIdentityBackend):
    """Backend en mémoire: utilisateur → (mot de passe, groupes)."""

    def __init__(self, users):
        self._users = users
        self.received: List[PasswordCredential] = []

    def login(self, credential):
        self.received.append(credential)
        known = self._users.get(credential.username)
        if known is None or known[0] != credential.secret:
            raise LoginFailedError("invalid credentials")
        return FakeIdentity(credential.username, known[1])


class BrokenBackend(IIdentityBackend):
    def login(self, credential):
        raise IdentityBackendError("directory unreachable")


@pytest.fixture
def backend():
    return FakeBackend({
        "admin": ("s3cret", {0, 10}),
        "operator": ("op-pass", {100}),
    })


@pytest.fixture
def authenticator(backend, auditor, component_logger):
    return PasswordAuthenticator(backend, admin_group_id=0, auditor=auditor, logger=component_logger)


def login_records(access_logger):
    return access_logger.get_entries_by_message(AuditEventType.LOGIN.value)


# ══════════════════════════════════════════════════════════════════════════════
# TESTS SUCCÈS
# ══════════════════════════════════════════════════════════════════════════════


class TestPasswordSuccess:
    """Tests succès."""

    def test_implements_interface(self, authenticator):
        assert isinstance(authenticator, IPasswordAuthenticator)

    def test_admin_member_accepted(self, authenticator, session, remote, access_logger):
        assert authenticator.authenticate("admin", "s3cret", session, remote) is True
        assert session.authenticated is True
        assert session.username == "admin"

        records = login_records(access_logger)
        assert len(records) == 1
        assert records[0].level == LogLevel.INFO
        assert records[0].extra["method"] == "Password"
        assert records[0].extra["successful"] is True
        assert records[0].extra["remote.socket"] == "10.0.2.7:50022"
        assert "reason" not in records[0].extra

    def test_credential_carries_origin(self, authenticator, backend, session, remote):
        authenticator.authenticate("admin", "s3cret", session, remote)

        assert backend.received[0].origin == remote.address

    def test_password_never_logged(self, authenticator, session, remote, access_logger, component_logger):
        authenticator.authenticate("admin", "s3cret", session, remote)
        authenticator.authenticate("admin", "wrong-one", session, remote)

        for entry in access_logger.get_entries() + component_logger.get_entries():
            assert "s3cret" not in entry.to_json()
            assert "wrong-one" not in entry.to_json()

    def test_success_audited_once(self, authenticator, session, remote, access_logger):
        authenticator.authenticate("admin", "s3cret", session, remote)
        authenticator.authenticate("admin", "s3cret", session, remote)

        records = login_records(access_logger)
        assert len(records) == 1


# ══════════════════════════════════════════════════════════════════════════════
# TESTS REFUS
# ══════════════════════════════════════════════════════════════════════════════


class TestPasswordFailure:
    """Tests refus et motifs d'audit."""

    def test_wrong_password(self, authenticator, session, remote, access_logger):
        assert authenticator.authenticate("admin", "nope", session, remote) is False
        assert session.authenticated is False

        records = login_records(access_logger)
        assert len(records) == 1
        assert records[0].level == LogLevel.WARN
        assert records[0].extra["successful"] is False
        assert records[0].extra["reason"] == "LoginFailedError: invalid credentials"

    def test_not_in_admin_group(self, authenticator, session, remote, access_logger):
        assert authenticator.authenticate("operator", "op-pass", session, remote) is False
        assert session.authenticated is False

        records = login_records(access_logger)
        assert records[0].extra["reason"] == NOT_IN_ADMIN_GROUP

    def test_reasons_are_distinct(self, authenticator, remote, idle_policy, access_logger):
        """Mauvais mot de passe et hors groupe → motifs différents."""
        authenticator.authenticate("admin", "nope", SessionState(remote=remote, idle_policy=idle_policy), remote)
        authenticator.authenticate("operator", "op-pass", SessionState(remote=remote, idle_policy=idle_policy), remote)

        reasons = [r.extra["reason"] for r in login_records(access_logger)]
        assert len(set(reasons)) == 2

    def test_backend_error_rejected(self, auditor, component_logger, session, remote, access_logger):
        authenticator = PasswordAuthenticator(BrokenBackend(), 0, auditor, component_logger)

        assert authenticator.authenticate("admin", "s3cret", session, remote) is False
        assert login_records(access_logger)[0].extra["reason"] == "IdentityBackendError: directory unreachable"

    def test_failure_warned_on_component_logger(self, authenticator, session, remote, component_logger):
        authenticator.authenticate("operator", "op-pass", session, remote)

        warnings = component_logger.get_entries_by_level(LogLevel.WARN)
        assert warnings[0].message == f"Login for operator denied: {NOT_IN_ADMIN_GROUP}"

    def test_custom_admin_group(self, backend, auditor, component_logger, session, remote):
        authenticator = PasswordAuthenticator(backend, admin_group_id=100, auditor=auditor, logger=component_logger)

        assert authenticator.authenticate("operator", "op-pass", session, remote) is True

    def test_failure_after_success_not_audited(self, authenticator, session, remote, access_logger):
        authenticator.authenticate("admin", "s3cret", session, remote)
        authenticator.authenticate("admin", "nope", session, remote)

        assert len(login_records(access_logger)) == 1
