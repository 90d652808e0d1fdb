"""
SSH Admin - Pytest Configuration
Fixtures partagées pour tous les tests.
"""

from pathlib import Path
from typing import Callable

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from ssh_admin.audit import LoginAuditor
from ssh_admin.auth import RemoteEndpoint, SessionState
from ssh_admin.logging import LogConfig, LogLevel, StructuredLogger
from ssh_admin.network import IdleTimeoutPolicy, TimeUnit


def openssh_public_line(private_key, comment: str = "") -> str:
    """Ligne OpenSSH "<algorithm> <base64> [comment]" d'une clé privée cryptography."""
    line = private_key.public_key().public_bytes(
        serialization.Encoding.OpenSSH,
        serialization.PublicFormat.OpenSSH,
    ).decode("ascii")
    return f"{line} {comment}".strip()


@pytest.fixture
def ed25519_line() -> str:
    """Clé publique Ed25519 fraîche au format OpenSSH."""
    return openssh_public_line(ed25519.Ed25519PrivateKey.generate(), "admin@example.org")


@pytest.fixture
def other_ed25519_line() -> str:
    """Seconde clé Ed25519, différente de ed25519_line."""
    return openssh_public_line(ed25519.Ed25519PrivateKey.generate(), "other@example.org")


@pytest.fixture
def ecdsa_line() -> str:
    """Clé publique ECDSA P-256 au format OpenSSH."""
    return openssh_public_line(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture
def component_logger() -> StructuredLogger:
    """Logger composant, niveau DEBUG, capture seule."""
    return StructuredLogger("ssh_admin.server", config=LogConfig(min_level=LogLevel.DEBUG))


@pytest.fixture
def access_logger() -> StructuredLogger:
    """Logger du journal d'accès, capture seule."""
    return StructuredLogger("ssh_admin.access")


@pytest.fixture
def auditor(access_logger: StructuredLogger) -> LoginAuditor:
    return LoginAuditor(access_logger)


@pytest.fixture
def idle_policy() -> IdleTimeoutPolicy:
    return IdleTimeoutPolicy(5, TimeUnit.MINUTES)


@pytest.fixture
def remote() -> RemoteEndpoint:
    return RemoteEndpoint("10.0.2.7", 50022, "admin-host.example.org")


@pytest.fixture
def session(remote: RemoteEndpoint, idle_policy: IdleTimeoutPolicy) -> SessionState:
    return SessionState(remote=remote, idle_policy=idle_policy)


@pytest.fixture
def write_authorized_keys(tmp_path: Path) -> Callable[..., Path]:
    """Écrit une liste de clés autorisées et retourne son chemin."""

    def _write(*lines: str) -> Path:
        path = tmp_path / "authorized_keys"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
