"""
Audit - Interfaces

Contrats pour le journal d'accès du service SSH d'administration.

Règles:
    - Un enregistrement "login" par tentative significative
    - Jamais deux enregistrements de succès pour une même session
    - "connect"/"disconnect" une fois par connexion, authentifiée ou non
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..auth.interfaces import RemoteEndpoint, SessionState
    from ..logging import LogEntry


class AuditEventType(Enum):
    """Événements du journal d'accès."""

    LOGIN = "ssh_admin.login"
    CONNECT = "ssh_admin.connect"
    DISCONNECT = "ssh_admin.disconnect"


PASSWORD_METHOD = "Password"


@dataclass(frozen=True)
class LoginAttempt:
    """
    Tentative de login auditée.

    Attributes:
        username: Utilisateur annoncé par le client
        remote: Extrémité distante
        method: "Password" ou "PublicKey (<algorithme> <empreinte>)"
        successful: Résultat
        reason: Motif d'échec (jamais renvoyé au client)
        timestamp: Horodatage UTC
        session_id: Session concernée
    """

    username: str
    remote: "RemoteEndpoint"
    method: str
    successful: bool
    reason: Optional[str] = None
    session_id: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ILoginAuditor(ABC):
    """
    Interface émetteur du journal d'accès.

    Le sink doit accepter des ajouts concurrents avec atomicité par enregistrement.
    """

    @abstractmethod
    def log_login(self, attempt: LoginAttempt) -> "Optional[LogEntry]":
        """INFO si succès, WARN si échec."""
        pass

    @abstractmethod
    def log_connect(self, session: "SessionState") -> "Optional[LogEntry]":
        pass

    @abstractmethod
    def log_disconnect(self, session: "SessionState") -> "Optional[LogEntry]":
        pass
