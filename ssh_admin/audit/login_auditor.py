"""
Audit - Login Auditor Implementation

Écrit le journal d'accès SSH (login, connect, disconnect) sous forme
d'enregistrements clé/valeur structurés.
"""

from typing import TYPE_CHECKING, Optional

from ..logging import LogEntry, LogLevel, StructuredLogger
from .interfaces import AuditEventType, ILoginAuditor, LoginAttempt

if TYPE_CHECKING:
    from ..auth.interfaces import SessionState


class LoginAuditor(ILoginAuditor):
    """
    Émetteur du journal d'accès.

    Les champs à None sont omis. La déduplication des succès repose sur
    SessionState.mark_authenticated(), appelé par les authentificateurs.

    Example:
        auditor = LoginAuditor(StructuredLogger("ssh_admin.access"))
        auditor.log_login(LoginAttempt("admin", remote, "Password", True))
    """

    def __init__(self, access_logger: StructuredLogger) -> None:
        """
        Args:
            access_logger: Logger du journal d'accès
        """
        self._logger = access_logger

    def log_login(self, attempt: LoginAttempt) -> Optional[LogEntry]:
        """
        Enregistre une tentative de login.

        Args:
            attempt: Tentative à enregistrer

        Returns:
            Entrée écrite (None si filtrée par niveau)
        """
        level = LogLevel.INFO if attempt.successful else LogLevel.WARN
        return self._logger.log(
            level,
            AuditEventType.LOGIN.value,
            correlation_id=attempt.session_id,
            **{
                "username": attempt.username,
                "remote.socket": attempt.remote.socket_description,
                "method": attempt.method,
                "successful": attempt.successful,
                "reason": attempt.reason,
            },
        )

    def log_connect(self, session: "SessionState") -> Optional[LogEntry]:
        return self._log_lifecycle(AuditEventType.CONNECT, session)

    def log_disconnect(self, session: "SessionState") -> Optional[LogEntry]:
        return self._log_lifecycle(AuditEventType.DISCONNECT, session)

    def _log_lifecycle(self, event_type: AuditEventType, session: "SessionState") -> Optional[LogEntry]:
        return self._logger.log(
            LogLevel.INFO,
            event_type.value,
            correlation_id=session.session_id,
            **{
                "username": session.username,
                "remote.socket": session.remote.socket_description,
            },
        )
