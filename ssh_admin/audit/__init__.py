"""
Audit

Journal d'accès du service SSH d'administration:
- login (succès INFO, échec WARN)
- connect / disconnect
"""
from .interfaces import (
    ILoginAuditor,
    LoginAttempt,
    AuditEventType,
    PASSWORD_METHOD,
)
from .login_auditor import LoginAuditor

__all__ = [
    # Interfaces
    "ILoginAuditor",
    # Data classes
    "LoginAttempt",
    "AuditEventType",
    "PASSWORD_METHOD",
    # Implementations
    "LoginAuditor",
]
