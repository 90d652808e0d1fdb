"""
Server - Factory

Assemble le service SSH d'administration depuis la configuration.
"""

from typing import Callable, Optional

from ..audit import LoginAuditor
from ..auth import (
    AuthorizedEntryStore,
    HostAccessPolicy,
    IIdentityBackend,
    PasswordAuthenticator,
    PublicKeyAuthenticator,
    SessionManager,
)
from ..core import AdminSshConfig, ConfigValidator, KeyCodec
from ..logging import LogConfig, LogLevel, StructuredLogger, stream_handler
from ..network import IdleTimeoutPolicy
from .admin_server import AdminServerError, AdminSshServer, ShellHandler


ACCESS_LOGGER_NAME = "ssh_admin.access"
SERVER_LOGGER_NAME = "ssh_admin.server"


def build_admin_server(
    config: AdminSshConfig,
    backend: Optional[IIdentityBackend] = None,
    shell_handler: Optional[ShellHandler] = None,
    access_handler: Optional[Callable[[str], None]] = None,
    log_handler: Optional[Callable[[str], None]] = None,
    log_level: LogLevel = LogLevel.INFO,
) -> AdminSshServer:
    """
    Construit un AdminSshServer prêt à démarrer.

    Args:
        config: Configuration validée
        backend: Backend d'identité (None = pas d'authentification par mot de passe)
        shell_handler: Shell exécuté pour une session authentifiée
        access_handler: Sink du journal d'accès (défaut: stderr)
        log_handler: Sink du log composant (défaut: stderr)
        log_level: Niveau minimum du log composant

    Returns:
        Serveur non démarré

    Raises:
        AdminServerError: Configuration invalide
    """
    logger = StructuredLogger(
        SERVER_LOGGER_NAME,
        config=LogConfig(min_level=log_level),
        output_handler=log_handler or stream_handler(),
    )
    access_logger = StructuredLogger(ACCESS_LOGGER_NAME, output_handler=access_handler or stream_handler())

    result = ConfigValidator().validate(config)
    for warning in result.warnings:
        logger.warn(warning.message, rule=warning.rule_id, location=warning.location)
    if not result.valid:
        messages = "; ".join(f"{e.rule_id}: {e.message}" for e in result.errors)
        raise AdminServerError(f"Invalid SSH admin configuration: {messages}")

    auditor = LoginAuditor(access_logger)
    idle_policy = IdleTimeoutPolicy(config.idle_timeout, config.idle_timeout_unit)
    sessions = SessionManager(auditor, idle_policy)

    publickey_authenticator = PublicKeyAuthenticator(
        AuthorizedEntryStore(config.authorized_keys, logger),
        HostAccessPolicy(),
        KeyCodec(),
        auditor,
        logger,
    )
    password_authenticator = None
    if backend is not None:
        password_authenticator = PasswordAuthenticator(backend, config.admin_group_id, auditor, logger)

    return AdminSshServer(
        config,
        sessions,
        password_authenticator,
        publickey_authenticator,
        logger,
        shell_handler=shell_handler,
    )
