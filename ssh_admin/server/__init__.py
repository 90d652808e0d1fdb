"""
Server

Transport SSH (paramiko) du service d'administration.
"""

from .transport import AdminServerInterface
from .admin_server import AdminSshServer, AdminServerError, ShellHandler
from .factory import build_admin_server, ACCESS_LOGGER_NAME, SERVER_LOGGER_NAME

__all__ = [
    # Implementations
    "AdminServerInterface",
    "AdminSshServer",
    "build_admin_server",
    "ShellHandler",
    "ACCESS_LOGGER_NAME",
    "SERVER_LOGGER_NAME",
    # Exceptions
    "AdminServerError",
]
