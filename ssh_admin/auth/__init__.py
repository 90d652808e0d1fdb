"""
Auth: Authentification SSH d'administration

Couvre:
- Restriction d'hôte from= (CIDR, glob, nom exact, négation)
- Liste des clés autorisées
- Authentification par clé publique et par mot de passe
- États de session et cycle de vie des connexions
"""

from .interfaces import (
    IHostAccessPolicy,
    IAuthorizedEntryStore,
    IIdentityBackend,
    IPublicKeyAuthenticator,
    IPasswordAuthenticator,
    ISessionManager,
    Identity,
    RemoteEndpoint,
    PasswordCredential,
    PublicKeyCredential,
    Credential,
    HostPattern,
    HostRestriction,
    Outcome,
    AuthorizedEntry,
    SessionState,
    IdentityBackendError,
    LoginFailedError,
    SessionStateError,
)
from .host_policy import HostAccessPolicy, parse_restriction
from .authorized_keys import AuthorizedEntryStore, MalformedEntryError, parse_entry
from .publickey_authenticator import PublicKeyAuthenticator
from .password_authenticator import PasswordAuthenticator, NOT_IN_ADMIN_GROUP
from .session_manager import SessionManager

__all__ = [
    # Interfaces
    "IHostAccessPolicy",
    "IAuthorizedEntryStore",
    "IIdentityBackend",
    "IPublicKeyAuthenticator",
    "IPasswordAuthenticator",
    "ISessionManager",
    "Identity",
    # Data classes
    "RemoteEndpoint",
    "PasswordCredential",
    "PublicKeyCredential",
    "Credential",
    "HostPattern",
    "HostRestriction",
    "Outcome",
    "AuthorizedEntry",
    "SessionState",
    # Implementations
    "HostAccessPolicy",
    "AuthorizedEntryStore",
    "PublicKeyAuthenticator",
    "PasswordAuthenticator",
    "SessionManager",
    "parse_restriction",
    "parse_entry",
    "NOT_IN_ADMIN_GROUP",
    # Exceptions
    "IdentityBackendError",
    "LoginFailedError",
    "SessionStateError",
    "MalformedEntryError",
]
