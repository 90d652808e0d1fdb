"""
Auth - Password Authenticator Implementation

Authentification par mot de passe déléguée au backend d'identité, avec
appartenance obligatoire au groupe d'administration.

Deux motifs de refus distincts dans l'audit:
    - credential rejeté par le backend (motif fourni par le backend)
    - identité valide mais hors du groupe admin
Le client ne reçoit qu'un échec, sans motif.
"""

from typing import Optional

from ..audit.interfaces import ILoginAuditor, LoginAttempt, PASSWORD_METHOD
from ..logging import StructuredLogger
from .interfaces import (
    IIdentityBackend,
    IPasswordAuthenticator,
    IdentityBackendError,
    PasswordCredential,
    RemoteEndpoint,
    SessionState,
)


NOT_IN_ADMIN_GROUP = "not member of admin group"


class PasswordAuthenticator(IPasswordAuthenticator):
    """
    Authentificateur mot de passe.

    Example:
        authenticator = PasswordAuthenticator(backend, admin_group_id=0, auditor=auditor, logger=logger)
        ok = authenticator.authenticate("admin", "secret", session, session.remote)
    """

    def __init__(
        self,
        backend: IIdentityBackend,
        admin_group_id: int,
        auditor: ILoginAuditor,
        logger: StructuredLogger,
    ) -> None:
        """
        Args:
            backend: Backend d'identité externe
            admin_group_id: Groupe requis
            auditor: Journal d'accès
            logger: Logger composant
        """
        self._backend = backend
        self.admin_group_id = admin_group_id
        self._auditor = auditor
        self._logger = logger

    def authenticate(self, username: str, password: str, session: SessionState, remote: RemoteEndpoint) -> bool:
        """
        Authentifie un couple utilisateur / mot de passe.

        Args:
            username: Utilisateur annoncé
            password: Mot de passe présenté
            session: Session de la connexion
            remote: Extrémité distante (attachée au credential comme origine)

        Returns:
            True si le backend accepte et que l'identité est membre du groupe admin
        """
        credential = PasswordCredential(username=username, secret=password).with_origin(remote)
        successful = False
        reason: Optional[str] = None

        try:
            identity = self._backend.login(credential)
            if identity.has_group(self.admin_group_id):
                successful = True
            else:
                reason = NOT_IN_ADMIN_GROUP
                self._logger.warn(
                    f"Login for {username} denied: {reason}",
                    correlation_id=session.session_id,
                    admin_group_id=self.admin_group_id,
                )
        except IdentityBackendError as e:
            reason = f"{type(e).__name__}: {e}"
            self._logger.warn(f"Login for {username} failed: {reason}", correlation_id=session.session_id)

        if successful:
            if session.mark_authenticated(username):
                self._audit(username, session, remote, True, None)
        elif not session.authenticated:
            self._audit(username, session, remote, False, reason)

        return successful

    def _audit(
        self,
        username: str,
        session: SessionState,
        remote: RemoteEndpoint,
        successful: bool,
        reason: Optional[str],
    ) -> None:
        self._auditor.log_login(
            LoginAttempt(
                username=username,
                remote=remote,
                method=PASSWORD_METHOD,
                successful=successful,
                reason=reason,
                session_id=session.session_id,
            )
        )
