"""
Auth - Public Key Authenticator Implementation

Authentification par clé publique contre la liste des clés autorisées.

Règles:
    - Restriction d'hôte évaluée AVANT le décodage de la clé
    - Succès sur la première clé égale (ordre du fichier)
    - Le transport peut appeler authenticate() plusieurs fois pour une même
      clé (sonde puis signature): un seul enregistrement d'audit par session
"""

from ..audit.interfaces import ILoginAuditor, LoginAttempt
from ..core.interfaces import IKeyCodec, PublicKey
from ..core.key_codec import KeyDecodeError
from ..logging import StructuredLogger
from .interfaces import (
    AuthorizedEntry,
    IAuthorizedEntryStore,
    IHostAccessPolicy,
    IPublicKeyAuthenticator,
    PublicKeyCredential,
    RemoteEndpoint,
    SessionState,
)


class PublicKeyAuthenticator(IPublicKeyAuthenticator):
    """
    Authentificateur clé publique.

    Example:
        authenticator = PublicKeyAuthenticator(store, policy, codec, auditor, logger)
        ok = authenticator.authenticate("admin", key, session, session.remote)
    """

    def __init__(
        self,
        store: IAuthorizedEntryStore,
        policy: IHostAccessPolicy,
        codec: IKeyCodec,
        auditor: ILoginAuditor,
        logger: StructuredLogger,
    ) -> None:
        self._store = store
        self._policy = policy
        self._codec = codec
        self._auditor = auditor
        self._logger = logger

    def authenticate(self, username: str, key: PublicKey, session: SessionState, remote: RemoteEndpoint) -> bool:
        """
        Authentifie une clé présentée.

        Args:
            username: Utilisateur annoncé
            key: Clé présentée par le client
            session: Session de la connexion
            remote: Extrémité distante

        Returns:
            True si la clé figure dans une entrée autorisée pour cet hôte
        """
        credential = PublicKeyCredential(username=username, key=key).with_origin(remote)
        self._logger.debug(
            "Public key authentication",
            correlation_id=session.session_id,
            username=credential.username,
            algorithm=key.algorithm,
            origin=credential.origin,
        )

        already_authenticated = session.authenticated
        successful = False
        try:
            presented = self._codec.decode(key.algorithm, key.blob)
        except KeyDecodeError as e:
            self._logger.warn("Cannot decode presented public key", correlation_id=session.session_id, error=str(e))
            presented = None

        if presented is not None:
            successful = any(self._matches(entry, presented, remote) for entry in self._store.load())

        if successful:
            if session.mark_authenticated(username):
                self._audit(credential, session, remote, True)
        elif not already_authenticated and not session.authenticated:
            self._audit(credential, session, remote, False)

        return successful

    def _matches(self, entry: AuthorizedEntry, presented: PublicKey, remote: RemoteEndpoint) -> bool:
        if not self._policy.evaluate(entry.restriction, remote):
            return False

        try:
            authorized = self._codec.decode(entry.algorithm, entry.key_blob)
        except KeyDecodeError as e:
            self._logger.warn("Can't decode public key from file", line=entry.line_number, error=str(e))
            return False

        return authorized == presented

    def _audit(
        self, credential: PublicKeyCredential, session: SessionState, remote: RemoteEndpoint, successful: bool
    ) -> None:
        key = credential.key
        method = f"PublicKey ({key.algorithm} {self._codec.fingerprint(key)})"
        self._auditor.log_login(
            LoginAttempt(
                username=credential.username,
                remote=remote,
                method=method,
                successful=successful,
                session_id=session.session_id,
            )
        )
