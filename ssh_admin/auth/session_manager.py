"""
Auth - Session Manager Implementation

Cycle de vie des sessions SSH: une session par connexion, créée à
l'établissement et détruite à la fermeture, quel que soit le résultat
de l'authentification.
"""

import threading
from typing import Dict, List, Optional

from ..audit.interfaces import ILoginAuditor
from ..network.idle_timeout import IdleTimeoutPolicy
from .interfaces import ISessionManager, RemoteEndpoint, SessionState


class SessionManager(ISessionManager):
    """
    Registre des sessions actives.

    Note:
        Stockage en mémoire: les sessions ne survivent pas à la connexion.

    Example:
        manager = SessionManager(auditor, IdleTimeoutPolicy(5, TimeUnit.MINUTES))
        session = manager.open_session(RemoteEndpoint("10.0.0.1", 50022))
        ...
        manager.close_session(session.session_id)
    """

    def __init__(self, auditor: ILoginAuditor, idle_policy: IdleTimeoutPolicy) -> None:
        """
        Args:
            auditor: Journal d'accès (connect/disconnect)
            idle_policy: Timeouts appliqués à chaque nouvelle session
        """
        self._auditor = auditor
        self.idle_policy = idle_policy
        self._sessions: Dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def open_session(self, remote: RemoteEndpoint) -> SessionState:
        """
        Crée la session d'une nouvelle connexion et audite "connect".

        Args:
            remote: Extrémité distante

        Returns:
            Session non authentifiée
        """
        session = SessionState(remote=remote, idle_policy=self.idle_policy)
        with self._lock:
            self._sessions[session.session_id] = session

        self._auditor.log_connect(session)
        return session

    def close_session(self, session_id: str) -> bool:
        """
        Ferme une session et audite "disconnect" (une seule fois).

        Args:
            session_id: Identifiant session

        Returns:
            True si fermée, False si inexistante ou déjà fermée
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)

        if session is None:
            return False

        self._auditor.log_disconnect(session)
        return True

    def get_session(self, session_id: str) -> Optional[SessionState]:
        """
        Récupère session par ID.

        Returns:
            Session si active, None sinon
        """
        if not session_id:
            return None

        with self._lock:
            return self._sessions.get(session_id)

    def active_sessions(self) -> List[SessionState]:
        """Sessions actives, les plus anciennes en premier."""
        with self._lock:
            sessions = list(self._sessions.values())

        sessions.sort(key=lambda s: s.created_at)
        return sessions
