"""
Logging - Structured Logger

Logger JSON structuré partagé par les threads de connexion SSH.

Règles:
    - Une entrée = une ligne JSON, jamais entrelacée avec une autre
    - Timestamp ISO 8601 UTC avec millisecondes
    - Valeurs None omises (comportement NetLogger "omitNullValues")
    - Secrets masqués avant sortie
"""

import sys
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional, TextIO

from .interfaces import (
    IStructuredLogger,
    ISensitiveMasker,
    LogConfig,
    LogEntry,
    LogLevel,
)
from .sensitive_masker import SensitiveMasker


class MissingRequiredFieldError(Exception):
    """Champ obligatoire manquant."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Required field missing: {field_name}")


def stream_handler(stream: Optional[TextIO] = None) -> Callable[[str], None]:
    """
    Crée un handler écrivant une ligne JSON par entrée.

    Args:
        stream: Flux cible (défaut: sys.stderr)

    Returns:
        Handler utilisable comme output_handler
    """
    target = stream or sys.stderr

    def _write(line: str) -> None:
        target.write(line + "\n")
        target.flush()

    return _write


def file_handler(path: str) -> Callable[[str], None]:
    """
    Crée un handler ajoutant les entrées à un fichier (append-only).

    Args:
        path: Chemin du fichier de log

    Returns:
        Handler utilisable comme output_handler
    """

    def _append(line: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    return _append


class StructuredLogger(IStructuredLogger):
    """
    Logger JSON structuré, thread-safe.

    L'écriture d'une entrée (capture + output) est protégée par un verrou:
    les champs d'un enregistrement ne sont jamais mélangés avec ceux d'un autre.

    Example:
        logger = StructuredLogger("ssh_admin.access", output_handler=stream_handler())
        logger.info("ssh_admin.login", username="admin", successful=True)
    """

    def __init__(
        self,
        name: str,
        config: Optional[LogConfig] = None,
        masker: Optional[ISensitiveMasker] = None,
        output_handler: Optional[Callable[[str], None]] = None,
    ) -> None:
        """
        Initialise le logger structuré.

        Args:
            name: Nom du logger (identifiant composant)
            config: Configuration optionnelle
            masker: Masker pour données sensibles
            output_handler: Sink recevant chaque ligne JSON (None = capture seule)

        Raises:
            ValueError: Si name vide
        """
        if not name or not name.strip():
            raise ValueError("Logger name cannot be empty")

        self._name = name.strip()
        self._config = config or LogConfig()
        self._masker = masker or SensitiveMasker()
        self._output_handler = output_handler
        self._entries: Deque[LogEntry] = deque(maxlen=self._config.max_captured_entries)
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        """Retourne le nom du logger."""
        return self._name

    @property
    def config(self) -> LogConfig:
        """Retourne la configuration."""
        return self._config

    def log(
        self,
        level: LogLevel,
        message: str,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> Optional[LogEntry]:
        """
        Crée et émet une entrée structurée.

        Processus:
            1. Vérifie niveau >= min_level
            2. Omet les valeurs None, masque les secrets
            3. Crée LogEntry horodaté
            4. Capture + output sous verrou

        Args:
            level: Niveau de log
            message: Message à logger
            correlation_id: Identifiant de session (optionnel)
            **extra: Données supplémentaires

        Returns:
            LogEntry créé ou None si filtré

        Raises:
            MissingRequiredFieldError: Si message vide
        """
        if not self._should_log(level):
            return None

        if not message:
            raise MissingRequiredFieldError("message")

        fields: Dict[str, Any] = {}
        if extra and self._config.include_extra:
            fields = dict(extra)
            if self._config.omit_none_values:
                fields = {k: v for k, v in fields.items() if v is not None}
            if self._config.mask_sensitive:
                fields = self._masker.mask(fields)

        entry = LogEntry(
            timestamp=self._generate_timestamp(),
            level=level,
            logger_name=self._name,
            message=message,
            correlation_id=correlation_id,
            extra=fields,
        )

        json_output = entry.to_json()
        with self._lock:
            self._entries.append(entry)
            if self._output_handler:
                self._output_handler(json_output)

        return entry

    def _generate_timestamp(self) -> str:
        """
        Génère timestamp ISO 8601 UTC avec millisecondes.

        Format: 2024-12-04T14:30:00.123Z
        """
        now = datetime.now(timezone.utc)
        return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

    def _should_log(self, level: LogLevel) -> bool:
        return LogLevel.get_priority(level) >= LogLevel.get_priority(self._config.min_level)

    def debug(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau DEBUG."""
        return self.log(LogLevel.DEBUG, message, **extra)

    def info(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau INFO."""
        return self.log(LogLevel.INFO, message, **extra)

    def warn(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau WARN."""
        return self.log(LogLevel.WARN, message, **extra)

    def error(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau ERROR."""
        return self.log(LogLevel.ERROR, message, **extra)

    def critical(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau CRITICAL."""
        return self.log(LogLevel.CRITICAL, message, **extra)

    def get_entries(self) -> List[LogEntry]:
        """
        Retourne les entrées capturées (les plus récentes, bornées).

        Returns:
            Liste des LogEntry
        """
        with self._lock:
            return list(self._entries)

    def clear_entries(self) -> None:
        """Efface les entrées capturées."""
        with self._lock:
            self._entries.clear()

    def get_entries_by_level(self, level: LogLevel) -> List[LogEntry]:
        """Filtre les entrées par niveau."""
        return [e for e in self.get_entries() if e.level == level]

    def get_entries_by_message(self, message: str) -> List[LogEntry]:
        """Filtre les entrées par message (nom d'événement)."""
        return [e for e in self.get_entries() if e.message == message]
