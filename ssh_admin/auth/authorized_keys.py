"""
Auth - Authorized Entry Store Implementation

Lecture de la liste des clés autorisées (format authorized_keys restreint).

Format d'une ligne:
    [from="motif1,motif2,..."] <algorithme> <clé-base64> [commentaire]

Règles:
    - Lignes vides et commentaires (#) ignorés
    - Ligne invalide (y compris non UTF-8) → ignorée et loggée, le parcours continue
    - Fichier absent → aucune entrée
    - Fichier relu à chaque appel (modifiable sans redémarrage)
"""

import base64
import binascii
import re
from pathlib import Path
from typing import Iterator, Optional, Union

from ..logging import StructuredLogger
from .host_policy import parse_restriction
from .interfaces import AuthorizedEntry, HostRestriction, IAuthorizedEntryStore


class MalformedEntryError(Exception):
    """Ligne de clé autorisée invalide."""

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}")


FROM_OPTION = re.compile(r'^from="([^"]*)"$')


def decode_line(raw: bytes, line_number: int = 0) -> str:
    """
    Décode une ligne brute du fichier en UTF-8.

    Raises:
        MalformedEntryError: Octets non UTF-8
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedEntryError(line_number, f"invalid UTF-8 at byte {e.start}")


def is_ignorable(line: str) -> bool:
    """True pour une ligne vide ou un commentaire."""
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def parse_entry(line: str, line_number: int = 0) -> AuthorizedEntry:
    """
    Parse une ligne de la liste des clés autorisées.

    Args:
        line: Ligne brute (non vide, non commentaire)
        line_number: Numéro de ligne pour les messages

    Returns:
        AuthorizedEntry

    Raises:
        MalformedEntryError: Clause from= non terminée, champs manquants,
            base64 invalide
    """
    tokens = line.split()
    if not tokens:
        raise MalformedEntryError(line_number, "empty line")

    restriction: Optional[HostRestriction] = None
    if tokens[0].startswith("from="):
        match = FROM_OPTION.match(tokens[0])
        if match is None:
            raise MalformedEntryError(line_number, "unparseable from= clause")
        restriction = parse_restriction(match.group(1))
        tokens = tokens[1:]

    if len(tokens) < 2:
        raise MalformedEntryError(line_number, "expected '<algorithm> <base64-key>'")

    algorithm, encoded = tokens[0], tokens[1]
    try:
        blob = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise MalformedEntryError(line_number, "invalid base64 key material")
    if not blob:
        raise MalformedEntryError(line_number, "empty key material")

    comment = " ".join(tokens[2:]) or None
    return AuthorizedEntry(
        restriction=restriction,
        algorithm=algorithm,
        key_blob=blob,
        comment=comment,
        line_number=line_number,
    )


class AuthorizedEntryStore(IAuthorizedEntryStore):
    """
    Liste des clés autorisées adossée à un fichier.

    Pas de cache: chaque appel à load() relit le fichier.

    Example:
        store = AuthorizedEntryStore("/etc/ssh_admin/authorized_keys", logger)
        for entry in store.load():
            ...
    """

    def __init__(self, path: Union[str, Path], logger: StructuredLogger) -> None:
        """
        Args:
            path: Chemin de la liste des clés autorisées
            logger: Logger composant (diagnostics)
        """
        self.path = Path(path)
        self._logger = logger

    def load(self) -> Iterator[AuthorizedEntry]:
        """
        Séquence paresseuse des entrées valides, dans l'ordre du fichier.

        Yields:
            AuthorizedEntry pour chaque ligne valide
        """
        try:
            with open(self.path, "rb") as f:
                for line_number, raw in enumerate(f, start=1):
                    try:
                        line = decode_line(raw, line_number)
                        if is_ignorable(line):
                            continue
                        entry = parse_entry(line, line_number)
                    except MalformedEntryError as e:
                        self._logger.warn(
                            "Skipping malformed authorized key",
                            path=str(self.path),
                            line=e.line_number,
                            reason=e.reason,
                        )
                        continue
                    yield entry
        except FileNotFoundError:
            self._logger.debug("Authorized keys file not found", path=str(self.path))
        except OSError as e:
            self._logger.error("Failed to read authorized keys", path=str(self.path), error=str(e))
