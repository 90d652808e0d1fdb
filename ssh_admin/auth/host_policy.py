"""
Auth - Host Access Policy Implementation

Évaluation des clauses `from="..."` des clés autorisées.

Règles:
    - Pas de clause → autorisé
    - Motif: "!" optionnel, puis réseau CIDR, glob (* ?) ou nom exact
    - Autorisé ssi au moins un motif ALLOW et aucun motif DENY
    - Clause sans aucun ALLOW → refusé
    - Comparaisons sensibles à la casse
"""

import ipaddress
import re
from functools import reduce
from typing import Iterable, Optional, Tuple, Union

from .interfaces import HostPattern, HostRestriction, IHostAccessPolicy, Outcome, RemoteEndpoint, parse_ip


GLOB_CHARS = ("*", "?")

Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def parse_restriction(text: str) -> HostRestriction:
    """
    Parse le contenu d'une clause from= ("p1,!p2,...").

    Les éléments vides sont ignorés.
    """
    return tuple(HostPattern.parse(item) for item in text.split(",") if item.strip())


def is_glob(pattern: str) -> bool:
    return any(c in pattern for c in GLOB_CHARS)


def glob_to_regex(pattern: str) -> "re.Pattern[str]":
    """
    Convertit un glob en regex (à utiliser avec fullmatch).

    "*" → séquence quelconque, "?" → un caractère, le reste littéral.
    """
    escaped = re.escape(pattern)
    regex = escaped.replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(regex)


class HostAccessPolicy(IHostAccessPolicy):
    """
    Évaluateur pur de restriction d'hôte, sans état: partageable entre threads.

    Example:
        policy = HostAccessPolicy()
        restriction = parse_restriction("10.0.0.0/8,!10.0.1.5")
        policy.evaluate(restriction, RemoteEndpoint("10.0.2.7"))  # True
    """

    def evaluate(self, restriction: Optional[HostRestriction], remote: RemoteEndpoint) -> bool:
        """
        Évalue la restriction pour l'extrémité distante.

        Args:
            restriction: Motifs ordonnés (None = aucune restriction)
            remote: Extrémité distante

        Returns:
            True si autorisé
        """
        if restriction is None:
            return True

        saw_allow, saw_deny = self.fold(self.classify(pattern, remote) for pattern in restriction)
        return saw_allow and not saw_deny

    @staticmethod
    def fold(outcomes: Iterable[Outcome]) -> Tuple[bool, bool]:
        """Réduit les résultats en (au moins un ALLOW, au moins un DENY)."""
        return reduce(
            lambda acc, outcome: (acc[0] or outcome is Outcome.ALLOW, acc[1] or outcome is Outcome.DENY),
            outcomes,
            (False, False),
        )

    def classify(self, pattern: HostPattern, remote: RemoteEndpoint) -> Outcome:
        """
        Classe un motif pour l'extrémité distante.

        Returns:
            DENY si correspondance d'un motif négatif, ALLOW si correspondance
            d'un motif positif, DEFER sinon
        """
        if not self.matches(pattern.text, remote):
            return Outcome.DEFER
        return Outcome.DENY if pattern.negated else Outcome.ALLOW

    def matches(self, text: str, remote: RemoteEndpoint) -> bool:
        """
        Teste un motif (sans "!") contre l'extrémité distante.

        Ordre: réseau IP d'abord; si le motif n'est pas un réseau,
        glob contre adresse et nom, sinon égalité exacte avec le nom.
        Le nom n'est demandé (et résolu) qu'après ces étapes.
        """
        network = self._parse_network(text)
        if network is not None:
            return self._address_in_network(network, remote.address)

        if is_glob(text):
            regex = glob_to_regex(text)
            if regex.fullmatch(remote.address):
                return True
            hostname = remote.hostname
            return hostname is not None and regex.fullmatch(hostname) is not None

        hostname = remote.hostname
        return hostname is not None and text == hostname

    @staticmethod
    def _parse_network(text: str) -> Optional[Network]:
        try:
            return ipaddress.ip_network(text.strip(), strict=False)
        except ValueError:
            return None

    @staticmethod
    def _address_in_network(network: Network, address: str) -> bool:
        ip = parse_ip(address)
        if ip is None or ip.version != network.version:
            return False
        return ip in network
