"""
Network - Idle Timeout Policy

Calcule les timeouts transmis au transport SSH.

Le timeout de lecture vaut toujours le double du timeout d'inactivité:
le transport ne doit pas fermer une connexion pendant l'aller-retour
keepalive déclenché par l'inactivité.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from .interfaces import IIdleTimeoutPolicy, TimeUnit


class InvalidTimeoutError(Exception):
    """Configuration timeout invalide."""

    pass


READ_TIMEOUT_FACTOR: int = 2


@dataclass(frozen=True)
class IdleTimeoutPolicy(IIdleTimeoutPolicy):
    """
    Politique de timeout d'inactivité d'une session.

    Attributes:
        timeout: Valeur configurée (> 0)
        unit: Unité de la valeur

    Example:
        policy = IdleTimeoutPolicy(30, TimeUnit.MINUTES)
        policy.read_timeout  # (60, TimeUnit.MINUTES)
    """

    timeout: float
    unit: TimeUnit = TimeUnit.SECONDS

    def __post_init__(self) -> None:
        """Validation des contraintes."""
        if not isinstance(self.unit, TimeUnit):
            raise InvalidTimeoutError(f"Unknown time unit: {self.unit!r}")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise InvalidTimeoutError(f"idle timeout must be a number, got {self.timeout!r}")
        if self.timeout <= 0:
            raise InvalidTimeoutError(f"idle timeout must be positive, got {self.timeout}")

    @classmethod
    def from_config(cls, timeout: float, unit: Union[str, TimeUnit]) -> "IdleTimeoutPolicy":
        """
        Construit la politique depuis des valeurs de configuration.

        Args:
            timeout: Valeur du timeout
            unit: Unité (nom ou TimeUnit)

        Raises:
            InvalidTimeoutError: Unité inconnue ou valeur invalide
        """
        if not isinstance(unit, TimeUnit):
            try:
                unit = TimeUnit(str(unit).lower())
            except ValueError:
                raise InvalidTimeoutError(f"Unknown time unit: {unit!r}")
        return cls(timeout, unit)

    @property
    def read_timeout(self) -> Tuple[float, TimeUnit]:
        """Timeout de lecture transport, dans la même unité."""
        return self.timeout * READ_TIMEOUT_FACTOR, self.unit

    def idle_timeout_seconds(self) -> float:
        return self.unit.to_seconds(self.timeout)

    def read_timeout_seconds(self) -> float:
        value, unit = self.read_timeout
        return unit.to_seconds(value)
