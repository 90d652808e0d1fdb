"""
Tests unitaires Network - Idle Timeout Policy

Règles testées:
    - Timeout de lecture = 2 x timeout d'inactivité, même unité
    - Valeurs non positives ou non numériques rejetées
"""

import pytest

from ssh_admin.network import (
    IIdleTimeoutPolicy,
    IdleTimeoutPolicy,
    InvalidTimeoutError,
    READ_TIMEOUT_FACTOR,
    TimeUnit,
)


class TestReadTimeout:
    """Tests dérivation du timeout de lecture."""

    def test_implements_interface(self) -> None:
        assert isinstance(IdleTimeoutPolicy(1), IIdleTimeoutPolicy)

    @pytest.mark.parametrize("unit", list(TimeUnit))
    def test_read_timeout_doubles_in_same_unit(self, unit) -> None:
        policy = IdleTimeoutPolicy(7, unit)
        assert policy.read_timeout == (14, unit)

    def test_thirty_minutes(self) -> None:
        policy = IdleTimeoutPolicy(30, TimeUnit.MINUTES)

        assert policy.read_timeout == (60, TimeUnit.MINUTES)
        assert policy.idle_timeout_seconds() == 1800
        assert policy.read_timeout_seconds() == 3600

    def test_factor_constant(self) -> None:
        assert READ_TIMEOUT_FACTOR == 2

    def test_fractional_timeout(self) -> None:
        policy = IdleTimeoutPolicy(1.5, TimeUnit.SECONDS)
        assert policy.read_timeout_seconds() == 3.0

    def test_milliseconds_to_seconds(self) -> None:
        assert IdleTimeoutPolicy(500, TimeUnit.MILLISECONDS).idle_timeout_seconds() == pytest.approx(0.5)

    def test_default_unit_seconds(self) -> None:
        assert IdleTimeoutPolicy(10).unit is TimeUnit.SECONDS

    def test_policy_is_immutable(self) -> None:
        policy = IdleTimeoutPolicy(10)
        with pytest.raises(AttributeError):
            policy.timeout = 20


class TestValidation:
    """Tests validation."""

    @pytest.mark.parametrize("value", [0, -1, -0.5])
    def test_non_positive_rejected(self, value) -> None:
        with pytest.raises(InvalidTimeoutError):
            IdleTimeoutPolicy(value)

    @pytest.mark.parametrize("value", ["10", None, True])
    def test_non_numeric_rejected(self, value) -> None:
        with pytest.raises(InvalidTimeoutError):
            IdleTimeoutPolicy(value)

    def test_unknown_unit_rejected(self) -> None:
        with pytest.raises(InvalidTimeoutError):
            IdleTimeoutPolicy(10, "fortnights")


class TestFromConfig:
    """Tests construction depuis la configuration."""

    def test_unit_by_name(self) -> None:
        policy = IdleTimeoutPolicy.from_config(5, "MINUTES")
        assert policy.unit is TimeUnit.MINUTES

    def test_unit_enum(self) -> None:
        assert IdleTimeoutPolicy.from_config(5, TimeUnit.HOURS).unit is TimeUnit.HOURS

    def test_unknown_unit_name(self) -> None:
        with pytest.raises(InvalidTimeoutError, match="Unknown time unit"):
            IdleTimeoutPolicy.from_config(5, "weeks")
