"""
Tests for machine configuration defaults and environment overrides.
"""

import pytest
from valgol.config import MachineConfig


class TestMachineConfig:
    """Tests for MachineConfig."""

    def test_defaults(self):
        config = MachineConfig()
        assert config.print_area_size == 100
        assert config.epsilon == 0.000001
        assert config.max_steps is None

    def test_rejects_empty_print_area(self):
        with pytest.raises(ValueError):
            MachineConfig(print_area_size=0)

    def test_rejects_zero_step_limit(self):
        with pytest.raises(ValueError):
            MachineConfig(max_steps=0)

    def test_from_env(self, monkeypatch):
        """Environment variables override the defaults."""
        monkeypatch.setenv("VALGOL_PRINT_AREA_SIZE", "40")
        monkeypatch.setenv("VALGOL_EPSILON", "0.01")
        monkeypatch.setenv("VALGOL_MAX_STEPS", "1000")
        config = MachineConfig.from_env()
        assert config.print_area_size == 40
        assert config.epsilon == 0.01
        assert config.max_steps == 1000

    def test_from_env_unset(self, monkeypatch):
        for name in ("VALGOL_PRINT_AREA_SIZE", "VALGOL_EPSILON", "VALGOL_MAX_STEPS"):
            monkeypatch.delenv(name, raising=False)
        assert MachineConfig.from_env() == MachineConfig()

    def test_from_env_ignores_invalid_values(self, monkeypatch):
        monkeypatch.setenv("VALGOL_PRINT_AREA_SIZE", "wide")
        monkeypatch.setenv("VALGOL_EPSILON", "tiny")
        monkeypatch.setenv("VALGOL_MAX_STEPS", "-5")
        assert MachineConfig.from_env() == MachineConfig()
