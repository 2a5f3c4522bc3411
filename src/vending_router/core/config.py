"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class SimulationConfig(BaseModel):
    event_count: int = Field(default=5, ge=0)
    seed: int | None = None  # None = nondeterministic
    sale_probability: float = Field(default=0.5, ge=0.0, le=1.0)
    sale_quantities: tuple[int, ...] = (1, 2)
    refill_quantities: tuple[int, ...] = (3, 5)


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    machine_ids: list[str] = Field(default_factory=lambda: ["001", "002", "003"])
    initial_stock: int = 10
    low_stock_threshold: int = Field(default=3, ge=0)

    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "VENDING_", "env_nested_delimiter": "__"}

    def validate_fleet(self) -> None:
        """Reject fleets the store cannot be seeded with."""
        from .errors import ConfigError

        if not self.machine_ids:
            raise ConfigError("At least one machine id is required.")

        counts = Counter(self.machine_ids)
        dupes = sorted(m for m, n in counts.items() if n > 1)
        if dupes:
            raise ConfigError(f"Duplicate machine ids: {', '.join(dupes)}")

        sim = self.simulation
        if not sim.sale_quantities or not sim.refill_quantities:
            raise ConfigError("Sale and refill quantity choices must not be empty.")
        if min(sim.sale_quantities + sim.refill_quantities) < 0:
            raise ConfigError("Sale and refill quantities must be non-negative.")


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    return Settings(**data)
