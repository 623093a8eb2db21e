from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from expandvars import UnboundVariable, expandvars
from pydantic import BaseModel, ConfigDict, Field

from quickassert.eventually import (
    DEFAULT_STABLE_STRATEGY,
    DEFAULT_STRATEGY,
    set_default_strategies,
)
from quickassert.retry import RetryStrategy


class QuickAssertConfig(BaseModel):
    """Settings read from a quickassert YAML file.

    Attributes:
        eventually: Schedule used by ``Eventually`` to wait for success.
        stable: Schedule used by ``EventuallyStable`` to confirm success.
        verbose: Also send debug logging to stderr.
        debug_log: File receiving debug logging, if any.
        junit: File receiving check failures as JUnit XML, if any.
    """

    model_config = ConfigDict(extra="forbid")

    eventually: RetryStrategy = Field(default=DEFAULT_STRATEGY)
    stable: RetryStrategy = Field(default=DEFAULT_STABLE_STRATEGY)
    verbose: bool = False
    debug_log: str | None = None
    junit: str | None = None


def _expand(value: Any, path: str, missing: list[str]) -> Any:
    """Expand ${VAR} and ${VAR:-default} in every string of a YAML tree."""
    if isinstance(value, str):
        try:
            return expandvars(value, nounset=True)
        except UnboundVariable:
            missing.append(f"  {path}={value}")
            return value
    if isinstance(value, dict):
        return {k: _expand(v, f"{path}.{k}" if path else str(k), missing) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v, f"{path}[{i}]", missing) for i, v in enumerate(value)]
    return value


def load_config(path: Path) -> QuickAssertConfig:
    """Load and validate a config from a YAML file.

    Raises ValueError listing every missing environment variable so the user
    can fix them all at once rather than hitting them one-by-one.
    """
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    missing: list[str] = []
    raw = _expand(raw, "", missing)
    if missing:
        details = "\n".join(missing)
        raise ValueError(f"Config {path} has missing environment variables:\n{details}")

    config = QuickAssertConfig(**raw)

    # Resolve relative output paths relative to config file location
    for field in ("debug_log", "junit"):
        value = getattr(config, field)
        if value and not Path(value).is_absolute():
            setattr(config, field, str((config_dir / value).resolve()))

    return config


def apply_config(config: QuickAssertConfig) -> None:
    """Make the configured schedules the defaults for new retry checkers."""
    set_default_strategies(config.eventually, config.stable)
