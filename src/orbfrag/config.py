"""Runtime settings, with environment variable overrides.

Variables:
    ORBFRAG_TIME_STEP: Default sampling step in seconds.
    ORBFRAG_COLLISION_THRESHOLD_M: Default close-approach threshold in meters.
    ORBFRAG_DEFAULT_MODEL: Registry name of the default collision model.
    ORBFRAG_MAX_WORKERS: Thread count for pair scans (unset: sequential).
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping

from orbfrag.core.errors import ValidationError
from orbfrag.utils.constants import (
    DEFAULT_COLLISION_THRESHOLD_M,
    DEFAULT_MODEL_NAME,
    DEFAULT_TIME_STEP_S,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "ORBFRAG_"


@dataclass(frozen=True)
class Settings:
    """Defaults for detection scans and collision simulation."""

    time_step_seconds: float = DEFAULT_TIME_STEP_S
    collision_threshold_m: float = DEFAULT_COLLISION_THRESHOLD_M
    default_model: str = DEFAULT_MODEL_NAME
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.time_step_seconds) or self.time_step_seconds <= 0:
            raise ValidationError(f"time_step_seconds must be a positive finite number, got {self.time_step_seconds}")
        if not math.isfinite(self.collision_threshold_m) or self.collision_threshold_m <= 0:
            raise ValidationError(f"collision_threshold_m must be a positive finite number, got {self.collision_threshold_m}")
        if not self.default_model:
            raise ValidationError("default_model must not be empty")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValidationError(f"max_workers must be at least 1, got {self.max_workers}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``ORBFRAG_*`` variables, falling back to defaults.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ValidationError: If a variable is malformed or out of range.
        """
        if environ is None:
            environ = os.environ

        def read(name: str, convert, default):
            raw = environ.get(ENV_PREFIX + name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return convert(raw.strip())
            except ValueError as e:
                logger.error("Invalid value for %s%s: %r", ENV_PREFIX, name, raw)
                raise ValidationError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from e

        settings = cls(
            time_step_seconds=read("TIME_STEP", float, DEFAULT_TIME_STEP_S),
            collision_threshold_m=read("COLLISION_THRESHOLD_M", float, DEFAULT_COLLISION_THRESHOLD_M),
            default_model=read("DEFAULT_MODEL", str, DEFAULT_MODEL_NAME),
            max_workers=read("MAX_WORKERS", int, None),
        )
        logger.debug("Loaded settings: %s", settings)
        return settings
