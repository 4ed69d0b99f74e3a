"""Exceptions raised by the detection and fragmentation engine."""

from __future__ import annotations

from datetime import datetime
from typing import Any


class OrbfragError(Exception):
    """Base class for all orbfrag errors."""


class ValidationError(OrbfragError, ValueError):
    """Caller supplied input the engine cannot work with.

    Raised before any propagation happens; never retried.
    """


class PropagationError(OrbfragError, ValueError):
    """An orbit state could not be computed at the requested instant.

    Attributes:
        norad_id: Catalog number of the object, if known.
        time: Instant the propagation was requested for.
        code: Provider-specific error code, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        norad_id: int | None = None,
        time: datetime | None = None,
        code: Any = None,
    ) -> None:
        super().__init__(message)
        self.norad_id = norad_id
        self.time = time
        self.code = code


class ModelNotFoundError(OrbfragError, KeyError):
    """No collision model is registered under the requested name."""

    def __init__(self, name: str | None) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        if self.name is None:
            return "No model name given and no default model registered"
        return f"Model '{self.name}' not found"
