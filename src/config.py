import os
from dataclasses import dataclass
from typing import Mapping, Optional

from errors import ConfigurationError

BUFFER_SIZE_ENV = "PAYMENTS_BUFFER_SIZE"


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine configuration.
    buffer_size: how many raw records the source holds in memory at once.
    """

    buffer_size: int = 1000

    def __post_init__(self):
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise ConfigurationError(f"buffer_size must be an integer, got {self.buffer_size!r}")
        if self.buffer_size < 1:
            raise ConfigurationError(f"buffer_size must be positive, got {self.buffer_size}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build config from environment variables, falling back to defaults."""
        if environ is None:
            environ = os.environ

        raw = environ.get(BUFFER_SIZE_ENV, "").strip()
        if not raw:
            return cls()

        try:
            buffer_size = int(raw)
        except ValueError:
            raise ConfigurationError(f"{BUFFER_SIZE_ENV} must be an integer, got {raw!r}") from None
        return cls(buffer_size=buffer_size)
