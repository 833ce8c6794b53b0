"""
Configuration: UNF parameters, version registry and environment defaults.

Parameters:
- digits:     significant digits kept when rounding floats (default 7)
- characters: code points kept from each canonical string (default 128)
- truncation: bits of the digest kept in the short hash (default 128)
- version:    UNF algorithm version (only 6 is implemented)

Environment defaults (read by `UnfConfigBuilder.from_env()` and the CLI):
1. Environment variables (UNFHASH_DIGITS, UNFHASH_CHARACTERS, UNFHASH_TRUNCATION)
2. .env file (if present, via python-dotenv)

Usage:
    from unfhash.config import UnfConfigBuilder

    config = UnfConfigBuilder().digits(9).build()
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable

import structlog
from dotenv import load_dotenv

from unfhash.errors import InvalidConfiguration

log = structlog.get_logger()

DEFAULT_DIGITS = 7
DEFAULT_CHARACTERS = 128
DEFAULT_TRUNCATION = 128
DEFAULT_INFERENCE_ROWS = 100

# Flag to track if .env has been loaded
_config_loaded = False


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------


class UnfVersion(str, Enum):
    SIX = "6"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnfAlgorithm:
    """Hash primitive bound to a UNF version."""

    name: str
    digest_bits: int
    factory: Callable[[], Any]

    def new(self) -> Any:
        return self.factory()


# A version selects hash primitive and canonical rules together; new versions
# are added here, never by changing an existing entry.
_ALGORITHMS: dict[UnfVersion, UnfAlgorithm] = {
    UnfVersion.SIX: UnfAlgorithm(name="sha256", digest_bits=256, factory=hashlib.sha256),
}


def get_algorithm(version: UnfVersion) -> UnfAlgorithm:
    try:
        return _ALGORITHMS[UnfVersion(version)]
    except (KeyError, ValueError) as e:
        raise InvalidConfiguration(f"Unknown UNF version: {version!r}") from e


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UnfConfig:
    digits: int = DEFAULT_DIGITS
    characters: int = DEFAULT_CHARACTERS
    truncation: int = DEFAULT_TRUNCATION
    version: UnfVersion = UnfVersion.SIX

    def __post_init__(self) -> None:
        try:
            version = UnfVersion(self.version)
        except ValueError as e:
            raise InvalidConfiguration(f"Unknown UNF version: {self.version!r}") from e
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "version", version)
        algorithm = get_algorithm(version)
        if isinstance(self.digits, bool) or not isinstance(self.digits, int) or self.digits < 1:
            raise InvalidConfiguration(f"digits must be a positive integer, got {self.digits!r}")
        if isinstance(self.characters, bool) or not isinstance(self.characters, int) or self.characters < 1:
            raise InvalidConfiguration(f"characters must be a positive integer, got {self.characters!r}")
        if isinstance(self.truncation, bool) or not isinstance(self.truncation, int) or self.truncation < 8:
            raise InvalidConfiguration(f"truncation must be a positive multiple of 8, got {self.truncation!r}")
        if self.truncation % 8 != 0:
            raise InvalidConfiguration(f"truncation must be a multiple of 8, got {self.truncation}")
        if self.truncation > algorithm.digest_bits:
            raise InvalidConfiguration(
                f"truncation {self.truncation} exceeds {algorithm.name} digest length ({algorithm.digest_bits} bits)"
            )

    @property
    def algorithm(self) -> UnfAlgorithm:
        return get_algorithm(self.version)

    @property
    def truncation_bytes(self) -> int:
        return self.truncation // 8

    def header(self) -> str:
        """
        Parameter header for the UNF label: non-default parameters only,
        in N (digits), X (characters), H (truncation) order.
        """
        parts: list[str] = []
        if self.digits != DEFAULT_DIGITS:
            parts.append(f"N{self.digits}")
        if self.characters != DEFAULT_CHARACTERS:
            parts.append(f"X{self.characters}")
        if self.truncation != DEFAULT_TRUNCATION:
            parts.append(f"H{self.truncation}")
        return ",".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "digits": int(self.digits),
            "characters": int(self.characters),
            "truncation": int(self.truncation),
            "version": str(self.version),
        }


class UnfConfigBuilder:
    """
    Builder with optional fields; `build()` fills the defaults and validates.
    """

    def __init__(self) -> None:
        self._digits: int | None = None
        self._characters: int | None = None
        self._truncation: int | None = None
        self._version: UnfVersion | str | None = None

    def digits(self, x: int) -> UnfConfigBuilder:
        self._digits = x
        return self

    def characters(self, x: int) -> UnfConfigBuilder:
        self._characters = x
        return self

    def truncation(self, x: int) -> UnfConfigBuilder:
        self._truncation = x
        return self

    def version(self, x: UnfVersion | str) -> UnfConfigBuilder:
        self._version = x
        return self

    def build(self) -> UnfConfig:
        return UnfConfig(
            digits=self._digits if self._digits is not None else DEFAULT_DIGITS,
            characters=self._characters if self._characters is not None else DEFAULT_CHARACTERS,
            truncation=self._truncation if self._truncation is not None else DEFAULT_TRUNCATION,
            version=self._version if self._version is not None else UnfVersion.SIX,
        )

    @classmethod
    def from_env(cls) -> UnfConfigBuilder:
        """Seed a builder from UNFHASH_* environment variables."""
        b = cls()
        b.digits(env_int("UNFHASH_DIGITS", DEFAULT_DIGITS))
        b.characters(env_int("UNFHASH_CHARACTERS", DEFAULT_CHARACTERS))
        b.truncation(env_int("UNFHASH_TRUNCATION", DEFAULT_TRUNCATION))
        return b


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


def find_dotenv() -> Path | None:
    """Find the .env file, searching up from current directory."""
    current = Path.cwd()
    for _ in range(10):  # Max 10 levels up
        env_file = current / ".env"
        if env_file.exists():
            return env_file
        if current.parent == current:
            break
        current = current.parent
    return None


def load_config() -> None:
    """
    Load configuration from .env file if present.

    Safe to call repeatedly; only the first call reads the file.
    """
    global _config_loaded
    if _config_loaded:
        return

    # Tests control the environment explicitly.
    if os.environ.get("PYTEST_CURRENT_TEST") or str(os.environ.get("UNFHASH_DISABLE_DOTENV", "")).lower() in {"1", "true", "yes"}:
        log.debug("config.skip_dotenv", reason="pytest_or_disabled")
        _config_loaded = True
        return

    env_file = find_dotenv()
    if env_file:
        load_dotenv(env_file, override=False)
        log.debug("config.loaded_dotenv", path=str(env_file))
    else:
        log.debug("config.no_dotenv_found")

    _config_loaded = True


def get_env(key: str, default: str | None = None) -> str | None:
    return os.environ.get(key, default)


def env_int(key: str, default: int) -> int:
    """Read an integer environment variable; malformed values are an error."""
    load_config()
    raw = str(get_env(key, "") or "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidConfiguration(f"Invalid {key}: {raw!r}") from e
