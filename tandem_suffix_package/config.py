"""Configuration for suffix tree construction and queries."""

import json
import os
from dataclasses import dataclass, fields

from .errors import ConfigError


@dataclass(frozen=True)
class SuffixTreeConfig:
    """Limits and encoding used when building a tree.

    Attributes:
        max_text_length: Largest accepted text, in bytes, not counting the sentinel.
        max_pattern_length: Largest accepted search pattern in bytes. None disables the check.
        sentinel: The single terminator byte appended to every text.
        encoding: Codec used to turn `str` texts and patterns into bytes.
    """

    max_text_length: int = 10000
    max_pattern_length: int | None = None
    sentinel: bytes = b"$"
    encoding: str = "utf-8"

    def __post_init__(self):
        if not isinstance(self.max_text_length, int) or self.max_text_length < 0:
            raise ConfigError(f"max_text_length must be a non-negative integer, got {self.max_text_length!r}")
        if self.max_pattern_length is not None and (
            not isinstance(self.max_pattern_length, int) or self.max_pattern_length <= 0
        ):
            raise ConfigError(f"max_pattern_length must be a positive integer or None, got {self.max_pattern_length!r}")
        if not isinstance(self.sentinel, bytes) or len(self.sentinel) != 1:
            raise ConfigError(f"sentinel must be exactly one byte, got {self.sentinel!r}")
        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ConfigError(f"Unknown encoding: {self.encoding}") from e

    @property
    def sentinel_byte(self) -> int:
        """The sentinel as an integer byte value."""
        return self.sentinel[0]


DEFAULT_CONFIG = SuffixTreeConfig()


def load_config(json_path: str | None = None) -> SuffixTreeConfig:
    """Load a JSON config file, falling back to defaults for missing keys.

    The sentinel may be given either as a one-character string or as an integer
    byte value. Unknown keys are rejected so typos do not go unnoticed.
    """
    if not json_path:
        return DEFAULT_CONFIG

    json_path = os.path.expanduser(json_path)
    try:
        with open(json_path, "r", encoding="utf-8") as f:
            json_config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Could not parse config file {json_path}: {e}") from e

    if not isinstance(json_config, dict):
        raise ConfigError(f"Config file {json_path} must contain a JSON object")

    known = {f.name for f in fields(SuffixTreeConfig)}
    unknown = set(json_config) - known
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    if "sentinel" in json_config:
        json_config["sentinel"] = _parse_sentinel(json_config["sentinel"])

    return SuffixTreeConfig(**json_config)


def _parse_sentinel(value) -> bytes:
    if isinstance(value, int) and 0 <= value <= 255:
        return bytes([value])
    if isinstance(value, str) and len(value) == 1 and ord(value) < 256:
        return value.encode("latin-1")
    raise ConfigError(f"sentinel must be a single byte character or a byte value, got {value!r}")
