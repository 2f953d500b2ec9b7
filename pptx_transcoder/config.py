import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "PPTX_TRANSCODER_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class TranscoderConfig:
    compression_level: int = 6
    # Output smaller than this fraction of the input is treated as truncated.
    min_output_ratio: float = 0.10
    # Use the only entry of a slide/language as a last resort (lossy).
    single_entry_fallback: bool = True
    max_package_bytes: int = 100 * 1024 * 1024

    def __post_init__(self):
        if not 0 <= self.compression_level <= 9:
            raise ValueError(
                f"compression_level must be between 0 and 9, got {self.compression_level}"
            )
        if not 0 <= self.min_output_ratio < 1:
            raise ValueError(
                f"min_output_ratio must be in [0, 1), got {self.min_output_ratio}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TranscoderConfig":
        env = os.environ if environ is None else environ
        kwargs = {}
        raw = env.get(ENV_PREFIX + "COMPRESSION_LEVEL")
        if raw:
            kwargs["compression_level"] = int(raw)
        raw = env.get(ENV_PREFIX + "MIN_OUTPUT_RATIO")
        if raw:
            kwargs["min_output_ratio"] = float(raw)
        raw = env.get(ENV_PREFIX + "SINGLE_ENTRY_FALLBACK")
        if raw:
            kwargs["single_entry_fallback"] = _parse_bool(raw)
        raw = env.get(ENV_PREFIX + "MAX_PACKAGE_BYTES")
        if raw:
            kwargs["max_package_bytes"] = int(raw)
        return cls(**kwargs)


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")
