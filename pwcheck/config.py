import math
import os
from dataclasses import dataclass

DEFAULT_DICTIONARY_PATH = os.path.join("data", "1millionPasswords.csv")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_number(name, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    dictionary_path: str = DEFAULT_DICTIONARY_PATH
    attempts_per_second: float = 1e11
    # 0 scans the whole corpus in the substring strategy
    substring_sample_limit: int = 10000
    preload_dictionary: bool = True
    max_content_length: int = 2048
    log_level: str = "INFO"

    def __post_init__(self):
        if not math.isfinite(self.attempts_per_second) or self.attempts_per_second <= 0:
            raise ValueError("attempts_per_second must be a positive finite number")
        if self.substring_sample_limit < 0:
            raise ValueError("substring_sample_limit must not be negative")
        if self.max_content_length <= 0:
            raise ValueError("max_content_length must be positive")

    @classmethod
    def from_env(cls):
        return cls(
            dictionary_path=os.environ.get("PWCHECK_DICTIONARY_PATH") or DEFAULT_DICTIONARY_PATH,
            attempts_per_second=_env_number("PWCHECK_ATTEMPTS_PER_SECOND", 1e11, float),
            substring_sample_limit=_env_number("PWCHECK_SUBSTRING_SAMPLE_LIMIT", 10000, int),
            preload_dictionary=_env_bool("PWCHECK_PRELOAD_DICTIONARY", True),
            max_content_length=_env_number("PWCHECK_MAX_CONTENT_LENGTH", 2048, int),
            log_level=(os.environ.get("PWCHECK_LOG_LEVEL") or "INFO").upper(),
        )
