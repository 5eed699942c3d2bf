import math
from dataclasses import dataclass

DEFAULT_ATTEMPTS_PER_SECOND = 1e11

MINUTE = 60
HOUR = 3600
DAY = 86400
YEAR = 31536000

_LOG10_2 = math.log10(2)


@dataclass(frozen=True)
class CrackTimeEstimate:
    seconds: float
    log10_seconds: float
    attempts_per_second: float
    formatted: str

    def to_dict(self):
        return {
            "seconds": self.seconds if math.isfinite(self.seconds) else None,
            "log10Seconds": round(self.log10_seconds, 4),
            "attemptsPerSecond": f"{self.attempts_per_second:.1e}",
            "formatted": self.formatted,
        }


def to_exponential(log10_value):
    """Scientific notation from a base-10 logarithm, e.g. ``3.2e+5``."""
    exponent = math.floor(log10_value)
    mantissa, shift = f"{10 ** (log10_value - exponent):.1e}".split("e")
    exponent += int(shift)
    sign = "+" if exponent >= 0 else "-"
    return f"{mantissa}e{sign}{abs(exponent)}"


def format_duration(seconds, log10_seconds=None):
    if seconds < 1:
        return f"{seconds * 1000:.1f} milliseconds"
    if seconds < MINUTE:
        return f"{seconds:.1f} seconds"
    if seconds < HOUR:
        return f"{seconds / MINUTE:.1f} minutes"
    if seconds < DAY:
        return f"{seconds / HOUR:.1f} hours"
    if seconds < YEAR:
        return f"{seconds / DAY:.1f} days"
    if log10_seconds is None:
        log10_seconds = math.log10(seconds)
    return f"{to_exponential(log10_seconds - math.log10(YEAR))} years"


def estimate_crack_time(entropy, attempts_per_second=DEFAULT_ATTEMPTS_PER_SECOND):
    """Average brute-force time: half of 2^entropy guesses at the given rate.

    Worked in log space as well, since long passwords overflow a float.
    """
    if not math.isfinite(attempts_per_second) or attempts_per_second <= 0:
        raise ValueError("attempts_per_second must be a positive finite number")
    log10_seconds = (entropy - 1) * _LOG10_2 - math.log10(attempts_per_second)
    try:
        seconds = (2.0 ** entropy) / 2 / attempts_per_second
    except OverflowError:
        seconds = math.inf
    return CrackTimeEstimate(
        seconds=seconds,
        log10_seconds=log10_seconds,
        attempts_per_second=attempts_per_second,
        formatted=format_duration(seconds, log10_seconds),
    )
