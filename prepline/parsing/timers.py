import math
import re
from typing import Iterable, Optional

# Durations like "10 min", "5 minutes", "1 hour", "30 seconds", "3-5 minutes", "2 to 3 hours"
DURATION_REGEX = re.compile(
    r"(\d+(?:\.\d+)?)(?:\s*(?:-|–|to)\s*\d+(?:\.\d+)?)?\s*"
    r"(seconds|second|secs|sec|minutes|minute|mins|min|hours|hour|hrs|hr)\b",
    re.IGNORECASE,
)


def _unit_word(unit: str) -> str:
    u = unit.lower()
    if u.startswith("h"):
        return "hour"
    if u.startswith("s"):
        return "second"
    return "minute"


def extract_step_timing(text: str) -> Optional[str]:
    """
    First duration mentioned in a step, rendered as "N minutes".

    Ranges resolve to their lower bound: "simmer 3-5 minutes" -> "3 minutes".
    """
    if not text:
        return None

    match = DURATION_REGEX.search(text)
    if not match:
        return None

    amount = match.group(1)
    if amount.endswith(".0"):
        amount = amount[:-2]
    unit = _unit_word(match.group(2))
    plural = "" if amount == "1" else "s"
    return f"{amount} {unit}{plural}"


def timing_minutes(timing: Optional[str]) -> int:
    """Minutes in a timing string; hours x60, seconds round up to a whole minute."""
    if not timing:
        return 0

    match = DURATION_REGEX.search(timing)
    if not match:
        return 0

    amount = float(match.group(1))
    unit = _unit_word(match.group(2))
    if unit == "hour":
        return int(round(amount * 60))
    if unit == "second":
        return math.ceil(amount / 60)
    return int(math.ceil(amount))


def calculate_total_time(timings: Iterable[Optional[str]]) -> Optional[str]:
    total = sum(timing_minutes(t) for t in timings)
    if total <= 0:
        return None
    return f"{total} minutes"
