# irdcheck/validators.py
from __future__ import annotations

import logging
import re
from collections.abc import Sequence

logger = logging.getLogger(__name__)

PRIMARY_WEIGHTS = (3, 2, 7, 6, 5, 4, 3, 2)
SECONDARY_WEIGHTS = (7, 4, 3, 2, 5, 2, 7, 6)

IRD_MIN = 10_000_000
IRD_MAX = 150_000_000  # exclusive

_SEPARATORS_RE = re.compile(r"[-. ]")
_DIGITS_RE = re.compile(r"[0-9]+")


def normalize_ird(raw: str | None) -> str:
    """Trim whitespace and drop '-', ' ' and '.' separators."""
    return _SEPARATORS_RE.sub("", (raw or "").strip())


def ird_check_digit(weights: Sequence[int], base: str) -> int:
    if len(weights) != len(base):
        raise ValueError(f"weights ({len(weights)}) and base number ({len(base)}) differ in length")
    total = sum(int(ch) * w for ch, w in zip(base, weights))
    remainder = total % 11
    return 0 if remainder == 0 else 11 - remainder


def split_ird(digits: str) -> tuple[str, int] | None:
    """
    Returns (base_number, trailing_digit) for an 8 or 9 digit string.
    Legacy 8-digit numbers get a leading zero so the base is always 8 long.
    """
    if len(digits) == 8:
        return "0" + digits[:7], int(digits[7])
    if len(digits) == 9:
        return digits[:8], int(digits[8])
    return None


def ird_is_valid(raw: str | None) -> bool:
    """
    Checks an IRD number against the Inland Revenue check digit algorithm
    (payday filing spec, part 5.1). Accepts the legacy 8-digit and current
    9-digit forms; never raises.
    """
    s = normalize_ird(raw)
    if not _DIGITS_RE.fullmatch(s):
        logger.debug("IRD rejected, not digits (length %d)", len(s))
        return False

    # length first: int() refuses very long digit strings
    parts = split_ird(s)
    if parts is None:
        logger.debug("IRD rejected, unexpected length %d", len(s))
        return False
    base, trailing = parts

    if not IRD_MIN <= int(s) < IRD_MAX:
        logger.debug("IRD rejected, out of range (length %d)", len(s))
        return False

    check = ird_check_digit(PRIMARY_WEIGHTS, base)
    if check == 10:
        # both tables landing on 10 is the accepting signal
        return ird_check_digit(SECONDARY_WEIGHTS, base) == 10
    if 0 <= check <= 9:
        return check == trailing
    return False
