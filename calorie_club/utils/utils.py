import math
from decimal import Decimal, ROUND_HALF_UP

# -------------------- NUMBERS -------------------- #

def require_finite(value, field: str = "value"):
    """
    Reject anything that is not a finite int/float.
    Bad numbers would silently corrupt sums and rankings.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{field} must be finite, got {value!r}")
    return value


def round_half_up(value: float, ndigits: int = 0):
    """
    Round like a calculator (2.5 -> 3), not banker's rounding.
    Returns int when ndigits is 0.
    """
    require_finite(value)
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)


def parse_number(value, field: str):
    """
    Coerce a payload value (number or numeric string) to a finite float.
    """
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValueError(f"{field} must be a number") from None
    return float(require_finite(value, field))


def parse_optional_number(value, field: str):
    # Empty strings / zero are stored as "not provided"
    if value in (None, "", 0, "0"):
        return None
    return parse_number(value, field)


# -------------------- TEXT -------------------- #

def parse_text(value, field: str) -> str:
    """
    Strip a payload string. Missing values come back as "".
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    return value.strip()


def parse_id(value):
    """Integer id from a JSON payload, or None when it is not one."""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
