from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

# input of 10**12 or more counts as non-numeric; wider values overflow the
# 28-digit context in quantize()
MAX_MONEY_EXPONENT = 11


def to_decimal(value) -> Decimal | None:
    """Form input → Decimal; blank, non-numeric, non-finite and out-of-range input → None."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    if number and number.adjusted() > MAX_MONEY_EXPONENT:
        return None
    return number


def D(value) -> Decimal:
    if isinstance(value, Decimal) and value.is_finite():
        return value
    number = to_decimal(value)
    return ZERO if number is None else number


def money2(value) -> Decimal:
    return D(value).quantize(CENT, rounding=ROUND_HALF_UP)


def non_negative(value) -> Decimal:
    return money2(max(ZERO, D(value)))


def clamp_percentage(value) -> Decimal:
    return money2(min(HUNDRED, max(ZERO, D(value))))


def as_number(value: Decimal) -> int | float:
    """Decimal → JSON number, int when integral (matches stored records)."""
    value = D(value)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def discount_of(total, percentage) -> Decimal:
    """Discount amount, rounded on its own so total - discount reconciles on screen."""
    return money2(D(total) * D(percentage) / HUNDRED)
