"""Exact conversion between decimal amount strings and integer base units.

Floats are never involved and nothing is rounded: an amount that cannot be
represented exactly in base units, or that does not fit a uint256, is
rejected.
"""

from decimal import Decimal, InvalidOperation, localcontext

from cartezcash_bridge.errors import InvalidAmountError

ETHER_DECIMALS = 18
ZATOSHI_DECIMALS = 8

# 1 ETH (10^18 wei) maps to 1 ZEC (10^8 zatoshi) inside the rollup
WEI_PER_ZATOSHI = 10 ** (ETHER_DECIMALS - ZATOSHI_DECIMALS)

MAX_UINT256 = 2**256 - 1
MAX_UINT256_DIGITS = len(str(MAX_UINT256))

_PRECISION = 100


def parse_units(amount: str, decimals: int = ETHER_DECIMALS) -> int:
    """Convert a decimal amount string to integer base units.

    The conversion works on the decimal digits directly, so no context
    precision can round the amount before it is checked.

    Args:
        amount: Human amount, e.g. "1.5"
        decimals: Number of decimals of the asset

    Returns:
        Amount in base units (e.g. wei)

    Raises:
        InvalidAmountError: If the amount is empty, malformed, negative,
            larger than a uint256, or has more fractional digits than the
            asset supports
    """
    text = (amount or "").strip()
    if not text:
        raise InvalidAmountError("Amount is required")

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise InvalidAmountError(f"Invalid amount: {amount!r}")

    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    if value < 0:
        raise InvalidAmountError(f"Amount must not be negative: {amount}")

    _, digits, exponent = value.as_tuple()
    coefficient = int("".join(map(str, digits)))
    if coefficient == 0:
        return 0

    shift = exponent + decimals
    if shift + len(digits) > MAX_UINT256_DIGITS:
        raise InvalidAmountError(f"Amount {amount} is too large")

    if shift >= 0:
        base_units = coefficient * 10 ** shift
    else:
        # Digits below the smallest base unit must all be zero
        places = -shift
        if places >= len(digits) or coefficient % 10 ** places:
            raise InvalidAmountError(
                f"Amount {amount} has more than {decimals} decimal places"
            )
        base_units = coefficient // 10 ** places

    if base_units > MAX_UINT256:
        raise InvalidAmountError(f"Amount {amount} is too large")
    return base_units


def format_units(value: int, decimals: int = ETHER_DECIMALS) -> str:
    """Render integer base units as a plain decimal string."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        text = format(Decimal(value).scaleb(-decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
