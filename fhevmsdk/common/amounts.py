"""Fixed-point token amount conversion and byte encoding helpers"""
import re
from typing import Union

DEFAULT_DECIMALS = 6

_AMOUNT_PATTERN = re.compile(r"^(-?)(\d*)(?:\.(\d*))?$")


def parse_token_amount(amount: str, decimals: int = DEFAULT_DECIMALS) -> int:
    """Parse a decimal string into its smallest-unit integer

    Args:
        amount: Amount as a decimal string (e.g. "10.5")
        decimals: Number of decimal places of the token

    Returns:
        Amount in smallest units. Fractional digits beyond ``decimals``
        are truncated.

    Raises:
        ValueError: If the string is not a decimal number
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    text = amount.strip()
    match = _AMOUNT_PATTERN.match(text)
    if not match or not (match.group(2) or match.group(3)):
        raise ValueError(f"Invalid token amount: {amount!r}")

    sign, whole, fraction = match.group(1), match.group(2) or "0", match.group(3) or ""
    padded = fraction.ljust(decimals, "0")[:decimals]
    value = int(whole + padded)
    return -value if sign else value


def format_token_amount(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Format a smallest-unit integer as a decimal string

    Trailing fractional zeros are stripped; whole amounts have no decimal point.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    sign = "-" if amount < 0 else ""
    whole, fraction = divmod(abs(amount), 10 ** decimals)

    if fraction == 0:
        return f"{sign}{whole}"

    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{fraction_str}"


def to_hex(data: Union[bytes, bytearray, memoryview]) -> str:
    """Convert raw bytes to a 0x-prefixed hex string"""
    return "0x" + bytes(data).hex()


def from_hex(value: Union[str, bytes, bytearray]) -> bytes:
    """Convert a hex string (with or without 0x) to bytes; bytes pass through"""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)
