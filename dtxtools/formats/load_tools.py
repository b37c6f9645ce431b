"""Number parsing helpers shared by the loaders. Chart files are often hand
edited, numbers are read the lenient way : the longest valid prefix wins and
garbage gives None"""

import re
from decimal import Decimal
from typing import Optional

LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")
LEADING_DECIMAL = re.compile(r"\s*([+-]?(\d+(\.\d*)?|\.\d+))")


def parse_leading_int(value: str) -> Optional[int]:
    match = LEADING_INTEGER.match(value)
    if match is None:
        return None
    return int(match.group(1))


def parse_leading_decimal(value: str) -> Optional[Decimal]:
    match = LEADING_DECIMAL.match(value)
    if match is None:
        return None
    return Decimal(match.group(1))


def parse_level(value: str) -> Decimal:
    """Levels are written with 2 or 3 digits, "85" and "850" both mean 8.50.
    Anything else means no level"""
    parsed = parse_leading_int(value)
    if parsed is None:
        return Decimal("0.00")

    if len(value) <= 2:
        level = Decimal(parsed) / 10
    elif len(value) == 3:
        level = Decimal(parsed) / 100
    else:
        level = Decimal(0)

    return level.quantize(Decimal("0.01"))
