"""General utility functions"""

from decimal import Decimal
from fractions import Fraction
from functools import reduce
from math import gcd
from typing import Callable, Optional, TypeVar


def single_lcm(a: int, b: int) -> int:
    """Return lowest common multiple of two numbers"""
    return a * b // gcd(a, b)


def lcm(*args: int) -> int:
    """Return lcm of args."""
    return reduce(single_lcm, args, 1)


A = TypeVar("A")
B = TypeVar("B")


def none_or(c: Callable[[A], B], e: Optional[A]) -> Optional[B]:
    if e is None:
        return None
    else:
        return c(e)


def fraction_to_decimal(frac: Fraction) -> Decimal:
    "Thanks stackoverflow ! https://stackoverflow.com/a/40468867/10768117"
    return frac.numerator / Decimal(frac.denominator)


T = TypeVar("T", int, float, Decimal, Fraction)


def clamp(value: T, lower: T, upper: T) -> T:
    return max(lower, min(value, upper))


def pretty_print_decimal(d: Decimal) -> str:
    raw_string_form = f"{d:f}"
    if "." in raw_string_form:
        return raw_string_form.rstrip("0").rstrip(".")
    else:
        return raw_string_form
