"""
Reversible mapping between a plaintext number and an opaque payload token.

Base64Transform is a placeholder, not encryption: anyone can reverse it.
"""

import base64
import binascii
import math
import re
from typing import Protocol

TOKEN_PREFIX = "FHE-"

_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


class Transform(Protocol):
    def encode(self, plaintext: float) -> str: ...

    def decode(self, token: str) -> float: ...


def format_number(value: float) -> str:
    """Text form of a number: integral values carry no fractional part."""
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric plaintext")
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def parse_number(text: str) -> float:
    """Parse the leading numeric literal of ``text``; ``nan`` if there is none."""
    match = _LEADING_NUMBER.match(text)
    if not match:
        return math.nan
    return float(match.group(1))


class Base64Transform:
    def encode(self, plaintext: float) -> str:
        try:
            finite = math.isfinite(plaintext)
        except OverflowError:
            finite = False
        if not finite:
            raise ValueError(f"Cannot encode non-finite value: {plaintext!r}")
        raw = format_number(plaintext).encode("ascii")
        return TOKEN_PREFIX + base64.b64encode(raw).decode("ascii")

    def decode(self, token: str) -> float:
        if token.startswith(TOKEN_PREFIX):
            try:
                text = base64.b64decode(token[len(TOKEN_PREFIX):], validate=True).decode("ascii")
            except (binascii.Error, UnicodeDecodeError):
                return math.nan
            return parse_number(text)
        return parse_number(token)
