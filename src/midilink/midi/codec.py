"""Hex text codec for MIDI bytes.

MIDI messages travel through the host framework as text: whitespace
separated two-digit hex bytes, e.g. ``f0 43 12 00 f7``. Input is
case-insensitive, output is always lowercase with single spaces.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

_WHITESPACE = re.compile(r"\s+")
_HEX_BYTE = re.compile(r"[0-9a-fA-F]{1,2}")


@dataclass(frozen=True, slots=True)
class HexDecodeResult:
    """
    Outcome of decoding hex text.

    ``data`` is empty whenever decoding failed, so code that only looks at
    the bytes still sees "nothing decoded". ``ok`` and ``error`` make the
    failure explicit.
    """

    data: bytes = b""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __len__(self) -> int:
        return len(self.data)

    @classmethod
    def failure(cls, reason: str) -> "HexDecodeResult":
        return cls(data=b"", error=reason)


def encode_hex(data: bytes | Iterable[int]) -> str:
    """
    Format bytes as lowercase hex pairs separated by single spaces.

    Args:
        data: Raw bytes (or any iterable of ints 0-255)

    Returns:
        Formatted string, ``""`` for empty input
    """
    return bytes(data).hex(" ")


def decode_hex(text: str) -> HexDecodeResult:
    """
    Parse whitespace separated hex byte tokens.

    A single unparseable token fails the whole decode.

    Args:
        text: Text such as ``"90 3C 40"``

    Returns:
        HexDecodeResult holding the bytes, or an empty failure result
    """
    tokens = _WHITESPACE.split(text.strip()) if text else []
    if not tokens or tokens == [""]:
        return HexDecodeResult.failure("no bytes in message")

    decoded = bytearray()
    for token in tokens:
        # ASCII only: int(token, 16) would also take signs and non-ASCII digits
        if not _HEX_BYTE.fullmatch(token):
            return HexDecodeResult.failure(f"'{token}' is not a hex byte")
        decoded.append(int(token, 16))

    return HexDecodeResult(data=bytes(decoded))
