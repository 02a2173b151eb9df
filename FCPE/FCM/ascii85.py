# =============================================================================
# ascii85.py — Ascii85 Codec (Apple "dc85" flavour)
# =============================================================================
#
# The "iMac Firmware 3.0" updater is an Open Firmware script; its ROM image is
# embedded as lines of Ascii85 text.  Apple's dialect differs from Adobe's:
#
#   - 4 zero bytes       → "z"   (standard)
#   - 4 0xFF bytes       → "y"   (Apple — Adobe uses "y" for 4 spaces)
#   - no "<~" / "~>" delimiters
#   - a short final group is encoded as a full 5-character group (the missing
#     bytes count as zero). ROM lengths are multiples of 4, so this never
#     happens when re-encoding a real image.
#
# LINE BUDGET:
#   encode() stops before starting a group once fewer than 5 characters of
#   the line budget remain, even when a 1-character "z"/"y" would still fit.
#   Apple's encoder wraps the same way.
# =============================================================================

from __future__ import annotations
from typing import Optional, Union

from FCPE.FPM.constants import (
    ASCII85_BASE, ASCII85_FIRST, ASCII85_LAST, ASCII85_GROUP_SIZE,
    ASCII85_ZERO_CHAR, ASCII85_ONES_CHAR, ASCII85_POW,
)
from FCPE.errors import TextCodecDecodeError

_ZERO_WORD = b"\x00\x00\x00\x00"
_ONES_WORD = b"\xff\xff\xff\xff"


def decode(text: Union[bytes, str]) -> bytes:
    """
    Decode one run of Apple Ascii85 text.

    Raises:
        TextCodecDecodeError: character outside "!".."u" or a truncated group.
    """
    if isinstance(text, str):
        try:
            text = text.encode("ascii")
        except UnicodeEncodeError as e:
            raise TextCodecDecodeError(f"Non-ASCII character in Ascii85 text: {e}") from e

    out = bytearray()
    pos = 0
    end = len(text)

    while pos < end:
        c = text[pos]

        if c == ASCII85_ZERO_CHAR:
            out += _ZERO_WORD
            pos += 1
            continue
        if c == ASCII85_ONES_CHAR:
            out += _ONES_WORD
            pos += 1
            continue

        if pos + ASCII85_GROUP_SIZE > end:
            raise TextCodecDecodeError(
                f"Truncated Ascii85 group at position {pos}: "
                f"{end - pos} character(s) left, need {ASCII85_GROUP_SIZE}"
            )

        value = 0
        for i in range(ASCII85_GROUP_SIZE):
            digit = text[pos + i]
            if digit < ASCII85_FIRST or digit > ASCII85_LAST:
                raise TextCodecDecodeError(
                    f"Invalid Ascii85 character {chr(digit)!r} at position {pos + i}"
                )
            value += ASCII85_POW[i] * (digit - ASCII85_FIRST)

        # Five "u"s overflow 32 bits; Apple's decoder silently wraps.
        out += (value & 0xFFFFFFFF).to_bytes(4, "big")
        pos += ASCII85_GROUP_SIZE

    return bytes(out)


def encode(
    data:      bytes,
    offset:    int = 0,
    max_chars: Optional[int] = None,
) -> tuple[bytes, int]:
    """
    Encode `data` from `offset` onward, up to `max_chars` output characters.

    Args:
        data:      Source buffer.
        offset:    First byte to encode.
        max_chars: Output budget in characters. None or 0 = unlimited.

    Returns:
        (encoded, consumed) — the Ascii85 text, and the number of source
        bytes it covers.  Zero padding of a short final group is not counted,
        so `offset + consumed` is where the next line should resume.
    """
    budget = max_chars if max_chars else None
    out = bytearray()
    consumed = 0
    length = len(data)

    while offset < length:
        if budget is not None and len(out) + ASCII85_GROUP_SIZE > budget:
            break

        group = bytes(data[offset:offset + 4])
        value = int.from_bytes(group.ljust(4, b"\x00"), "big")

        if value == 0:
            out.append(ASCII85_ZERO_CHAR)
        elif value == 0xFFFFFFFF:
            out.append(ASCII85_ONES_CHAR)
        else:
            digits = bytearray(ASCII85_GROUP_SIZE)
            for i in range(ASCII85_GROUP_SIZE - 1, -1, -1):
                value, digit = divmod(value, ASCII85_BASE)
                digits[i] = ASCII85_FIRST + digit
            out += digits

        offset += 4
        consumed += len(group)

    return bytes(out), consumed


def encode_all(data: bytes) -> bytes:
    """Encode a whole buffer with no line budget."""
    encoded, _ = encode(data)
    return encoded
