# =============================================================================
# adler32.py — Adler-32 Checksum Engine
# =============================================================================
#
# The iMac ROM and the updater file are both protected by a plain Adler-32:
#
#     a = 1, b = 0
#     for byte in data:  a = (a + byte) % 65521
#                        b = (b + a)    % 65521
#     checksum = (b << 16) | a
#
# Per-byte looping over a 512 KB padded ROM plus a 1 MB updater is slow in
# pure Python, so the sum is folded one block at a time with numpy.  For a
# block x[0..n-1] entered with state (a, b):
#
#     a' = a + Σ x[i]
#     b' = b + n·a + Σ (n - i)·x[i]
#
# which is exactly what n iterations of the loop above produce.  Results are
# identical to the byte loop (and to zlib.adler32).
# =============================================================================

from __future__ import annotations
from typing import Optional

import numpy as np

from FCPE.FPM.constants import ADLER_MODULUS

# Largest block folded at once. Σ (n-i)·255 stays far below 2**63 at this size.
_BLOCK_SIZE = 1 << 20


def adler32(data: bytes, length: Optional[int] = None) -> int:
    """
    Adler-32 of `data[:length]`.

    Args:
        data:   bytes, bytearray or memoryview.
        length: Number of leading bytes to cover. None covers the whole
                buffer; 0 covers nothing and yields 1.

    Returns:
        32-bit unsigned checksum.
    """
    if length is None:
        length = len(data)
    elif length < 0 or length > len(data):
        raise ValueError(
            f"length {length} outside buffer of {len(data)} bytes"
        )

    a, b = 1, 0
    if length == 0:
        return (b << 16) | a

    view = np.frombuffer(memoryview(data)[:length], dtype=np.uint8)

    for start in range(0, length, _BLOCK_SIZE):
        block = view[start:start + _BLOCK_SIZE].astype(np.int64)
        n = len(block)
        weights = np.arange(n, 0, -1, dtype=np.int64)
        b = (b + n * a + int(np.dot(weights, block))) % ADLER_MODULUS
        a = (a + int(block.sum())) % ADLER_MODULUS

    return (b << 16) | a
