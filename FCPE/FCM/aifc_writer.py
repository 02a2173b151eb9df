# =============================================================================
# aifc_writer.py — AIFF-C 'ima4' Container Builder
# =============================================================================
#
# Wraps the compressed chime in an AIFF-C file so it can be auditioned in
# any player that understands Apple IMA4 before it is flashed.  The ROM's
# packets already are ima4 packets (34 bytes / 64 samples), so the payload
# is copied through untouched.
#
# File layout (all big-endian):
#   "FORM" <size> "AIFC"
#     "FVER" 4   timestamp 0xA2805140 (AIFC version 1)
#     "COMM" 30  channels(2) frames(4) bits(2) rate(10, 80-bit extended)
#                "ima4" pstring("IMA 4:1")
#     "SSND" 8+n offset(4)=0 blockSize(4)=0 <packets>
#
# For ima4, COMM.numSampleFrames counts PACKETS, not samples, as
# Apple's own encoders write it.
#
# Self-contained: only uses struct and math.
# =============================================================================

from __future__ import annotations
import math
import struct

from FCPE.FPM.constants import SAMPLE_RATE, BYTES_PER_PACKET

AIFC_VERSION_1 = 0xA2805140
_COMPRESSION_TYPE = b"ima4"
_COMPRESSION_NAME = b"IMA 4:1"


def _extended80(value: float) -> bytes:
    """IEEE 754 80-bit extended float (explicit integer bit), big-endian."""
    if value == 0:
        return bytes(10)
    sign = 0x8000 if value < 0 else 0
    mantissa, exponent = math.frexp(abs(value))     # abs(value) = m·2**e, 0.5 ≤ m < 1
    biased = exponent + 16382                       # bias 16383, mantissa shifted to 1.x
    return struct.pack(">HQ", sign | biased, int(mantissa * (1 << 64)))


def _pstring(text: bytes) -> bytes:
    """Pascal string padded to an even total length."""
    raw = bytes([len(text)]) + text
    return raw + b"\x00" if len(raw) % 2 else raw


def _chunk(chunk_id: bytes, body: bytes) -> bytes:
    pad = b"\x00" if len(body) % 2 else b""
    return chunk_id + struct.pack(">I", len(body)) + body + pad


def build_aifc_ima4(compressed: bytes, sample_rate: int = SAMPLE_RATE) -> bytes:
    """
    Build a mono AIFF-C file from ima4 packets.

    Args:
        compressed:  Whole packets, as produced by IMAEncoder.encode().
        sample_rate: Playback rate in Hz.

    Returns:
        Complete .aifc file contents.
    """
    if len(compressed) % BYTES_PER_PACKET:
        raise ValueError(
            f"ima4 payload must be whole {BYTES_PER_PACKET}-byte packets, "
            f"got {len(compressed)} bytes"
        )
    packets = len(compressed) // BYTES_PER_PACKET

    fver = _chunk(b"FVER", struct.pack(">I", AIFC_VERSION_1))
    comm = _chunk(
        b"COMM",
        struct.pack(">hIh", 1, packets, 16)
        + _extended80(sample_rate)
        + _COMPRESSION_TYPE
        + _pstring(_COMPRESSION_NAME),
    )
    ssnd = _chunk(b"SSND", struct.pack(">II", 0, 0) + compressed)

    body = b"AIFC" + fver + comm + ssnd
    return b"FORM" + struct.pack(">I", len(body)) + body
