# =============================================================================
# rom_region.py — ROM Region Extraction, Re-embedding and Checksum Fields
# =============================================================================
#
# Two ways a ROM image sits inside an updater file (profile.rom_encoding):
#
#   ascii85 — lines  b"dc85 " <Ascii85> b"\r"  between rom_offset and
#             rom_end_offset, decoded and concatenated.  Re-embedding writes
#             fresh lines of at most column_width characters, so the text
#             span and the whole file can grow or shrink.
#
#   raw     — a plain byte slice; re-embedding is a same-length overwrite.
#
# Checksum fields are either 8 uppercase hex characters or 4 big-endian
# bytes (profile.checksum_format).
# =============================================================================

from __future__ import annotations

from FCPE.FPM.constants import CHECKSUM_HEX, CHECKSUM_BE32, CHECKSUM_WIDTHS
from FCPE.FPM.profiles import FirmwareProfile
from FCPE.FCM import ascii85
from FCPE.errors import RegionTooShort, ChecksumWidthMismatch, TextCodecDecodeError


def resolve_offset(offset: int, length: int) -> int:
    """Map a possibly negative (end-relative) offset to an absolute one."""
    return offset + length if offset < 0 else offset


# ── Extraction ────────────────────────────────────────────────────────────────

def _decode_text_region(
    firmware:      bytes,
    start:         int,
    end:           int,
    profile:       FirmwareProfile,
) -> bytearray:
    """Decode every sentinel line that starts before `end`."""
    sentinel = profile.line_sentinel
    terminator = profile.line_terminator
    rom = bytearray()
    pos = start

    while pos < end:
        line_start = firmware.find(sentinel, pos)
        if line_start < 0:
            break
        payload_start = line_start + len(sentinel)

        line_end = firmware.find(terminator, payload_start)
        if line_end < 0:
            break

        if line_end == payload_start:
            raise TextCodecDecodeError(
                f"Empty Ascii85 ROM line at offset 0x{line_start:X}"
            )

        # Raises TextCodecDecodeError on a malformed line
        rom += ascii85.decode(firmware[payload_start:line_end])
        pos = line_end + len(terminator)

    return rom


def extract_rom_region(firmware: bytes, profile: FirmwareProfile) -> bytearray:
    """
    Pull the ROM image out of an updater file.

    Raises:
        RegionTooShort:       firmware ends before the profile's ROM span, or
                              the ROM cannot hold the sound payload.
        TextCodecDecodeError: a ROM line is empty or not valid Ascii85.
    """
    if len(firmware) < profile.rom_end_offset:
        raise RegionTooShort(
            f"Firmware is shorter than expected: {len(firmware):,} bytes, "
            f"ROM region ends at 0x{profile.rom_end_offset:X}"
        )

    if profile.is_text_encoded:
        rom = _decode_text_region(
            firmware, profile.rom_offset, profile.rom_end_offset, profile,
        )
    else:
        rom = bytearray(firmware[profile.rom_offset:profile.rom_end_offset])

    if len(rom) < profile.min_rom_length:
        raise RegionTooShort(
            f"ROM region is {len(rom):,} bytes; the sound payload needs "
            f"{profile.min_rom_length:,} (offset 0x{profile.sound_offset:X} "
            f"+ {profile.compressed_size:,} bytes)"
        )
    return rom


# ── Re-embedding ──────────────────────────────────────────────────────────────

def encode_text_region(rom: bytes, profile: FirmwareProfile) -> bytes:
    """Re-encode a ROM image as sentinel-prefixed, terminator-ended lines."""
    lines = bytearray()
    cursor = 0
    while cursor < len(rom):
        encoded, consumed = ascii85.encode(rom, cursor, profile.column_width)
        if consumed == 0:
            raise ValueError(
                f"column_width {profile.column_width} cannot hold a single "
                f"Ascii85 group"
            )
        lines += profile.line_sentinel + encoded + profile.line_terminator
        cursor += consumed
    return bytes(lines)


def embed_rom_region(
    firmware: bytes,
    rom:      bytes,
    profile:  FirmwareProfile,
) -> bytearray:
    """
    Put a (patched) ROM image back into the updater file.

    Returns:
        New firmware buffer.  For ascii85 profiles its length may differ
        from the input's by however much the text re-encoding changed.
    """
    out = bytearray(firmware)
    if profile.is_text_encoded:
        out[profile.rom_offset:profile.rom_end_offset] = encode_text_region(rom, profile)
    else:
        if len(rom) != profile.rom_length:
            raise ValueError(
                f"raw ROM region must stay {profile.rom_length:,} bytes, "
                f"got {len(rom):,}"
            )
        out[profile.rom_offset:profile.rom_end_offset] = rom
    return out


# ── Checksum fields ───────────────────────────────────────────────────────────

def render_checksum(value: int, fmt: str) -> bytes:
    """On-disk form of a 32-bit checksum."""
    if fmt == CHECKSUM_HEX:
        field = f"{value:08X}".encode("ascii")
    elif fmt == CHECKSUM_BE32:
        field = (value & 0xFFFFFFFF).to_bytes(4, "big")
    else:
        raise ValueError(f"Unknown checksum format: {fmt!r}")

    if len(field) != CHECKSUM_WIDTHS[fmt]:
        raise ChecksumWidthMismatch(
            f"Checksum 0x{value:X} renders to {len(field)} bytes in "
            f"{fmt!r} format, expected {CHECKSUM_WIDTHS[fmt]}"
        )
    return field


def write_checksum(firmware: bytearray, offset: int, value: int, fmt: str) -> None:
    """Overwrite the checksum field at `offset` (negative = from the end) in place."""
    field = render_checksum(value, fmt)
    start = resolve_offset(offset, len(firmware))
    if start < 0 or start + len(field) > len(firmware):
        raise ChecksumWidthMismatch(
            f"Checksum field at {offset} ({len(field)} bytes) does not fit "
            f"in a {len(firmware):,}-byte buffer"
        )
    firmware[start:start + len(field)] = field


def read_checksum(firmware: bytes, offset: int, fmt: str) -> int:
    """Parse the stored checksum field at `offset`."""
    width = CHECKSUM_WIDTHS[fmt]
    start = resolve_offset(offset, len(firmware))
    field = bytes(firmware[start:start + width])
    if len(field) != width:
        raise ChecksumWidthMismatch(
            f"Checksum field at {offset} runs past the end of the buffer"
        )
    if fmt == CHECKSUM_HEX:
        try:
            return int(field.decode("ascii"), 16)
        except (UnicodeDecodeError, ValueError) as e:
            raise ChecksumWidthMismatch(f"Checksum field {field!r} is not hex") from e
    return int.from_bytes(field, "big")
