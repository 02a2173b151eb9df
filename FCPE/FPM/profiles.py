# =============================================================================
# profiles.py — FPM Firmware Profiles
# =============================================================================
#
# One FirmwareProfile per supported firmware updater. The injector is written
# against these fields only, never against a variant's literals.
#
# Offsets
# -------
#   rom_offset / rom_length    : span of the ROM region inside the firmware
#                                file (for ascii85 images this is the span
#                                of the "dc85 ..." text lines, not the
#                                decoded size)
#   sound_offset               : start of the ima4 packets inside the
#                                decoded / sliced ROM region
#   rom_checksum_offset        : Adler-32 field for the ROM region, in the
#                                coordinates of the ORIGINAL firmware file
#   file_checksum_offset       : Adler-32 field for the whole file
#   file_checksum_coverage_end : the whole-file checksum covers
#                                firmware[:coverage_end]
#
# Negative offsets count from the end of the buffer (Python index style).
# The text-encoded updater needs that because re-encoding the ROM can change
# the file length; for the raw updater the length never changes so the two
# readings coincide.
#
# ┌─────────────────────────────────────────────────────────────────────────┐
# │  PROFILE 1 — "iMac Firmware 3.0" updater  (text-encoded ROM)           │
# ├─────────────────────────────────────────────────────────────────────────┤
# │  ROM lines    : 0x70192 – 0xDCC6F   "dc85 <ascii85>\r", 100 cols       │
# │  Sound        : ROM + 0x43C50, 1722 ima4 packets                        │
# │  ROM checksum : hex text at 0xDCCCD, over ROM padded with 0x00          │
# │                 to 0x7FFFC bytes                                        │
# │  File checksum: hex text at EOF-9, covering everything up to EOF-14     │
# └─────────────────────────────────────────────────────────────────────────┘
#
# ┌─────────────────────────────────────────────────────────────────────────┐
# │  PROFILE 2 — slot-loading iMac updater  (raw "sboot" section)          │
# ├─────────────────────────────────────────────────────────────────────────┤
# │  sboot        : 0x6E07C, 0x72280 bytes used of a 0x80000 slot           │
# │  Sound        : sboot + 0x63DB0, 1722 ima4 packets (the table entry     │
# │                 says 0x63DA0 — it includes a 16-byte sound header)      │
# │  ROM checksum : big-endian at 0x6890, over sboot padded with 0xFF       │
# │                 to 0x80000 - 4 (the flash keeps the sum in the last 4)  │
# │  File checksum: big-endian in the last 4 bytes, covering the rest       │
# └─────────────────────────────────────────────────────────────────────────┘
# =============================================================================

from __future__ import annotations
import hashlib
from typing import NamedTuple, Optional

from FCPE.FPM.constants import (
    BYTES_PER_PACKET, SAMPLES_PER_PACKET, BYTES_PER_SAMPLE,
    NUM_SOUND_PACKETS,
    ROM_LINE_SENTINEL, ROM_LINE_TERMINATOR, FIRMWARE_COLUMN_WIDTH,
    CHECKSUM_HEX, CHECKSUM_BE32,
    ROM_ENCODING_ASCII85, ROM_ENCODING_RAW,
)


class FirmwareProfile(NamedTuple):
    key:                        str
    description:                str
    md5:                        str      # hex digest of the untouched updater
    rom_encoding:               str      # ROM_ENCODING_ASCII85 | ROM_ENCODING_RAW
    rom_offset:                 int
    rom_length:                 int
    sound_offset:               int
    rom_checksum_offset:        int
    rom_checksum_pad_byte:      int
    rom_checksum_padded_length: int
    file_checksum_offset:       int
    file_checksum_coverage_end: int
    checksum_format:            str      # CHECKSUM_HEX | CHECKSUM_BE32
    sound_packets:              int = NUM_SOUND_PACKETS
    line_sentinel:              bytes = ROM_LINE_SENTINEL
    line_terminator:            bytes = ROM_LINE_TERMINATOR
    column_width:               int = FIRMWARE_COLUMN_WIDTH

    # ── Derived sizes ────────────────────────────────────────────────────────

    @property
    def rom_end_offset(self) -> int:
        return self.rom_offset + self.rom_length

    @property
    def sound_samples_max(self) -> int:
        return self.sound_packets * SAMPLES_PER_PACKET

    @property
    def sound_max_size(self) -> int:
        """Largest accepted PCM input, in bytes."""
        return self.sound_samples_max * BYTES_PER_SAMPLE

    @property
    def compressed_size(self) -> int:
        return self.sound_packets * BYTES_PER_PACKET

    @property
    def min_rom_length(self) -> int:
        """Decoded ROM must at least hold the whole sound payload."""
        return self.sound_offset + self.compressed_size

    @property
    def is_text_encoded(self) -> bool:
        return self.rom_encoding == ROM_ENCODING_ASCII85


# -----------------------------------------------------------------------------
# SHIPPED PROFILES
# -----------------------------------------------------------------------------

IMAC_FIRMWARE_30 = FirmwareProfile(
    key                        = "imac-firmware-3.0",
    description                = "iMac Firmware 3.0 updater (Ascii85 ROM image)",
    md5                        = "702c51c05f59fb751e5dcfb5b194fba3",
    rom_encoding               = ROM_ENCODING_ASCII85,
    rom_offset                 = 0x70192,
    rom_length                 = 0xDCC6F - 0x70192,
    sound_offset               = 0x43C50,
    rom_checksum_offset        = 0xDCCCD,
    rom_checksum_pad_byte      = 0x00,
    rom_checksum_padded_length = 0x7FFFC,
    file_checksum_offset       = -9,
    file_checksum_coverage_end = -14,
    checksum_format            = CHECKSUM_HEX,
)

IMAC_SLOT_LOADING = FirmwareProfile(
    key                        = "imac-slot-loading",
    description                = "Slot-loading iMac firmware updater (raw sboot section)",
    md5                        = "9df1737e52474ca77d682603a66b3c91",
    rom_encoding               = ROM_ENCODING_RAW,
    rom_offset                 = 0x6E07C,
    rom_length                 = 0x72280,
    sound_offset               = 0x63DB0,
    rom_checksum_offset        = 0x6890,
    rom_checksum_pad_byte      = 0xFF,
    rom_checksum_padded_length = 0x80000 - 4,
    file_checksum_offset       = -4,
    file_checksum_coverage_end = -4,
    checksum_format            = CHECKSUM_BE32,
)

PROFILES: dict[str, FirmwareProfile] = {
    p.key: p for p in (IMAC_FIRMWARE_30, IMAC_SLOT_LOADING)
}


# -----------------------------------------------------------------------------
# Lookup helpers
# -----------------------------------------------------------------------------

def firmware_md5(firmware: bytes) -> str:
    return hashlib.md5(firmware).hexdigest()


def get_profile(key: str) -> FirmwareProfile:
    """Return the shipped profile called `key`."""
    if key not in PROFILES:
        raise ValueError(
            f"Unknown firmware profile: {key!r}\n"
            f"Valid profiles: {sorted(PROFILES)}"
        )
    return PROFILES[key]


def detect_profile(firmware: bytes) -> Optional[FirmwareProfile]:
    """Match a firmware image to a shipped profile by its MD5, or None."""
    digest = firmware_md5(firmware)
    for profile in PROFILES.values():
        if profile.md5 == digest:
            return profile
    return None
