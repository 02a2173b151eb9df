# =============================================================================
# synthetic.py — Synthetic Updater Images
# =============================================================================
#
# Apple's updaters cannot be shipped with this project, so the validation
# suite and the tests patch small stand-ins built here.  Each builder returns
# (firmware, profile): a miniature updater laid out exactly like the real one
# and a profile derived from the real profile with the offsets, sizes and
# MD5 of the miniature.
#
#   text updater:  header lines, "dc85 " ROM lines (20 columns), a ROM
#                  checksum line, and a 14-byte trailer holding the file
#                  checksum at EOF-9
#   raw updater :  header with the ROM checksum word at 0x10, raw ROM at
#                  0x40, tail, file checksum in the last 4 bytes
#
# The ROM holds runs of 0x00 and 0xFF (exercising the "z" / "y" shortcuts)
# and a non-repeating ramp.  The sound slot is 2 packets at ROM + 0x40.
# =============================================================================

from __future__ import annotations

from FCPE.FPM.profiles import (
    FirmwareProfile, IMAC_FIRMWARE_30, IMAC_SLOT_LOADING, firmware_md5,
)
from FCPE.FIM.rom_region import encode_text_region

SYNTH_ROM_SIZE      = 256
SYNTH_SOUND_OFFSET  = 0x40
SYNTH_SOUND_PACKETS = 2
SYNTH_COLUMN_WIDTH  = 20

_TEXT_HEADER     = b"\\ iMac Firmware (synthetic)\rhex load-base\r"
_TEXT_ROM_LABEL  = b"\\ ROM Adler32: "
_TEXT_TRAILER    = b"\r\\ X "       # 5 bytes, then 8 hex digits and "\r"
_RAW_HEADER_SIZE = 0x40


def synthetic_rom() -> bytes:
    ramp = bytes((i * 37 + 11) & 0xFF for i in range(SYNTH_ROM_SIZE - 64))
    return bytes(32) + b"\xff" * 32 + ramp


def build_text_firmware() -> tuple[bytes, FirmwareProfile]:
    rom = synthetic_rom()
    layout = IMAC_FIRMWARE_30._replace(
        key                        = "synthetic-text",
        description                = "synthetic Ascii85 updater",
        sound_offset               = SYNTH_SOUND_OFFSET,
        sound_packets              = SYNTH_SOUND_PACKETS,
        rom_checksum_padded_length = 512,
        column_width               = SYNTH_COLUMN_WIDTH,
    )
    rom_text = encode_text_region(rom, layout)

    head = _TEXT_HEADER + rom_text + b"\r" + _TEXT_ROM_LABEL
    firmware = (
        head + b"00000000\r"
        + b"boot-rom-image install\r"
        + _TEXT_TRAILER + b"00000000\r"
    )

    profile = layout._replace(
        md5                 = firmware_md5(firmware),
        rom_offset          = len(_TEXT_HEADER),
        rom_length          = len(rom_text),
        rom_checksum_offset = len(head),
    )
    return firmware, profile


def build_raw_firmware() -> tuple[bytes, FirmwareProfile]:
    rom = synthetic_rom()
    header = bytearray(b"\x5a" * _RAW_HEADER_SIZE)
    header[0x10:0x14] = bytes(4)
    tail = bytes(range(60)) + bytes(4)

    firmware = bytes(header) + rom + tail

    profile = IMAC_SLOT_LOADING._replace(
        key                        = "synthetic-raw",
        description                = "synthetic raw updater",
        md5                        = firmware_md5(firmware),
        rom_offset                 = _RAW_HEADER_SIZE,
        rom_length                 = len(rom),
        sound_offset               = SYNTH_SOUND_OFFSET,
        sound_packets              = SYNTH_SOUND_PACKETS,
        rom_checksum_offset        = 0x10,
        rom_checksum_padded_length = 0x200 - 4,
    )
    return firmware, profile
