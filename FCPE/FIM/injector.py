# =============================================================================
# injector.py — Startup Chime Injector (patch orchestrator)
# =============================================================================
#
# Replaces the startup chime inside an iMac firmware updater and fixes both
# Adler-32 checksums so the updater (and the boot ROM) accept the result.
#
# ── PIPELINE ──────────────────────────────────────────────────────────────────
#   1. verify_firmware     MD5 of the whole updater == profile.md5
#   2. extract_rom_region  decode "dc85" lines / slice the raw section
#   3. normalize_sound     reject too long / odd, pad with silence
#   4. compress_sound      IMA 4:1, must be exactly sound_packets·34 bytes
#   5. splice_sound        overwrite the ima4 packets inside the ROM
#   6. rom_checksum        Adler-32 of the ROM padded to its flash slot,
#                          written at rom_checksum_offset (original layout)
#   7. embed_rom_region    re-encode / copy the ROM back into the updater
#   8. file_checksum       Adler-32 of the updater minus its checksum trailer
#   9. PatchReport         the finished image
#
# ORDERING: step 6 must see the spliced ROM and step 8 must see the
# re-embedded ROM.  Every stage returns a new value; nothing is kept between
# calls and the caller's buffers are never modified.
#
# FAILURE: every check raises a PatchError subclass and aborts the whole
# patch.  There is no partial output.
#
# LIMITATION: a patched image no longer matches profile.md5, so patching it
# again requires check_hash=False.
# =============================================================================

from __future__ import annotations
from typing import NamedTuple, Optional

from FCPE.FPM.profiles import FirmwareProfile, firmware_md5
from FCPE.FCM.adler32 import adler32
from FCPE.FCM.ima_encoder import ima_encode
from FCPE.FIM.sound_input import normalize_sound
from FCPE.FIM.rom_region import (
    extract_rom_region, embed_rom_region,
    write_checksum, resolve_offset,
)
from FCPE.errors import (
    PatchError, HashMismatch, RegionTooLong, CompressedLengthMismatch,
)


class PatchReport(NamedTuple):
    firmware:         bytes    # patched updater image
    profile:          FirmwareProfile
    rom_checksum:     int
    file_checksum:    int
    rom_length:       int      # decoded / sliced ROM size
    length_delta:     int      # len(patched) - len(original)
    compressed_sound: bytes    # ima4 packets that went into the ROM


class PatchResult(NamedTuple):
    success: bool
    report:  Optional[PatchReport] = None
    error:   Optional[PatchError] = None


# ── Stages ────────────────────────────────────────────────────────────────────

def verify_firmware(firmware: bytes, profile: FirmwareProfile) -> None:
    digest = firmware_md5(firmware)
    if digest != profile.md5:
        raise HashMismatch(
            f"Firmware supplied is not the original {profile.description} "
            f"(MD5 {digest}, expected {profile.md5})"
        )


def compress_sound(pcm: bytes, profile: FirmwareProfile) -> bytes:
    compressed = ima_encode(pcm)
    if len(compressed) != profile.compressed_size:
        raise CompressedLengthMismatch(
            f"Sound could not be compressed properly: {len(compressed):,} bytes, "
            f"expected {profile.compressed_size:,}"
        )
    return compressed


def splice_sound(rom: bytes, compressed: bytes, profile: FirmwareProfile) -> bytearray:
    out = bytearray(rom)
    start = profile.sound_offset
    out[start:start + len(compressed)] = compressed
    return out


def rom_checksum(rom: bytes, profile: FirmwareProfile) -> int:
    """Adler-32 of the ROM as it will sit in flash: padded to its slot size."""
    pad_length = profile.rom_checksum_padded_length - len(rom)
    if pad_length < 0:
        raise RegionTooLong(
            f"ROM region is {len(rom):,} bytes, larger than its "
            f"{profile.rom_checksum_padded_length:,}-byte checksum span"
        )
    padded = bytes(rom) + bytes([profile.rom_checksum_pad_byte]) * pad_length
    return adler32(padded)


def file_checksum(firmware: bytes, profile: FirmwareProfile) -> int:
    """Adler-32 of the updater up to (not including) its checksum trailer."""
    end = resolve_offset(profile.file_checksum_coverage_end, len(firmware))
    return adler32(firmware, max(0, end))


# ── Orchestrator ──────────────────────────────────────────────────────────────

def inject_chime(
    firmware:   bytes,
    sound:      bytes,
    profile:    FirmwareProfile,
    check_hash: bool = True,
) -> PatchReport:
    """
    Patch `sound` (big-endian 16-bit mono PCM) into `firmware`.

    Args:
        firmware:   Untouched updater image.
        sound:      Chime samples; shorter than the slot is fine.
        profile:    Layout of this updater.
        check_hash: Refuse anything but the reference image. Only disable to
                    re-patch an already patched file.

    Returns:
        PatchReport with the finished image and both new checksums.

    Raises:
        PatchError subclass — see FCPE.errors.
    """
    if check_hash:
        verify_firmware(firmware, profile)

    rom = extract_rom_region(firmware, profile)

    pcm = normalize_sound(sound, profile)
    compressed = compress_sound(pcm, profile)
    rom = splice_sound(rom, compressed, profile)

    patched = bytearray(firmware)
    rom_sum = rom_checksum(rom, profile)
    write_checksum(patched, profile.rom_checksum_offset, rom_sum, profile.checksum_format)

    # May change the length for text-encoded ROMs
    patched = embed_rom_region(patched, rom, profile)

    file_sum = file_checksum(patched, profile)
    write_checksum(patched, profile.file_checksum_offset, file_sum, profile.checksum_format)

    return PatchReport(
        firmware         = bytes(patched),
        profile          = profile,
        rom_checksum     = rom_sum,
        file_checksum    = file_sum,
        rom_length       = len(rom),
        length_delta     = len(patched) - len(firmware),
        compressed_sound = compressed,
    )


def try_inject_chime(
    firmware:   bytes,
    sound:      bytes,
    profile:    FirmwareProfile,
    check_hash: bool = True,
) -> PatchResult:
    """inject_chime() with the outcome returned instead of raised."""
    try:
        report = inject_chime(firmware, sound, profile, check_hash=check_hash)
    except PatchError as e:
        return PatchResult(success=False, error=e)
    return PatchResult(success=True, report=report)
