#!/usr/bin/env python3
# =============================================================================
# verify.py — Patched Firmware Verifier
# =============================================================================
#
# Re-derives both Adler-32 checksums of a patched updater from scratch and
# compares them with what is stored in the file: the same two checks the
# updater script and the boot ROM make before accepting an image.
#
# Text-encoded images may have changed length when the ROM was re-encoded.
# Pass the PatchReport's length_delta so the ROM span (and any field that
# sits after it) is shifted to the patched layout.
#
# Usage:
#   python -m FCPE.SVM.verify <patched_firmware> --profile imac-slot-loading
#   python -m FCPE.SVM.verify <patched_firmware> --profile imac-firmware-3.0 --length-delta 12
# =============================================================================

from __future__ import annotations
import argparse
import sys
from typing import NamedTuple

from FCPE.FPM.profiles import FirmwareProfile, PROFILES, get_profile
from FCPE.FIM.rom_region import extract_rom_region, read_checksum
from FCPE.FIM.injector import rom_checksum, file_checksum
from FCPE.FIM.sound_input import read_file
from FCPE.errors import PatchError


class VerifyResult(NamedTuple):
    rom_stored:    int
    rom_computed:  int
    file_stored:   int
    file_computed: int

    @property
    def rom_ok(self) -> bool:
        return self.rom_stored == self.rom_computed

    @property
    def file_ok(self) -> bool:
        return self.file_stored == self.file_computed

    @property
    def ok(self) -> bool:
        return self.rom_ok and self.file_ok


def patched_layout(profile: FirmwareProfile, length_delta: int) -> FirmwareProfile:
    """Profile describing an image whose ROM text span grew by `length_delta`."""
    if length_delta == 0:
        return profile
    rom_checksum_offset = profile.rom_checksum_offset
    if rom_checksum_offset >= profile.rom_end_offset:
        rom_checksum_offset += length_delta
    return profile._replace(
        rom_length          = profile.rom_length + length_delta,
        rom_checksum_offset = rom_checksum_offset,
    )


def verify_patched_image(
    firmware:     bytes,
    profile:      FirmwareProfile,
    length_delta: int = 0,
) -> VerifyResult:
    """
    Recompute and compare the ROM-region and whole-file checksums.

    Raises:
        PatchError subclass if the ROM region cannot be extracted or a
        checksum field cannot be parsed.
    """
    layout = patched_layout(profile, length_delta)
    rom = extract_rom_region(firmware, layout)

    return VerifyResult(
        rom_stored    = read_checksum(firmware, layout.rom_checksum_offset, layout.checksum_format),
        rom_computed  = rom_checksum(rom, layout),
        file_stored   = read_checksum(firmware, layout.file_checksum_offset, layout.checksum_format),
        file_computed = file_checksum(firmware, layout),
    )


def format_result(result: VerifyResult) -> str:
    def line(label: str, ok: bool, stored: int, computed: int) -> str:
        tag = "[PASS]" if ok else "[FAIL]"
        return f"  {tag} {label:<14} stored {stored:08X}  computed {computed:08X}"

    return "\n".join([
        line("ROM checksum", result.rom_ok, result.rom_stored, result.rom_computed),
        line("File checksum", result.file_ok, result.file_stored, result.file_computed),
    ])


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Verify the checksums of a patched iMac firmware updater",
    )
    parser.add_argument("firmware", help="Path to the patched updater file")
    parser.add_argument(
        "--profile", choices=sorted(PROFILES), required=True,
        help="Updater layout the file was patched with",
    )
    parser.add_argument(
        "--length-delta", type=int, default=0,
        help="Bytes the ROM text grew by when patched (text-encoded updaters)",
    )
    args = parser.parse_args(argv)

    try:
        result = verify_patched_image(
            read_file(args.firmware),
            get_profile(args.profile),
            length_delta=args.length_delta,
        )
    except PatchError as e:
        print(f"  [!!] {e}", file=sys.stderr)
        sys.exit(1)

    print(format_result(result))
    sys.exit(0 if result.ok else 1)


if __name__ == "__main__":
    main()
