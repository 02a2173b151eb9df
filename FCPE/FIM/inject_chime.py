#!/usr/bin/env python3
# =============================================================================
# inject_chime.py — Startup Chime Injector CLI
# =============================================================================
#
# Puts a new startup chime into an iMac firmware updater.
#
# Usage:
#   python -m FCPE.FIM.inject_chime <firmware> <sound> <output>
#   python -m FCPE.FIM.inject_chime <firmware> <sound> <output> --profile imac-slot-loading
#   python -m FCPE.FIM.inject_chime <firmware> chime.wav <output> --export-aifc chime.aifc
#
# <sound> is 16-bit mono 44.1 kHz: raw big-endian PCM, or a WAV / AIFF / FLAC.
# The profile is detected from the firmware's MD5 unless --profile is given.
#
# Output sections:
#   [1] Firmware      — profile, size, MD5 check
#   [2] Sound         — input size, how much of the slot it fills
#   [3] Patch report  — ROM size, new checksums, length change
#   [4] Verification  — both checksums re-derived before writing; the file
#                       is only written if they match, then read back
#   [5] VERDICT
#
# =============================================================================

from __future__ import annotations
import sys, os, argparse

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from FCPE.FPM.constants import SAMPLE_RATE, BYTES_PER_SAMPLE
from FCPE.FPM.profiles import PROFILES, get_profile, detect_profile, firmware_md5
from FCPE.FCM.aifc_writer import build_aifc_ima4
from FCPE.FIM.sound_input import read_file, write_file, load_sound
from FCPE.FIM.injector import inject_chime
from FCPE.SVM.verify import verify_patched_image, format_result
from FCPE.errors import PatchError, HashMismatch

DIVIDER = "=" * 68


def run_injection(
    firmware_path: str,
    sound_path:    str,
    output_path:   str,
    profile_key:   str | None = None,
    aifc_path:     str | None = None,
    check_hash:    bool = True,
) -> bool:
    """
    Run the whole injection and print the report.
    Returns True when a verified firmware file was written.
    """
    print(f"\n{DIVIDER}")
    print(f"  iMac Startup Chime Injector")
    print(DIVIDER)

    # -----------------------------------------------------------------------
    # [1] Firmware
    # -----------------------------------------------------------------------
    firmware = read_file(firmware_path)

    if profile_key:
        profile = get_profile(profile_key)
    else:
        profile = detect_profile(firmware)
        if profile is None:
            raise HashMismatch(
                f"Firmware \"{firmware_path}\" does not match any supported updater "
                f"(MD5 {firmware_md5(firmware)}); known: {sorted(PROFILES)}"
            )

    print(f"  Firmware : {os.path.basename(firmware_path)}")
    print(f"  Size     : {len(firmware):,} bytes")
    print(f"  Profile  : {profile.key} — {profile.description}")
    if not check_hash:
        print(f"  [INFO] MD5 check skipped (--skip-hash-check)")

    # -----------------------------------------------------------------------
    # [2] Sound
    # -----------------------------------------------------------------------
    sound = load_sound(sound_path)
    samples = len(sound) // BYTES_PER_SAMPLE
    print(f"\n  -- Sound --")
    print(f"  File     : {os.path.basename(sound_path)}")
    print(f"  Samples  : {samples:,} of {profile.sound_samples_max:,}"
          f"  ({samples / SAMPLE_RATE:.2f} s of {profile.sound_samples_max / SAMPLE_RATE:.2f} s)")
    if len(sound) < profile.sound_max_size:
        print(f"  [INFO] Shorter than the slot — remainder filled with silence")

    # -----------------------------------------------------------------------
    # [3] Patch
    # -----------------------------------------------------------------------
    report = inject_chime(firmware, sound, profile, check_hash=check_hash)

    print(f"\n  -- Patch Report --")
    print(f"  ROM region      : {report.rom_length:,} bytes ({profile.rom_encoding})")
    print(f"  Compressed chime: {len(report.compressed_sound):,} bytes "
          f"({profile.sound_packets} ima4 packets)")
    print(f"  ROM checksum    : {report.rom_checksum:08X}")
    print(f"  File checksum   : {report.file_checksum:08X}")
    print(f"  Length change   : {report.length_delta:+,} bytes")

    # -----------------------------------------------------------------------
    # [4] Verification (before anything is written, then the file on disk)
    # -----------------------------------------------------------------------
    print(f"\n  -- Verification --")
    result = verify_patched_image(
        report.firmware, profile, length_delta=report.length_delta,
    )
    print(format_result(result))

    written_ok = False
    if result.ok:
        write_file(output_path, report.firmware)
        written_ok = read_file(output_path) == report.firmware
        tag = "[PASS]" if written_ok else "[FAIL]"
        print(f"  {tag} Written file    {output_path}")

        if written_ok and aifc_path:
            write_file(aifc_path, build_aifc_ima4(report.compressed_sound))
            print(f"  [INFO] AIFC preview {aifc_path}")
    else:
        print(f"  [INFO] Nothing written")

    # -----------------------------------------------------------------------
    # [5] Verdict
    # -----------------------------------------------------------------------
    print(f"\n{DIVIDER}")
    if written_ok:
        print(f"  VERDICT: PASS — successfully injected new startup chime")
    elif result.ok:
        print(f"  VERDICT: FAIL — written file does not match the patched image")
    else:
        print(f"  VERDICT: FAIL — patched image does not verify")
    print(f"{DIVIDER}\n")

    return written_ok


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Inject a new startup chime into an iMac firmware updater",
    )
    parser.add_argument("firmware", help="Original firmware updater file")
    parser.add_argument(
        "sound",
        help="16-bit mono 44.1 kHz sound: raw big-endian PCM, or WAV/AIFF/FLAC",
    )
    parser.add_argument("output", help="Patched firmware file to write")
    parser.add_argument(
        "--profile", choices=sorted(PROFILES), default=None,
        help="Updater layout, default: detect from the firmware's MD5",
    )
    parser.add_argument(
        "--export-aifc", metavar="PATH", default=None,
        help="Also write the compressed chime as an AIFF-C (ima4) file",
    )
    parser.add_argument(
        "--skip-hash-check", action="store_true",
        help="Patch even if the firmware is not the reference image "
             "(needed to re-patch an already patched file)",
    )
    args = parser.parse_args(argv)

    if args.skip_hash_check and not args.profile:
        parser.error("--skip-hash-check requires --profile")

    try:
        ok = run_injection(
            firmware_path = args.firmware,
            sound_path    = args.sound,
            output_path   = args.output,
            profile_key   = args.profile,
            aifc_path     = args.export_aifc,
            check_hash    = not args.skip_hash_check,
        )
    except PatchError as e:
        print(f"  [!!] {e}", file=sys.stderr)
        return 1
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
