#!/usr/bin/env python3
# =============================================================================
# validate.py — FCPE Self-Validation Suite
# =============================================================================
#
# Run directly:  python -m FCPE.SVM.validate
#             or python FCPE/SVM/validate.py (from project root)
#
# Tests:
#   1. Constants integrity   — packet framing, table sizes, shipped profiles
#   2. Adler-32              — known vectors, agreement with zlib
#   3. Ascii85               — "z" / "y" shortcuts, line budget, round trip
#   4. IMA 4:1 encoder       — silence framing, state stays in range
#   5. End-to-end patch      — synthetic text and raw updaters verify
# =============================================================================

import sys
import os
import zlib

# Allow running from project root without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import numpy as np

from FCPE.FPM.constants import (
    SAMPLES_PER_PACKET, BYTES_PER_PACKET, NUM_SOUND_PACKETS,
    SOUND_MAX_SIZE, SOUND_COMPRESSED_SIZE,
    IMA_INDEX_TABLE, IMA_STEP_TABLE, STEP_INDEX_MAX,
    SAMPLE_MIN, SAMPLE_MAX,
)
from FCPE.FPM.profiles import PROFILES, IMAC_FIRMWARE_30, IMAC_SLOT_LOADING
from FCPE.FCM.adler32 import adler32
from FCPE.FCM import ascii85
from FCPE.FCM.ima_encoder import IMAEncoder, ima_encode
from FCPE.FIM.injector import inject_chime
from FCPE.SVM.verify import verify_patched_image
from FCPE.SVM.synthetic import build_text_firmware, build_raw_firmware

PASS = "[PASS]"
FAIL = "[FAIL]"
INFO = "[INFO]"

failures = 0

def check(label: str, condition: bool, detail: str = "") -> bool:
    global failures
    if condition:
        print(f"  {PASS} {label}")
    else:
        print(f"  {FAIL} {label}{(' -- ' + detail) if detail else ''}")
        failures += 1
    return condition


def heading(title: str) -> None:
    print("\n" + "="*60)
    print(title)
    print("="*60)


# =============================================================================
# TEST 1 — Constants Integrity
# =============================================================================
def test_constants() -> None:
    heading("TEST 1 — Constants Integrity")

    check("BYTES_PER_PACKET = 34",        BYTES_PER_PACKET == 34,
          f"got {BYTES_PER_PACKET}")
    check("SAMPLES_PER_PACKET = 64",      SAMPLES_PER_PACKET == 64)
    check("Sound slot = 1722 packets",    NUM_SOUND_PACKETS == 1722)
    check("SOUND_MAX_SIZE = 220,416",     SOUND_MAX_SIZE == 220_416,
          f"got {SOUND_MAX_SIZE}")
    check("SOUND_COMPRESSED_SIZE = 58,548", SOUND_COMPRESSED_SIZE == 58_548,
          f"got {SOUND_COMPRESSED_SIZE}")

    check("Step table: 89 entries",       len(IMA_STEP_TABLE) == 89)
    check("Step table: strictly rising",
          all(a < b for a, b in zip(IMA_STEP_TABLE, IMA_STEP_TABLE[1:])))
    check("Step table: entry 80 = 15289", IMA_STEP_TABLE[80] == 15289,
          f"got {IMA_STEP_TABLE[80]}")
    check("Index table: 16 entries",      len(IMA_INDEX_TABLE) == 16)
    check("Index table: sign-symmetric",
          IMA_INDEX_TABLE[:8] == IMA_INDEX_TABLE[8:])

    for profile in PROFILES.values():
        check(f"{profile.key}: sound slot = {NUM_SOUND_PACKETS} packets",
              profile.compressed_size == SOUND_COMPRESSED_SIZE)
        if not profile.is_text_encoded:
            # Text spans are ~5/4 of the decoded ROM, only raw sizes compare
            check(f"{profile.key}: ROM holds the sound slot",
                  profile.rom_length >= profile.min_rom_length)
            check(f"{profile.key}: ROM fits its checksum span",
                  profile.rom_length <= profile.rom_checksum_padded_length)
    check("Profiles: distinct MD5s",
          IMAC_FIRMWARE_30.md5 != IMAC_SLOT_LOADING.md5)


# =============================================================================
# TEST 2 — Adler-32
# =============================================================================
def test_adler32() -> None:
    heading("TEST 2 — Adler-32")

    check("Empty buffer = 0x00000001",    adler32(b"") == 1)
    check("'Wikipedia' = 0x11E60398",     adler32(b"Wikipedia") == 0x11E60398,
          f"got {adler32(b'Wikipedia'):08X}")

    rng = np.random.default_rng(1998)
    blob = rng.integers(0, 256, size=300_000, dtype=np.uint8).tobytes()
    check("300 KB random = zlib.adler32",
          adler32(blob) == zlib.adler32(blob))
    check("All 0xFF (512 KB) = zlib.adler32",
          adler32(b"\xff" * 0x80000) == zlib.adler32(b"\xff" * 0x80000))
    check("Prefix length honoured",
          adler32(blob, 1234) == zlib.adler32(blob[:1234]))


# =============================================================================
# TEST 3 — Ascii85
# =============================================================================
def test_ascii85() -> None:
    heading("TEST 3 — Ascii85")

    check("'z' decodes to 4 zero bytes",  ascii85.decode(b"z") == bytes(4))
    check("'y' decodes to 4 0xFF bytes",  ascii85.decode(b"y") == b"\xff" * 4)
    check("Zero group encodes to 'z'",    ascii85.encode_all(bytes(8)) == b"zz")
    check("0xFF group encodes to 'y'",    ascii85.encode_all(b"\xff" * 4) == b"y")

    text, consumed = ascii85.encode(bytes(32), 0, 4)
    check("Budget of 4 chars: nothing encoded, even for 'z'",
          text == b"" and consumed == 0, f"got {text!r}, {consumed}")

    text, consumed = ascii85.encode(b"\x01\x02\x03\x04" * 10, 0, 12)
    check("Budget of 12 chars: two full groups",
          len(text) == 10 and consumed == 8, f"got {len(text)} chars, {consumed} bytes")

    rng = np.random.default_rng(85)
    blob = rng.integers(0, 256, size=4096, dtype=np.uint8).tobytes()
    blob = bytes(64) + blob + b"\xff" * 64
    check("Round trip (4 KB + shortcut runs)",
          ascii85.decode(ascii85.encode_all(blob)) == blob)


# =============================================================================
# TEST 4 — IMA 4:1 Encoder
# =============================================================================
def test_ima() -> None:
    heading("TEST 4 — IMA 4:1 Encoder")

    silence = ima_encode(bytes(SAMPLES_PER_PACKET * 2 * 4))
    check("Silence: 4 packets = 136 bytes", len(silence) == 4 * BYTES_PER_PACKET,
          f"got {len(silence)}")
    check("Silence: every byte zero",      silence == bytes(len(silence)))

    rng = np.random.default_rng(4)
    noise = rng.integers(SAMPLE_MIN, SAMPLE_MAX + 1, size=SAMPLES_PER_PACKET * 20)
    enc = IMAEncoder()
    in_range = True
    for sample in noise.tolist():
        enc.encode_sample(sample)
        if not (0 <= enc.step_index <= STEP_INDEX_MAX
                and SAMPLE_MIN <= enc.predicted_sample <= SAMPLE_MAX):
            in_range = False
            break
    check("Full-scale noise: predictor and index stay in range", in_range)

    packets = ima_encode(noise.astype(">i2").tobytes())
    check("Full-scale noise: 20 packets", len(packets) == 20 * BYTES_PER_PACKET)
    headers = [int.from_bytes(packets[i:i + 2], "big")
               for i in range(0, len(packets), BYTES_PER_PACKET)]
    check("Headers: step index field <= 88",
          all((h & 0x7F) <= STEP_INDEX_MAX for h in headers))


# =============================================================================
# TEST 5 — End-to-end Patch (synthetic updaters)
# =============================================================================
def test_end_to_end() -> None:
    heading("TEST 5 — End-to-end Patch")

    t = np.arange(SAMPLES_PER_PACKET * 2 - 16)
    tone = (np.sin(2 * np.pi * 880 * t / 44_100) * 12_000).astype(">i2").tobytes()

    for name, build in (("text", build_text_firmware), ("raw", build_raw_firmware)):
        firmware, profile = build()
        report = inject_chime(firmware, tone, profile)
        result = verify_patched_image(report.firmware, profile, report.length_delta)

        print(f"  {INFO} {name}: {len(firmware)} -> {len(report.firmware)} bytes, "
              f"ROM {report.rom_checksum:08X}, file {report.file_checksum:08X}")
        check(f"{name}: ROM checksum verifies",  result.rom_ok,
              f"stored {result.rom_stored:08X} computed {result.rom_computed:08X}")
        check(f"{name}: file checksum verifies", result.file_ok,
              f"stored {result.file_stored:08X} computed {result.file_computed:08X}")
        check(f"{name}: chime spliced in",
              report.firmware != firmware and len(report.compressed_sound)
              == profile.compressed_size)
        if not profile.is_text_encoded:
            check(f"{name}: length unchanged", report.length_delta == 0)


# =============================================================================
# Summary
# =============================================================================
def run() -> int:
    """Run every test section and return the number of failed checks."""
    global failures
    failures = 0

    test_constants()
    test_adler32()
    test_ascii85()
    test_ima()
    test_end_to_end()

    print("\n" + "="*60)
    if failures == 0:
        print(f"  ALL TESTS PASSED")
    else:
        print(f"  {failures} TEST(S) FAILED")
    print("="*60 + "\n")
    return failures


if __name__ == "__main__":
    sys.exit(1 if run() else 0)
