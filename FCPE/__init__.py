# =============================================================================
# Firmware Chime Patch Engine (FCPE)
# Replaces the startup chime of an iMac firmware updater.
# =============================================================================
#
# ── WHAT HAS TO STAY BYTE-EXACT ──────────────────────────────────────────────
#
# The updater and the boot ROM each carry an Adler-32.  A patched image is
# only flashed if BOTH still match, so the engine must:
#   - compress the chime into exactly the packet count the ROM reserves
#     (1722 ima4 packets, 34 bytes / 64 samples each)
#   - splice it over the old chime without moving anything else in the ROM
#   - recompute the ROM checksum over the ROM padded to its flash slot
#   - re-embed the ROM (re-encoding it as Ascii85 text for the text updater,
#     wrapped the same way Apple wraps it)
#   - recompute the whole-file checksum over the possibly resized updater
#
# ── DATA FLOW ─────────────────────────────────────────────────────────────────
#   updater file ──► MD5 gate ──► ROM region ──┐
#   sound file ──► pad to slot ──► IMA 4:1 ────┴─► splice ──► ROM Adler-32
#                    ──► re-embed ──► file Adler-32 ──► patched updater
#
# =============================================================================
# TWO UPDATER LAYOUTS  —  described by profiles, never hard-coded
# =============================================================================
#
# ┌─────────────────────────────────────────────────────────────────────────┐
# │  "iMac Firmware 3.0"        │  slot-loading iMac updater               │
# ├─────────────────────────────┼───────────────────────────────────────────┤
# │  ROM as "dc85 " Ascii85     │  ROM ("sboot") as raw bytes               │
# │  lines, 100 columns, "\r"   │  at a fixed offset                        │
# │  ROM pad 0x00 to 0x7FFFC    │  ROM pad 0xFF to 0x7FFFC                  │
# │  checksums as hex text      │  checksums as big-endian words            │
# │  file length may change     │  file length never changes                │
# └─────────────────────────────┴───────────────────────────────────────────┘
#
# ── Module layout ─────────────────────────────────────────────────────────────
#   FPM/  — constants and firmware profiles (single source of truth)
#   FCM/  — Adler-32, Ascii85, IMA 4:1 encoder, AIFC export
#   FIM/  — sound loading, ROM region handling, inject_chime pipeline, CLI
#   SVM/  — patched-image verifier and self-validation suite
#   errors.py — PatchError hierarchy
# =============================================================================

from FCPE.errors import PatchError  # noqa: F401
from FCPE.FPM.profiles import (  # noqa: F401
    FirmwareProfile,
    IMAC_FIRMWARE_30,
    IMAC_SLOT_LOADING,
    PROFILES,
    detect_profile,
    get_profile,
)
from FCPE.FIM.injector import (  # noqa: F401
    PatchReport,
    PatchResult,
    inject_chime,
    try_inject_chime,
)

__version__ = "1.0.0"
