# =============================================================================
# FCPE/FPM/__init__.py — Firmware Profile Module
# =============================================================================
#
# The FPM is the single source of truth for the chime format, the codec
# alphabets, the ADPCM tables, and the per-updater layout profiles.
#
# All other FCPE sub-modules import exclusively from here.
# Never define firmware offsets outside this module.
#
# Sub-modules:
#   constants.py  — audio framing, codec and checksum constants
#   profiles.py   — FirmwareProfile and the two shipped updater profiles
# =============================================================================
