# =============================================================================
# FIM — Firmware Injection Module
# Subfolder of FCPE (Firmware Chime Patch Engine)
# =============================================================================
#
# Drives the codecs in FCM according to an FPM profile to turn an original
# updater plus a sound file into a patched, checksum-correct updater.
#
# Modules:
#   sound_input.py  — file I/O, WAV/AIFF/raw chime loading, slot padding
#   rom_region.py   — ROM extraction / re-embedding, checksum field codec
#   injector.py     — the staged patch pipeline (inject_chime)
#   inject_chime.py — command-line front end
#
# Verification of finished images lives in FCPE/SVM/
# =============================================================================
