# =============================================================================
# FCM — Firmware Codec Module
# Subfolder of FCPE (Firmware Chime Patch Engine)
# =============================================================================
#
# The three leaf codecs the injector is built from, plus the AIFC exporter.
# None of them know about firmware layouts or profiles.
#
# Modules:
#   adler32.py     — Adler-32 checksum (ROM region and whole updater file)
#   ascii85.py     — Apple "dc85" Ascii85 decode / line-budgeted encode
#   ima_encoder.py — stateful IMA 4:1 ADPCM encoder, ima4 packet framing
#   aifc_writer.py — AIFF-C container for auditioning the compressed chime
#
# Constants live in FCPE/FPM/constants.py
# =============================================================================
