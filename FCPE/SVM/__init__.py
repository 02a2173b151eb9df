# =============================================================================
# FCPE/SVM/__init__.py — Signal Verification Module
# =============================================================================
#
# Tools for checking that a patched updater would be accepted by the
# updater script and the boot ROM, and that the engine itself still behaves.
#
# Sub-modules:
#   verify.py    — re-derives and compares both stored Adler-32 checksums
#   validate.py  — self-validation suite for the whole FCPE stack
#   synthetic.py — miniature updater images for validation and tests
# =============================================================================
