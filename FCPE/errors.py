# =============================================================================
# errors.py — FCPE Patch Errors
# =============================================================================
#
# Every failure the patch engine can detect. All of them are fatal: the
# engine raises at the point of detection, never retries and never returns
# a partially patched image. The CLI (and try_inject_chime) sit at the
# boundary and turn them into a report.
#
# `kind` is a stable identifier for callers that prefer tags to classes.
# =============================================================================


class PatchError(Exception):
    """Base class for all firmware patch failures."""

    kind = "PatchError"


class UnreadableInput(PatchError):
    kind = "UnreadableInput"


class HashMismatch(PatchError):
    """The supplied firmware is not the reference image for the profile."""

    kind = "HashMismatch"


class RegionTooShort(PatchError):
    kind = "RegionTooShort"


class RegionTooLong(PatchError):
    """ROM region exceeds the length its checksum is padded to."""

    kind = "RegionTooLong"


class TextCodecDecodeError(PatchError, ValueError):
    kind = "TextCodecDecodeError"


class SoundTooLong(PatchError):
    kind = "SoundTooLong"


class SoundMisaligned(PatchError):
    """Sound byte count is odd, so it cannot be 16-bit samples."""

    kind = "SoundMisaligned"


class UnsupportedSoundFormat(PatchError):
    kind = "UnsupportedSoundFormat"


class CompressedLengthMismatch(PatchError):
    kind = "CompressedLengthMismatch"


class ChecksumWidthMismatch(PatchError):
    kind = "ChecksumWidthMismatch"


class UnwritableOutput(PatchError):
    kind = "UnwritableOutput"
