# =============================================================================
# sound_input.py — Chime Loading and Normalization
# =============================================================================
#
# The ROM expects exactly profile.sound_samples_max samples of 16-bit signed
# big-endian mono at 44.1 kHz.  Input can be:
#
#   - a raw PCM file (any other extension): taken as-is, already big-endian
#   - a WAV / AIFF / AIFC / FLAC file: read with soundfile, must be mono,
#     44,100 Hz, PCM_16; converted to big-endian bytes with numpy
#
# normalize_sound() then enforces the size rules:
#   longer than the ROM slot  → SoundTooLong
#   odd byte count            → SoundMisaligned
#   shorter                   → padded with silence (NOT an error)
#
# To convert little-endian raw audio instead:  dd conv=swab < in.raw > out.raw
# =============================================================================

from __future__ import annotations
import os

import numpy as np
import soundfile as sf

from FCPE.FPM.constants import SAMPLE_RATE, BYTES_PER_SAMPLE
from FCPE.FPM.profiles import FirmwareProfile
from FCPE.errors import (
    UnreadableInput, UnwritableOutput,
    SoundTooLong, SoundMisaligned, UnsupportedSoundFormat,
)

CONTAINER_EXTENSIONS = {".wav", ".wave", ".aif", ".aiff", ".aifc", ".flac"}
REQUIRED_SUBTYPE = "PCM_16"


# ── File I/O ──────────────────────────────────────────────────────────────────

def read_file(path: str) -> bytes:
    """Read a whole file, or raise UnreadableInput."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise UnreadableInput(f'Unable to read file "{path}": {e.strerror or e}') from e


def write_file(path: str, data: bytes) -> None:
    """Create/truncate `path` and write `data`, or raise UnwritableOutput."""
    try:
        with open(path, "wb") as f:
            written = f.write(data)
    except OSError as e:
        raise UnwritableOutput(f'Unable to write file "{path}": {e.strerror or e}') from e
    if written != len(data):
        raise UnwritableOutput(
            f'Short write to "{path}": {written} of {len(data)} bytes'
        )


# ── Loading ───────────────────────────────────────────────────────────────────

def is_container(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in CONTAINER_EXTENSIONS


def read_container(path: str) -> bytes:
    """
    Read a WAV/AIFF/FLAC chime and return big-endian 16-bit PCM bytes.

    Raises:
        UnreadableInput:        file missing or not decodable.
        UnsupportedSoundFormat: not mono / 44.1 kHz / 16-bit PCM.
    """
    try:
        info = sf.info(path)
    except (OSError, RuntimeError) as e:
        raise UnreadableInput(f'Unable to read sound file "{path}": {e}') from e

    problems = []
    if info.channels != 1:
        problems.append(f"{info.channels} channels (need mono)")
    if info.samplerate != SAMPLE_RATE:
        problems.append(f"{info.samplerate} Hz (need {SAMPLE_RATE} Hz)")
    if info.subtype != REQUIRED_SUBTYPE:
        problems.append(f"{info.subtype} samples (need {REQUIRED_SUBTYPE})")
    if problems:
        raise UnsupportedSoundFormat(
            f'Sound file "{path}" is not 16-bit mono {SAMPLE_RATE} Hz: '
            + ", ".join(problems)
        )

    try:
        data, _ = sf.read(path, dtype="int16", always_2d=False)
    except (OSError, RuntimeError) as e:
        raise UnreadableInput(f'Unable to read sound file "{path}": {e}') from e

    return np.asarray(data, dtype=np.int16).astype(">i2").tobytes()


def load_sound(path: str) -> bytes:
    """Load a chime as big-endian 16-bit PCM, picking the reader by extension."""
    if is_container(path):
        return read_container(path)
    return read_file(path)


# ── Normalization ─────────────────────────────────────────────────────────────

def normalize_sound(pcm: bytes, profile: FirmwareProfile) -> bytes:
    """
    Fit `pcm` to the ROM's sound slot.

    Returns:
        Exactly profile.sound_max_size bytes: the input followed by silence.
    """
    max_size = profile.sound_max_size
    length = len(pcm)

    if length > max_size:
        raise SoundTooLong(
            f"Sound is too long: {length:,} bytes. Maximum size: {max_size:,} bytes"
        )
    if length % BYTES_PER_SAMPLE:
        raise SoundMisaligned(
            f"Sound is {length:,} bytes, an odd count; "
            f"it does not appear to be encoded as 16-bit samples"
        )
    return bytes(pcm) + bytes(max_size - length)
