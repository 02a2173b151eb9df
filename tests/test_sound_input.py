import numpy as np
import pytest
import soundfile as sf

from FCPE.FPM.profiles import IMAC_FIRMWARE_30
from FCPE.FIM.sound_input import (
    normalize_sound, load_sound, read_file, write_file, is_container,
)
from FCPE.errors import (
    SoundTooLong, SoundMisaligned, UnsupportedSoundFormat,
    UnreadableInput, UnwritableOutput,
)


def test_short_sound_padded_with_silence():
    out = normalize_sound(b"\x12\x34\x56\x78", IMAC_FIRMWARE_30)
    assert len(out) == IMAC_FIRMWARE_30.sound_max_size == 220_416
    assert out[:4] == b"\x12\x34\x56\x78"
    assert out[4:] == bytes(len(out) - 4)


def test_exact_size_unchanged():
    pcm = b"\x01\x02" * (IMAC_FIRMWARE_30.sound_max_size // 2)
    assert normalize_sound(pcm, IMAC_FIRMWARE_30) == pcm


def test_one_byte_too_long():
    with pytest.raises(SoundTooLong):
        normalize_sound(bytes(IMAC_FIRMWARE_30.sound_max_size + 1), IMAC_FIRMWARE_30)


def test_odd_length():
    with pytest.raises(SoundMisaligned):
        normalize_sound(bytes(1001), IMAC_FIRMWARE_30)


def test_empty_sound_is_all_silence():
    assert normalize_sound(b"", IMAC_FIRMWARE_30) == bytes(IMAC_FIRMWARE_30.sound_max_size)


def test_container_detection():
    assert is_container("chime.WAV")
    assert is_container("chime.aiff")
    assert not is_container("chime.raw")
    assert not is_container("chime")


def test_raw_file_read_as_is(tmp_path):
    path = tmp_path / "chime.raw"
    path.write_bytes(b"\x7f\xff\x80\x00")
    assert load_sound(str(path)) == b"\x7f\xff\x80\x00"


def test_wav_converted_to_big_endian(tmp_path):
    path = tmp_path / "chime.wav"
    samples = np.array([1, -2, 0x1234, -32768, 32767], dtype=np.int16)
    sf.write(str(path), samples, 44_100, subtype="PCM_16")
    assert load_sound(str(path)) == samples.astype(">i2").tobytes()


def test_aiff_accepted(tmp_path):
    path = tmp_path / "chime.aiff"
    samples = np.arange(-50, 50, dtype=np.int16)
    sf.write(str(path), samples, 44_100, subtype="PCM_16")
    assert load_sound(str(path)) == samples.astype(">i2").tobytes()


def test_stereo_rejected(tmp_path):
    path = tmp_path / "stereo.wav"
    sf.write(str(path), np.zeros((100, 2), dtype=np.int16), 44_100, subtype="PCM_16")
    with pytest.raises(UnsupportedSoundFormat, match="channels"):
        load_sound(str(path))


def test_wrong_rate_rejected(tmp_path):
    path = tmp_path / "slow.wav"
    sf.write(str(path), np.zeros(100, dtype=np.int16), 22_050, subtype="PCM_16")
    with pytest.raises(UnsupportedSoundFormat, match="22050 Hz"):
        load_sound(str(path))


def test_24_bit_rejected(tmp_path):
    path = tmp_path / "deep.wav"
    sf.write(str(path), np.zeros(100, dtype=np.int32), 44_100, subtype="PCM_24")
    with pytest.raises(UnsupportedSoundFormat, match="PCM_24"):
        load_sound(str(path))


def test_garbage_container_unreadable(tmp_path):
    path = tmp_path / "broken.wav"
    path.write_bytes(b"not a wav file at all")
    with pytest.raises(UnreadableInput):
        load_sound(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(UnreadableInput, match="Unable to read"):
        read_file(str(tmp_path / "nope.bin"))


def test_write_into_missing_directory(tmp_path):
    with pytest.raises(UnwritableOutput):
        write_file(str(tmp_path / "no" / "such" / "dir.bin"), b"x")


def test_write_then_read(tmp_path):
    path = str(tmp_path / "out.bin")
    write_file(path, b"\x00\x01\x02")
    assert read_file(path) == b"\x00\x01\x02"
