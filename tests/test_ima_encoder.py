import numpy as np

from FCPE.FPM.constants import (
    BYTES_PER_PACKET, SAMPLES_PER_PACKET, SAMPLE_MIN, SAMPLE_MAX, STEP_INDEX_MAX,
)
from FCPE.FCM.ima_encoder import IMAEncoder, ima_encode


def _pcm(samples):
    return np.asarray(samples, dtype=np.int64).astype(">i2").tobytes()


def test_silence_is_all_zero_packets():
    out = ima_encode(bytes(SAMPLES_PER_PACKET * 2 * 3))
    assert len(out) == 3 * BYTES_PER_PACKET
    assert out == bytes(len(out))


def test_output_length_is_packets_times_34():
    rng = np.random.default_rng(7)
    for packets in (1, 2, 17):
        noise = rng.integers(-2000, 2000, size=packets * SAMPLES_PER_PACKET)
        assert len(ima_encode(_pcm(noise))) == packets * BYTES_PER_PACKET


def test_empty_input():
    assert ima_encode(b"") == b""


def test_state_stays_in_range_on_full_scale_noise():
    rng = np.random.default_rng(11)
    enc = IMAEncoder()
    for sample in rng.integers(SAMPLE_MIN, SAMPLE_MAX + 1, size=5000).tolist():
        code = enc.encode_sample(sample)
        assert 0 <= code <= 15
        assert 0 <= enc.step_index <= STEP_INDEX_MAX
        assert SAMPLE_MIN <= enc.predicted_sample <= SAMPLE_MAX


def test_extremes_clamp_predictor_and_index():
    enc = IMAEncoder()
    for _ in range(200):
        enc.encode_sample(SAMPLE_MAX)
    assert enc.predicted_sample <= SAMPLE_MAX
    assert enc.step_index <= STEP_INDEX_MAX
    for _ in range(200):
        enc.encode_sample(SAMPLE_MIN)
    assert enc.predicted_sample >= SAMPLE_MIN


def test_first_step_of_positive_jump():
    enc = IMAEncoder()
    # step 7: 100 >= 7 -> bit 2, remainder 93 >= 3 -> bit 1, 90 >= 1 -> bit 0
    assert enc.encode_sample(100) == 0b0111
    assert enc.predicted_sample == 7 + 3 + 1 + 0
    assert enc.step_index == 8


def test_negative_jump_sets_sign_bit():
    enc = IMAEncoder()
    assert enc.encode_sample(-100) == 0b1111
    assert enc.predicted_sample == -11


def test_nibble_order_low_first():
    enc = IMAEncoder()
    samples = [100, 0] + [0] * (SAMPLES_PER_PACKET - 2)
    packet = enc.encode(_pcm(samples))
    ref = IMAEncoder()
    first = ref.encode_sample(100)
    second = ref.encode_sample(0)
    assert packet[2] == first | (second << 4)


def test_header_packs_predictor_and_index():
    enc = IMAEncoder()
    enc.predicted_sample = -1          # 0xFFFF
    enc.step_index = 0x2A
    assert enc.header() == bytes([0xFF, 0x80 | 0x2A])

    enc.predicted_sample = 0x1234
    enc.step_index = 88
    assert int.from_bytes(enc.header(), "big") == (0x1234 & 0xFF80) | 88


def test_state_carries_across_packets():
    rng = np.random.default_rng(3)
    samples = rng.integers(-8000, 8000, size=2 * SAMPLES_PER_PACKET)
    enc = IMAEncoder()
    out = enc.encode(_pcm(samples))

    ref = IMAEncoder()
    for s in samples[:SAMPLES_PER_PACKET].tolist():
        ref.encode_sample(s)
    assert out[BYTES_PER_PACKET:BYTES_PER_PACKET + 2] == ref.header()


def test_reset():
    enc = IMAEncoder()
    enc.encode_sample(30000)
    enc.reset()
    assert enc.predicted_sample == 0
    assert enc.step_index == 0
    assert enc.step_size == 7
