# =============================================================================
# ima_encoder.py — IMA 4:1 ADPCM Encoder (Apple ima4 packet framing)
# =============================================================================
#
# Compresses 16-bit big-endian mono PCM into the packet stream the iMac ROM
# plays at startup.  Packet layout (34 bytes = 64 samples):
#
#   byte 0-1 : header, big-endian
#                bits 15..7 = upper 9 bits of the predictor at packet start
#                bits  6..0 = step index at packet start
#   byte 2-33: 64 4-bit codes, two per byte, FIRST code in the LOW nibble
#
# The predictor and step index run continuously across packets; the header
# is only a snapshot of the state so a decoder can start at any packet.
#
# Each 4-bit code is sign (bit 3) + 3-bit magnitude found by successive
# approximation against step, step/2, step/4.  The reconstructed delta
#   step·b2 + step/2·b1 + step/4·b0 + step/8
# is added to the predictor exactly as a decoder would, so encoder and
# decoder never drift apart.
# =============================================================================

from __future__ import annotations

import numpy as np

from FCPE.FPM.constants import (
    SAMPLES_PER_PACKET,
    SAMPLE_MIN, SAMPLE_MAX,
    HEADER_PREDICTOR_MASK,
    IMA_INDEX_TABLE, IMA_STEP_TABLE, IMA_SIGN_BIT,
    STEP_INDEX_MIN, STEP_INDEX_MAX,
)


class IMAEncoder:
    """
    Stateful IMA 4:1 encoder.  State persists across encode_sample() calls;
    encode() runs a whole buffer from the current state.

    Usage:
        enc = IMAEncoder()
        packets = enc.encode(pcm_be16)      # len(pcm) must be 128·N bytes
    """

    def __init__(self) -> None:
        self.predicted_sample = 0
        self.step_index = STEP_INDEX_MIN

    def reset(self) -> None:
        """Reset the predictor and step index (start of an independent stream)."""
        self.predicted_sample = 0
        self.step_index = STEP_INDEX_MIN

    @property
    def step_size(self) -> int:
        return IMA_STEP_TABLE[self.step_index]

    # ── Core encoder ────────────────────────────────────────────────────────

    def header(self) -> bytes:
        """Packet header snapshot of the current state."""
        word = (self.predicted_sample & HEADER_PREDICTOR_MASK) | self.step_index
        return word.to_bytes(2, "big")

    def encode_sample(self, sample: int) -> int:
        """
        Quantize one signed 16-bit sample and advance the state.

        Returns:
            The 4-bit code (0-15).
        """
        step = self.step_size
        difference = sample - self.predicted_sample

        if difference >= 0:
            code = 0
        else:
            code = IMA_SIGN_BIT
            difference = -difference

        # code[2:0] ≈ 4 · difference / step, one bit at a time
        mask = 0b100
        trial = step
        while mask:
            if difference >= trial:
                code |= mask
                difference -= trial
            trial >>= 1
            mask >>= 1

        delta = step >> 3
        if code & 0b100:
            delta += step
        if code & 0b010:
            delta += step >> 1
        if code & 0b001:
            delta += step >> 2
        if code & IMA_SIGN_BIT:
            delta = -delta

        self.predicted_sample = min(SAMPLE_MAX, max(SAMPLE_MIN, self.predicted_sample + delta))
        self.step_index = min(
            STEP_INDEX_MAX,
            max(STEP_INDEX_MIN, self.step_index + IMA_INDEX_TABLE[code]),
        )
        return code

    def encode(self, pcm: bytes) -> bytes:
        """
        Encode big-endian 16-bit PCM into ima4 packets.

        The caller pads to a whole number of packets; a short tail is encoded
        as far as it goes (no trailing half byte, no padding added here).
        """
        samples = np.frombuffer(pcm, dtype=">i2").tolist() if pcm else []
        out = bytearray()
        pending = 0

        for n, sample in enumerate(samples):
            position = n % SAMPLES_PER_PACKET
            if position == 0:
                out += self.header()

            code = self.encode_sample(sample)
            if position % 2 == 0:
                pending = code
            else:
                out.append(pending | (code << 4))

        return bytes(out)


def ima_encode(pcm: bytes) -> bytes:
    """Encode a whole chime from a fresh encoder state."""
    return IMAEncoder().encode(pcm)
