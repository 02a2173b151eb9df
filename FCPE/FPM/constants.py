# =============================================================================
# constants.py — FPM Audio, Codec and Checksum Constants
# =============================================================================
#
# Values shared by both firmware variants. Per-variant offsets live in
# profiles.py. DO NOT change these without a new reference dump: the patched
# image has to match Apple's own encoder byte-for-byte.

# -----------------------------------------------------------------------------
# STARTUP CHIME AUDIO FORMAT
# -----------------------------------------------------------------------------

SAMPLE_RATE        = 44_100     # Hz — mono, 16-bit signed, big-endian
BYTES_PER_SAMPLE   = 2
SAMPLE_MIN         = -32_768
SAMPLE_MAX         =  32_767

# IMA 4:1 packet framing (same layout as Apple 'ima4' AIFC packets)
SAMPLES_PER_PACKET = 64
PACKET_HEADER_SIZE = 2
BYTES_PER_PACKET   = PACKET_HEADER_SIZE + SAMPLES_PER_PACKET // 2   # = 34

# Both shipped ROMs reserve room for exactly this many packets
NUM_SOUND_PACKETS  = 1722
SOUND_SAMPLES_MAX  = NUM_SOUND_PACKETS * SAMPLES_PER_PACKET         # = 110,208
SOUND_MAX_SIZE     = SOUND_SAMPLES_MAX * BYTES_PER_SAMPLE           # = 220,416 bytes
SOUND_COMPRESSED_SIZE = NUM_SOUND_PACKETS * BYTES_PER_PACKET        # = 58,548 bytes

# Header word: upper 9 bits of the predictor, lower 7 bits the step index
HEADER_PREDICTOR_MASK = 0xFF80
HEADER_INDEX_MASK     = 0x007F


# -----------------------------------------------------------------------------
# IMA ADPCM TABLES
# -----------------------------------------------------------------------------
# Entry 80 is 15289 (not the 15290 printed in some IMA tables) to stay
# bit-identical with the encoder Apple's ROM was built with.

IMA_INDEX_TABLE = (
    -1, -1, -1, -1, 2, 4, 6, 8,
    -1, -1, -1, -1, 2, 4, 6, 8,
)

IMA_STEP_TABLE = (
    7, 8, 9, 10, 11, 12, 13, 14, 16, 17,
    19, 21, 23, 25, 28, 31, 34, 37, 41, 45,
    50, 55, 60, 66, 73, 80, 88, 97, 107, 118,
    130, 143, 157, 173, 190, 209, 230, 253, 279, 307,
    337, 371, 408, 449, 494, 544, 598, 658, 724, 796,
    876, 963, 1060, 1166, 1282, 1411, 1552, 1707, 1878, 2066,
    2272, 2499, 2749, 3024, 3327, 3660, 4026, 4428, 4871, 5358,
    5894, 6484, 7132, 7845, 8630, 9493, 10442, 11487, 12635, 13899,
    15289, 16818, 18500, 20350, 22385, 24623, 27086, 29794, 32767,
)

STEP_INDEX_MIN = 0
STEP_INDEX_MAX = len(IMA_STEP_TABLE) - 1    # = 88

IMA_SIGN_BIT = 0b1000


# -----------------------------------------------------------------------------
# ASCII85 (Apple "dc85" flavour)
# -----------------------------------------------------------------------------

ASCII85_BASE       = 85
ASCII85_FIRST      = ord("!")        # digit 0
ASCII85_LAST       = ord("u")        # digit 84
ASCII85_GROUP_SIZE = 5               # characters per 4-byte group
ASCII85_ZERO_CHAR  = ord("z")        # 00 00 00 00
ASCII85_ONES_CHAR  = ord("y")        # FF FF FF FF — Apple's, not the usual 0x20202020

ASCII85_POW = (85 ** 4, 85 ** 3, 85 ** 2, 85, 1)


# -----------------------------------------------------------------------------
# TEXT-ENCODED FIRMWARE LINE FORMAT
# -----------------------------------------------------------------------------
# Each ROM line in the Open Firmware updater script reads:
#     b"dc85 " + <up to 100 Ascii85 chars> + b"\r"

ROM_LINE_SENTINEL     = b"dc85 "
ROM_LINE_TERMINATOR   = b"\r"
FIRMWARE_COLUMN_WIDTH = 100


# -----------------------------------------------------------------------------
# CHECKSUMS
# -----------------------------------------------------------------------------

ADLER_MODULUS = 65_521

# On-disk checksum representations
CHECKSUM_HEX  = "hex"      # 8 uppercase ASCII hex characters
CHECKSUM_BE32 = "be32"     # 4 raw bytes, big-endian

CHECKSUM_WIDTHS = {
    CHECKSUM_HEX:  8,
    CHECKSUM_BE32: 4,
}

# ROM region encodings
ROM_ENCODING_ASCII85 = "ascii85"
ROM_ENCODING_RAW     = "raw"
