import numpy as np
import pytest

from FCPE.FCM import ascii85
from FCPE.errors import PatchError, TextCodecDecodeError


def test_shortcuts_decode():
    assert ascii85.decode(b"z") == bytes(4)
    assert ascii85.decode(b"y") == b"\xff" * 4
    assert ascii85.decode(b"zyz") == bytes(4) + b"\xff" * 4 + bytes(4)


def test_shortcut_runs_encode():
    assert ascii85.encode_all(bytes(12)) == b"zzz"
    assert ascii85.encode_all(b"\xff" * 8) == b"yy"


def test_full_group():
    # "Man " -> 9jqo^ (standard Ascii85 vector)
    assert ascii85.encode_all(b"Man ") == b"9jqo^"
    assert ascii85.decode(b"9jqo^") == b"Man "


def test_str_input_accepted():
    assert ascii85.decode("9jqo^z") == b"Man " + bytes(4)


def test_empty_decodes_to_empty():
    assert ascii85.decode(b"") == b""


def test_round_trip_with_runs():
    rng = np.random.default_rng(0)
    data = (
        bytes(40)
        + rng.integers(0, 256, size=1000, dtype=np.uint8).tobytes()
        + b"\xff" * 40
        + b"\x00\x00\x00\x01"
    )
    assert ascii85.decode(ascii85.encode_all(data)) == data


def test_out_of_range_character():
    with pytest.raises(TextCodecDecodeError):
        ascii85.decode(b"9jqo~")


def test_space_is_not_a_shortcut():
    with pytest.raises(TextCodecDecodeError):
        ascii85.decode(b"9jqo^ ")


def test_truncated_group():
    with pytest.raises(TextCodecDecodeError):
        ascii85.decode(b"zz9jq")


def test_decode_error_is_patch_error_and_value_error():
    with pytest.raises(PatchError):
        ascii85.decode(b"!!!")
    with pytest.raises(ValueError):
        ascii85.decode(b"!!!")


def test_budget_stops_before_group_even_for_shortcut():
    encoded, consumed = ascii85.encode(bytes(64), 0, 7)
    # A group starts only while 5 more characters fit: 3 "z", not 7
    assert encoded == b"zzz"
    assert consumed == 12


def test_budget_below_one_group():
    assert ascii85.encode(bytes(8), 0, 4) == (b"", 0)


def test_budget_resume_reassembles_input():
    data = bytes(range(1, 201))
    lines, cursor = [], 0
    while cursor < len(data):
        encoded, consumed = ascii85.encode(data, cursor, 22)
        assert len(encoded) <= 22
        lines.append(encoded)
        cursor += consumed
    assert all(len(line) == 20 for line in lines[:-1])
    assert b"".join(ascii85.decode(line) for line in lines) == data


def test_zero_budget_means_unlimited():
    data = bytes(range(1, 101))
    assert ascii85.encode(data, 0, 0) == ascii85.encode(data)


def test_short_final_group_not_counted_as_consumed():
    encoded, consumed = ascii85.encode(b"\x01\x02\x03\x04\x05\x06")
    assert consumed == 6
    assert len(encoded) == 10
    assert ascii85.decode(encoded) == b"\x01\x02\x03\x04\x05\x06\x00\x00"


def test_offset():
    data = bytes(4) + b"Man "
    assert ascii85.encode(data, 4) == (b"9jqo^", 4)
