import datetime
import json
import time

import pytest

from decomm.helpers import (
    TimeBox,
    convert_mac_address_to_string,
    get_linux_machine_id,
    get_time_string,
    get_time_usec,
    hex_string_to_uint32,
    remove_comments,
    save_binary_to_file,
    split_string_by_delimiter,
    split_string_by_newline,
    str_tolower,
    validate_field,
    wait_time_nsec,
)


def test_time_string_format():
    text = get_time_string()
    stamp = datetime.datetime.strptime(text, "%Y_%m_%d_%H_%M_%S")
    assert abs((datetime.datetime.now() - stamp).total_seconds()) < 5
    assert len(text) == 19


def test_time_usec_close_to_wall_clock():
    assert abs(get_time_usec() - time.time() * 1_000_000) < 5_000_000


def test_timebox_register_and_passed():
    box = TimeBox()
    assert box.passed(1)
    box.register()
    assert box.passed(0)
    assert not box.passed(10**12)
    assert box.less(10**12)


def test_timebox_passed_register_updates_value():
    box = TimeBox(value=0)
    assert box.passed_register(1)
    assert box.value > 0
    stored = box.value
    assert not box.passed_register(10**12)
    assert box.value == stored


def test_wait_time_nsec_sleeps():
    start = get_time_usec()
    wait_time_nsec(0, 20_000_000)
    elapsed = get_time_usec() - start
    assert elapsed >= 15_000


def test_wait_time_nsec_rejects_bad_interval():
    with pytest.raises(ValueError):
        wait_time_nsec(0, 1_000_000_000)
    with pytest.raises(ValueError):
        wait_time_nsec(-1, 0)


@pytest.mark.parametrize("value", [0, 1, 0x1C, 0xDEAD, 0xFFFFFFFF])
def test_hex_round_trip(value):
    assert hex_string_to_uint32(format(value, "x")) == value
    assert hex_string_to_uint32(format(value, "#X")) == value


@pytest.mark.parametrize("text", ["xyz", "12g", "0x", "  "])
def test_hex_invalid(text):
    with pytest.raises(ValueError):
        hex_string_to_uint32(text)


def test_hex_truncates_to_32_bits():
    assert hex_string_to_uint32("1" + "0" * 8) == 0


def test_str_tolower_ascii_only():
    assert str_tolower("ABC def") == "abc def"
    assert str_tolower("ÄB") == "Äb"


def test_split_keeps_inner_empty_items():
    parts = split_string_by_delimiter("a,b,,c", ",")
    assert ",".join(parts) == "a,b,,c"
    assert len(parts) == 4


def test_split_drops_trailing_delimiter():
    assert split_string_by_delimiter("a,b,", ",") == split_string_by_delimiter("a,b", ",")
    assert split_string_by_delimiter("", ",") == []


def test_split_by_newline():
    assert split_string_by_newline("l1\nl2\n") == split_string_by_newline("l1\nl2")
    assert len(split_string_by_newline("l1\nl2")) == 2


def test_remove_comments_makes_json_parsable():
    text = '{\n  // a comment\n  "a": 1, /* block\n comment */ "b": 2\n}'
    assert json.loads(remove_comments(text)) == {"a": 1, "b": 2}


def test_remove_comments_leaves_plain_text():
    plain = '{"a": [1, 2], "b": "x * y"}'
    assert remove_comments(plain) == plain


def test_remove_comments_unterminated_block():
    assert remove_comments("x/* y") == "x"
    assert remove_comments("a//b\nc") == "ac"


def test_validate_field():
    message = {"s": "x", "n": 3, "b": True}
    assert validate_field(message, "s", str)
    assert not validate_field(message, "s", int)
    assert not validate_field(message, "missing", str)
    assert not validate_field(message, "b", int)
    assert validate_field(message, "b", bool)
    assert validate_field(message, "n", int)
    assert not validate_field(["s"], "s", str)


def test_machine_id(tmp_path):
    path = tmp_path / "machine-id"
    path.write_text("abc123\n")
    assert get_linux_machine_id(path) == "abc123"
    assert get_linux_machine_id(tmp_path / "missing") == ""


def test_mac_address_round_trip():
    mac = [0, 1, 2, 171, 205, 239]
    text = convert_mac_address_to_string(mac)
    assert bytes.fromhex(text.replace(":", "")) == bytes(mac)
    assert text.count(":") == 5


def test_save_binary_to_file(tmp_path):
    path = tmp_path / "out.bin"
    save_binary_to_file(b"\x00\x01\xff", path)
    save_binary_to_file(b"\x07", path)
    assert path.read_bytes() == b"\x07"


def test_save_binary_to_file_failure(tmp_path):
    with pytest.raises(OSError):
        save_binary_to_file(b"x", tmp_path / "no_dir" / "out.bin")