import pytest

from pacesim.bits import (
    bytes_from_binary_str,
    bytes_to_binary_str,
    int_from_binary,
    int_to_binary,
    read_binary_prog_file,
)


def test_binary_io():
    code = 0b1010101010101010101010101010101010101010101010101010101010101010
    binary = int_to_binary(code, 8)
    assert binary == bytes([0b10101010] * 8)
    assert (
        bytes_to_binary_str(binary)
        == "1010101010101010101010101010101010101010101010101010101010101010"
    )


@pytest.mark.parametrize("size", [1, 2, 4, 8])
def test_int_round_trip(size):
    value = (1 << (8 * size)) - 3
    assert int_from_binary(int_to_binary(value, size), size) == value


def test_little_endian_order():
    assert int_to_binary(0x0102, 2) == bytes([0x02, 0x01])
    assert int_from_binary(bytes([0x02, 0x01]), 2) == 0x0102


def test_int_from_binary_wrong_length():
    with pytest.raises(ValueError, match="expected 8, got 3"):
        int_from_binary(b"\x00\x01\x02", 8)


def test_binary_str_round_trip():
    data = bytes(range(0, 256, 17))
    assert bytes_from_binary_str(bytes_to_binary_str(data)) == data


def test_binary_str_empty():
    assert bytes_from_binary_str("") == b""
    assert bytes_to_binary_str(b"") == ""


def test_binary_str_invalid_characters():
    with pytest.raises(ValueError, match="only '0' and '1'"):
        bytes_from_binary_str("0101010x")


def test_binary_str_invalid_length():
    with pytest.raises(ValueError, match="multiple of 8"):
        bytes_from_binary_str("0101")


def test_read_binary_prog_file(tmp_path):
    path = tmp_path / "prog.binprog"
    path.write_text("0000 0001\n1111 1111\n", encoding="utf-8")
    assert read_binary_prog_file(path) == bytes([0x01, 0xFF])


def test_read_binary_prog_file_rejects_garbage(tmp_path):
    path = tmp_path / "bad.binprog"
    path.write_text("0000 0002\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_binary_prog_file(path)