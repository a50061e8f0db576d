import random

import pytest

from chproto.lz4 import (
    MAX_INPUT_SIZE,
    CorruptInputError,
    InputTooLargeError,
    compress_bound,
    decode,
    encode,
)

_WORDS = (
    "the quick brown fox jumps over lazy dog adventure holmes watson "
    "baker street detective mystery case evening morning letter door"
).split()


def _make_text(size: int) -> bytes:
    rng = random.Random(1661)
    parts = []
    total = 0
    while total < size:
        word = rng.choice(_WORDS)
        parts.append(word)
        total += len(word) + 1
    return " ".join(parts).encode()[:size]


TESTFILE = _make_text(40000)


def _roundtrip(data: bytes) -> None:
    compressed = encode(data)
    assert len(compressed) <= compress_bound(len(data))
    restored = decode(compressed, len(data))
    assert len(restored) == len(data)
    assert restored == data


def test_empty():
    _roundtrip(b"")


def test_empty_block_is_single_token():
    assert encode(b"") == b"\x00"
    assert decode(b"", 0) == b""


def test_lengths():
    for i in range(1024):
        _roundtrip(TESTFILE[:i])
    for i in range(1024, len(TESTFILE), 1024 * 4):
        _roundtrip(TESTFILE[:i])


def test_words():
    _roundtrip(TESTFILE)


@pytest.mark.parametrize("size", [5, 25, 255, 2555, 25555])
def test_random_bytes(size):
    rng = random.Random(size)
    _roundtrip(bytes(rng.randrange(122) for _ in range(size)))


def test_repetitive_data_shrinks():
    data = b"abc" * 5000
    compressed = encode(data)
    assert len(compressed) < len(data) // 10
    assert decode(compressed, len(data)) == data


def test_encode_known_block():
    assert encode(b"a" * 20) == bytes([0x1A, 0x61, 0x01, 0x00, 0x50]) + b"aaaaa"


def test_decode_literals_only():
    assert decode(b"\x40abcd", 4) == b"abcd"


def test_decode_overlapping_match():
    assert decode(bytes([0x13, 0x61, 0x01, 0x00, 0x00]), 8) == b"a" * 8


def test_decode_output_too_small():
    with pytest.raises(CorruptInputError):
        decode(b"\x40abcd", 3)


def test_decode_truncated_length():
    with pytest.raises(CorruptInputError):
        decode(b"\xf0", 100)


def test_decode_offset_beyond_output():
    with pytest.raises(CorruptInputError):
        decode(bytes([0x10, 0x61, 0x05, 0x00, 0x00]), 10)


def test_compress_bound():
    assert compress_bound(0) == 16
    assert compress_bound(MAX_INPUT_SIZE + 1) == 0


def test_encode_too_large():
    class _Huge:
        def __len__(self):
            return MAX_INPUT_SIZE

    with pytest.raises(InputTooLargeError):
        encode(_Huge())