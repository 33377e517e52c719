import io
import random
import struct

import pytest

from errors import CorruptStreamError, EmptyInputError, MalformedHeaderError
from huffman import CompressionStats, compress, decode, decompress, encode


class NonSeekableSource:
    """A pipe-like source that can only be read forwards."""

    def __init__(self, data):
        self._data = io.BytesIO(data)

    def read(self, size=-1):
        return self._data.read(size)

    def seekable(self):
        return False


def test_aaab_scenario():
    blob = compress(b"aaab")
    # header: count + two (symbol, frequency) pairs, then a single body byte
    assert blob[:2] == struct.pack("<H", 2)
    assert len(blob) == 2 + 2 * 5 + 1
    assert decompress(blob) == b"aaab"


def test_padding_bits_are_not_decoded():
    # "b" is coded as 0, so the zero padding would spell extra "b"s
    assert decompress(compress(b"aaab")) == b"aaab"
    assert decompress(compress(b"b")) == b"b"


@pytest.mark.parametrize("data", [
    b"a",
    b"ab",
    b"hello world",
    b"\x00\xff" * 33,
    b"A" * 1000,
    bytes(range(256)),
    bytes(range(256))[::-1] * 3 + b"tail",
    b"This is a test string for Huffman compression. " * 100,
])
def test_round_trip(data):
    assert decompress(compress(data)) == data


def test_round_trip_random():
    rng = random.Random(42)
    for size in (1, 2, 3, 17, 1000, 70000):
        data = bytes(rng.getrandbits(8) for _ in range(size))
        assert decompress(compress(data)) == data


def test_single_symbol_input():
    data = b"\x41" * 1000
    blob = compress(data)
    assert blob[:2] == struct.pack("<H", 1)
    assert blob[2:7] == struct.pack("<BI", 0x41, 1000)
    # one bit per byte
    assert len(blob) == 7 + 125
    assert decompress(blob) == data


def test_full_alphabet_header_count():
    data = bytes(range(256)) * 4
    blob = compress(data)
    assert struct.unpack_from("<H", blob)[0] == 256
    assert decompress(blob) == data


def test_skewed_input_gets_smaller():
    data = b"a" * 5000 + b"b" * 100 + b"c"
    assert len(compress(data)) < len(data) // 4


def test_empty_input_writes_nothing():
    sink = io.BytesIO()
    with pytest.raises(EmptyInputError):
        encode(io.BytesIO(b""), sink)
    assert sink.getvalue() == b""


def test_encode_stats():
    sink = io.BytesIO()
    stats = encode(io.BytesIO(b"aaab"), sink)
    assert isinstance(stats, CompressionStats)
    assert stats.original_size == 4
    assert stats.compressed_size == len(sink.getvalue()) == 13
    assert stats.header_size == 12
    assert stats.distinct_symbols == 2
    assert stats.saved == -9
    assert stats.saved_percent == -225.0


def test_encode_rewinds_to_starting_position():
    source = io.BytesIO(b"skipped:payload payload")
    source.seek(8)
    sink = io.BytesIO()
    encode(source, sink)
    assert decompress(sink.getvalue()) == b"payload payload"


def test_encode_non_seekable_source():
    data = b"streamed from a pipe " * 50
    sink = io.BytesIO()
    encode(NonSeekableSource(data), sink)
    assert decompress(sink.getvalue()) == data


def test_decode_returns_size_and_reads_non_seekable():
    data = b"mississippi river"
    sink = io.BytesIO()
    assert decode(NonSeekableSource(compress(data)), sink) == len(data)
    assert sink.getvalue() == data


def test_deterministic_output():
    data = b"abracadabra" * 20
    assert compress(data) == compress(data)


def test_truncated_body():
    blob = compress(b"This is a test" * 100)
    with pytest.raises(CorruptStreamError):
        decompress(blob[:-3])


def test_truncated_header():
    blob = compress(b"Hello World" * 50)
    with pytest.raises(MalformedHeaderError):
        decompress(blob[:5])


def test_missing_body():
    blob = compress(b"Hello World")
    header_len = 2 + 8 * 5
    with pytest.raises(CorruptStreamError):
        decompress(blob[:header_len])


def test_single_symbol_placeholder_codeword_is_corrupt():
    # the real symbol is coded as 1; a 0 bit lands on the placeholder
    blob = struct.pack("<H", 1) + struct.pack("<BI", 0x41, 3) + b"\x60"
    with pytest.raises(CorruptStreamError):
        decompress(blob)
