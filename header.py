"""
Frequency header codec.

Layout (little-endian):
    uint16  distinct symbol count
    then, for each symbol in ascending byte order:
    uint8   symbol
    uint32  frequency

Only the statistics are stored; the decoder rebuilds the same tree from them.
"""
import logging
import struct

from errors import MalformedHeaderError
from frequency import SYMBOLS, FrequencyTable

logger = logging.getLogger(__name__)

COUNT = struct.Struct("<H")
PAIR = struct.Struct("<BI")


def header_size(distinct_count):
    return COUNT.size + distinct_count * PAIR.size


### SERIALIZE ###
def serialize_header(table):
    items = table.items()
    out = bytearray(COUNT.pack(len(items)))
    for symbol, freq in items:
        out += PAIR.pack(symbol, freq)
    return bytes(out)


def write_header(sink, table):
    """Writes the header for `table` to the sink and returns its size in bytes."""
    data = serialize_header(table)
    sink.write(data)
    logger.debug("Wrote header: %d symbols, %d bytes", table.distinct_count, len(data))
    return len(data)


### DESERIALIZE ###
def _read_exact(source, size, what):
    data = bytearray()
    while len(data) < size:
        chunk = source.read(size - len(data))
        if not chunk:
            raise MalformedHeaderError(
                f"Header truncated while reading {what}: expected {size} bytes, got {len(data)}"
            )
        data += chunk
    return bytes(data)


def _validated_table(pairs):
    seen = set()
    for symbol, freq in pairs:
        if symbol in seen:
            raise MalformedHeaderError(f"Symbol 0x{symbol:02x} listed twice in header")
        if freq == 0:
            raise MalformedHeaderError(f"Symbol 0x{symbol:02x} has a zero frequency")
        seen.add(symbol)
    return FrequencyTable.from_pairs(pairs)


def _check_count(count):
    if count == 0:
        raise MalformedHeaderError("Header declares no symbols")
    if count > SYMBOLS:
        raise MalformedHeaderError(f"Header declares {count} symbols, at most {SYMBOLS} exist")


def read_header(source):
    """Reads a header from the source, leaving it positioned at the bitstream."""
    (count,) = COUNT.unpack(_read_exact(source, COUNT.size, "symbol count"))
    _check_count(count)
    body = _read_exact(source, count * PAIR.size, f"{count} symbol/frequency pairs")
    pairs = list(PAIR.iter_unpack(body))
    table = _validated_table(pairs)
    logger.debug("Read header: %d symbols, %d total bytes", count, table.total)
    return table


def deserialize_header(data):
    """Parses a header at the start of `data`; returns (table, bytes consumed)."""
    if len(data) < COUNT.size:
        raise MalformedHeaderError("Header truncated while reading symbol count")
    (count,) = COUNT.unpack_from(data)
    _check_count(count)
    size = header_size(count)
    if len(data) < size:
        raise MalformedHeaderError(
            f"Header truncated: {count} symbols need {size} bytes, got {len(data)}"
        )
    pairs = list(PAIR.iter_unpack(data[COUNT.size:size]))
    return _validated_table(pairs), size
