import io
import logging
from collections import namedtuple

from bit_io import BitStreamReader, BitStreamWriter
from code_table import build_code_table
from errors import CorruptStreamError
from frequency import CHUNK_SIZE, count_frequencies
from header import read_header, write_header
from huffman_tree import build_tree

logger = logging.getLogger(__name__)


### COMPRESSION STATS ###
class CompressionStats(namedtuple("CompressionStats", "original_size compressed_size header_size distinct_symbols")):
    """Sizes reported by encode()."""

    __slots__ = ()

    @property
    def saved(self):
        return self.original_size - self.compressed_size

    @property
    def saved_percent(self):
        if self.original_size == 0:
            return 0.0
        return round(self.saved / self.original_size * 100, 2)


def _rewindable(source):
    """Returns (source, start) such that source can be seeked back to start for a second pass."""
    seekable = getattr(source, "seekable", None)
    if seekable is not None and seekable():
        return source, source.tell()
    # streams such as pipes and sockets are buffered for the second pass
    return io.BytesIO(source.read()), 0


### ENCODE ###
def encode(source, sink):
    """
    Compresses everything readable from `source` into `sink`.

    The source is read twice: once to count byte frequencies and once to
    emit codewords. Nothing is written to the sink when the source is empty
    (EmptyInputError is raised first).
    """
    # --- PHASE 1: Collect statistics ---
    source, start = _rewindable(source)
    table = count_frequencies(source)
    source.seek(start)

    # --- PHASE 2: Build tree and derive codes ---
    tree = build_tree(table)
    codes = build_code_table(tree)
    logger.debug("Derived %d codes, body will be %d bits", len(codes), codes.weighted_length(table))

    # --- PHASE 3: Header ---
    header_bytes = write_header(sink, table)

    # --- PHASE 4: Body ---
    writer = BitStreamWriter(sink)
    while True:
        chunk = source.read(CHUNK_SIZE)
        if not chunk:
            break
        for byte in chunk:
            writer.write_code(codes[byte])
    body_bytes = writer.flush()

    stats = CompressionStats(
        original_size=table.total,
        compressed_size=header_bytes + body_bytes,
        header_size=header_bytes,
        distinct_symbols=table.distinct_count,
    )
    logger.debug("Encoded %d bytes into %d bytes", stats.original_size, stats.compressed_size)
    return stats


### DECODE ###
def decode(source, sink):
    """
    Decompresses a header + bitstream from `source` into `sink`.

    Walks the rebuilt tree one bit at a time, emitting a byte at every leaf.
    Exactly as many bytes as the header's frequencies add up to are emitted;
    any bits after the last codeword are padding and are ignored. Returns the
    number of bytes written.
    """
    table = read_header(source)
    tree = build_tree(table)

    reader = BitStreamReader(source)
    nodes = tree.nodes
    root = tree.root
    total = table.total
    remaining = total
    out = bytearray()

    current = root
    while remaining:
        bit = reader.read_bit()
        if bit is None:
            raise CorruptStreamError(
                f"Compressed data ended after {total - remaining} of {total} bytes"
            )

        node = nodes[current]
        current = node.right if bit else node.left
        node = nodes[current]

        if node.is_leaf:
            if node.placeholder:
                raise CorruptStreamError(f"Invalid codeword at bit {reader.bits_read}")
            out.append(node.symbol)
            remaining -= 1
            current = root
            if len(out) >= CHUNK_SIZE:
                sink.write(bytes(out))
                out.clear()

    if out:
        sink.write(bytes(out))

    logger.debug("Decoded %d bytes from %d body bits", total, reader.bits_read)
    return total


### IN-MEMORY HELPERS ###
def compress(data):
    """Compresses a bytes object and returns the compressed bytes."""
    sink = io.BytesIO()
    encode(io.BytesIO(data), sink)
    return sink.getvalue()


def decompress(data):
    """Decompresses bytes produced by compress()."""
    sink = io.BytesIO()
    decode(io.BytesIO(data), sink)
    return sink.getvalue()
