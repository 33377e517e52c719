import logging

logger = logging.getLogger(__name__)

# --- CONSTANTS ---
# Completed bytes are handed to the sink in blocks of this size.
WRITE_CHUNK_SIZE = 4096
READ_CHUNK_SIZE = 4096


### BIT WRITER ###
class BitStreamWriter:
    """
    Packs single bits into a binary sink, most-significant bit first.

    The first bit written lands in the top bit of the first byte. flush() must
    be called exactly once at the end; it emits the last partial byte padded
    with zeros in the low-order positions.
    """

    def __init__(self, sink):
        self._sink = sink
        self._buffer = 0      # accumulator byte
        self._bit_count = 0   # bits currently held in the accumulator (0..7)
        self._pending = bytearray()
        self._flushed = False
        self.bytes_written = 0
        self.bits_written = 0

    def write_bit(self, bit):
        """Appends one bit (0 or 1) to the stream."""
        if self._flushed:
            raise ValueError("write to a flushed BitStreamWriter")
        if bit:
            self._buffer |= 1 << (7 - self._bit_count)
        self._bit_count += 1
        self.bits_written += 1

        if self._bit_count == 8:
            self._emit(self._buffer)

    def write_code(self, code):
        """Appends every bit of a '0'/'1' code string."""
        for ch in code:
            self.write_bit(ch == "1")

    def flush(self):
        """Emits the partial byte (if any) and hands everything to the sink."""
        if self._flushed:
            raise ValueError("BitStreamWriter already flushed")
        if self._bit_count > 0:
            padding = 8 - self._bit_count
            logger.debug("Padding final byte with %d zero bits", padding)
            self._emit(self._buffer)
        self._drain()
        self._flushed = True
        return self.bytes_written

    def _emit(self, byte):
        self._pending.append(byte)
        self._buffer = 0
        self._bit_count = 0
        if len(self._pending) >= WRITE_CHUNK_SIZE:
            self._drain()

    def _drain(self):
        if self._pending:
            self._sink.write(bytes(self._pending))
            self.bytes_written += len(self._pending)
            self._pending.clear()


### BIT READER ###
class BitStreamReader:
    """
    Unpacks single bits from a binary source in the writer's bit order.

    read_bit() returns None once the source is exhausted and every buffered
    bit has been consumed.
    """

    def __init__(self, source, chunk_size=READ_CHUNK_SIZE):
        self._source = source
        self._chunk_size = chunk_size
        self._chunk = b""
        self._pos = 0         # index of the current byte inside _chunk
        self._buffer = 0      # current byte
        self._bit_count = 0   # bits left in _buffer (0..8)
        self._exhausted = False
        self.bits_read = 0

    def read_bit(self):
        if self._bit_count == 0:
            if not self._load_byte():
                return None
        self._bit_count -= 1
        self.bits_read += 1
        return (self._buffer >> self._bit_count) & 1

    def _load_byte(self):
        if self._pos >= len(self._chunk):
            if self._exhausted:
                return False
            self._chunk = self._source.read(self._chunk_size)
            self._pos = 0
            if not self._chunk:
                self._exhausted = True
                return False
        self._buffer = self._chunk[self._pos]
        self._pos += 1
        self._bit_count = 8
        return True

    def __iter__(self):
        while True:
            bit = self.read_bit()
            if bit is None:
                return
            yield bit
