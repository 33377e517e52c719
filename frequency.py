import logging

import numpy as np

from errors import EmptyInputError, FrequencyOverflowError

logger = logging.getLogger(__name__)

# --- CONSTANTS ---
SYMBOLS = 256
MAX_FREQUENCY = 0xFFFFFFFF  # counts are stored as uint32 in the header
CHUNK_SIZE = 64 * 1024


### FREQUENCY TABLE ###
class FrequencyTable:
    """Occurrence count for each of the 256 byte values."""

    def __init__(self, counts=None):
        if counts is None:
            self._counts = np.zeros(SYMBOLS, dtype=np.uint32)
        else:
            counts = np.asarray(counts, dtype=np.uint64)
            if counts.shape != (SYMBOLS,):
                raise ValueError(f"expected {SYMBOLS} counts, got shape {counts.shape}")
            _check_overflow(counts)
            self._counts = counts.astype(np.uint32)

    @classmethod
    def from_bytes(cls, data):
        """Counts the bytes of an in-memory buffer."""
        if len(data) == 0:
            raise EmptyInputError()
        counts = np.bincount(np.frombuffer(data, dtype=np.uint8), minlength=SYMBOLS)
        return cls(counts)

    @classmethod
    def from_pairs(cls, pairs):
        """Builds a table from (symbol, frequency) pairs; missing symbols are zero."""
        counts = np.zeros(SYMBOLS, dtype=np.uint64)
        for symbol, freq in pairs:
            counts[symbol] = freq
        return cls(counts)

    def __getitem__(self, symbol):
        return int(self._counts[symbol])

    def __eq__(self, other):
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return bool(np.array_equal(self._counts, other._counts))

    def __repr__(self):
        return f"FrequencyTable(distinct={self.distinct_count}, total={self.total})"

    def symbols(self):
        """Byte values with a non-zero count, in ascending order."""
        return [int(s) for s in np.flatnonzero(self._counts)]

    def items(self):
        """(symbol, frequency) pairs for every present byte, in ascending byte order."""
        return [(s, int(self._counts[s])) for s in self.symbols()]

    @property
    def distinct_count(self):
        return int(np.count_nonzero(self._counts))

    @property
    def total(self):
        # summed in uint64 so a full table of large counts cannot wrap
        return int(self._counts.sum(dtype=np.uint64))

    def is_empty(self):
        return self.distinct_count == 0


def _check_overflow(counts):
    if counts.size and counts.max() > MAX_FREQUENCY:
        symbol = int(np.argmax(counts))
        raise FrequencyOverflowError(
            f"Byte 0x{symbol:02x} occurs {int(counts[symbol])} times, "
            f"more than a 32-bit count can hold"
        )


### FREQUENCY COUNTING ###
def count_frequencies(source, chunk_size=CHUNK_SIZE):
    """
    Reads the source to exhaustion and counts every byte value.

    The source is any binary file-like object; it is read in chunks so large
    inputs are never held in memory at once. Raises EmptyInputError when the
    source yields no bytes.
    """
    counts = np.zeros(SYMBOLS, dtype=np.uint64)
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        counts += np.bincount(np.frombuffer(chunk, dtype=np.uint8), minlength=SYMBOLS).astype(np.uint64)
        _check_overflow(counts)

    table = FrequencyTable(counts)
    if table.is_empty():
        raise EmptyInputError()

    logger.debug("Counted %d bytes, %d distinct values", table.total, table.distinct_count)
    return table
