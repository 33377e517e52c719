"""Exceptions raised by the Huffman encoder and decoder."""


class HuffmanError(Exception):
    """Base class for every error raised while encoding or decoding."""


class EmptyInputError(HuffmanError):
    """Raised when encode is given a zero-length source."""

    def __init__(self, message="Cannot compress empty input"):
        super().__init__(message)


class MalformedHeaderError(HuffmanError):
    """Raised when the frequency header is truncated or invalid."""


class UnknownSymbolError(HuffmanError):
    """Raised when an input byte has no code in the code table."""

    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"No code assigned to byte 0x{symbol:02x}")


class CorruptStreamError(HuffmanError):
    """Raised when the compressed body cannot be decoded to the declared length."""


class FrequencyOverflowError(HuffmanError):
    """Raised when a byte occurs more often than a 32-bit count can hold."""
