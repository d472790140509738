"""
Exceptions raised by the bencode reader and writer.
"""
from typing import Optional


class BencodeError(ValueError):
    """Base class for all bencode errors."""
    pass


class BencodeDecodeError(BencodeError):
    """Exception raised for errors in bencode decoding."""
    pass


class UnexpectedEndOfInput(BencodeDecodeError, EOFError):
    """The source ran dry in the middle of a value."""

    def __init__(self, message: str = "Unexpected end of input"):
        super().__init__(message)


class MalformedSyntax(BencodeDecodeError):
    """
    The input does not follow the bencode grammar.

    Attributes:
        reason: Human readable description of the problem
        byte: The offending byte as an int, or None
    """

    def __init__(self, reason: str, byte: Optional[int] = None):
        self.reason = reason
        self.byte = byte
        super().__init__(reason)


class IntegerOverflow(MalformedSyntax):
    """A decoded integer does not fit in a signed 64-bit value."""
    pass


class InvalidTextEncoding(BencodeDecodeError):
    """A string payload is not valid UTF-8."""
    pass


class BencodeEncodeError(BencodeError):
    """Exception raised for errors in bencode encoding."""
    pass


class UnsupportedValue(BencodeEncodeError, TypeError):
    """The writer was handed something it cannot represent."""
    pass
