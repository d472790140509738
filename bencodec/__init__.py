"""
Bencode reader and writer for the BitTorrent serialization format.
"""
from .bencode import decode, decode_all, encode
from .errors import (
    BencodeDecodeError,
    BencodeEncodeError,
    BencodeError,
    IntegerOverflow,
    InvalidTextEncoding,
    MalformedSyntax,
    UnexpectedEndOfInput,
    UnsupportedValue,
)
from .reader import BencodeReader
from .value import END_OF_INPUT, INT64_MAX, INT64_MIN, EndOfInput, Value
from .writer import BencodeWriter

__all__ = [
    'BencodeDecodeError',
    'BencodeEncodeError',
    'BencodeError',
    'BencodeReader',
    'BencodeWriter',
    'END_OF_INPUT',
    'EndOfInput',
    'INT64_MAX',
    'INT64_MIN',
    'IntegerOverflow',
    'InvalidTextEncoding',
    'MalformedSyntax',
    'UnexpectedEndOfInput',
    'UnsupportedValue',
    'Value',
    'decode',
    'decode_all',
    'encode',
]
