"""
Bencode encoding and decoding of in-memory data.
"""
import io
from typing import Any, BinaryIO, List, Optional, Union

from .errors import MalformedSyntax, UnexpectedEndOfInput
from .reader import BencodeReader
from .value import END_OF_INPUT, EndOfInput, Value
from .writer import BencodeWriter


def _as_stream(data: Union[BinaryIO, bytes, str]) -> BinaryIO:
    if isinstance(data, str):
        data = data.encode('utf-8')
    if isinstance(data, (bytes, bytearray, memoryview)):
        return io.BytesIO(data)
    return data


def decode(data: Union[BinaryIO, bytes, str]) -> Union[Value, EndOfInput]:
    """
    Decode a single bencoded value from bytes or a stream.

    Args:
        data: A file-like object or bytes containing bencoded data

    Returns:
        The decoded Python object (int, str, list, or dict). For a stream
        that is already exhausted, END_OF_INPUT.

    Raises:
        UnexpectedEndOfInput: If in-memory data is empty or a value is cut short
        MalformedSyntax: If in-memory data continues past the value
    """
    in_memory = not hasattr(data, 'read')
    reader = BencodeReader(_as_stream(data))
    value = reader.read()
    if value is END_OF_INPUT:
        if not in_memory:
            return END_OF_INPUT
        raise UnexpectedEndOfInput("No bencoded value in input")
    # Streams may carry further values
    if in_memory and not reader.at_end():
        raise MalformedSyntax("Trailing data after bencoded value")
    return value


def decode_all(data: Union[BinaryIO, bytes, str]) -> List[Value]:
    """Decode every bencoded value in the input, in order."""
    return list(BencodeReader(_as_stream(data)))


def encode(obj: Any, dict_order: Optional[str] = None) -> bytes:
    """
    Encode a Python object to bencode format.

    Args:
        obj: The object to encode (int, str, bytes, list, tuple or dict)
        dict_order: 'insertion' or 'sorted', defaults to the configured order

    Returns:
        The bencoded data as bytes
    """
    buffer = io.BytesIO()
    BencodeWriter(buffer, dict_order=dict_order).write(obj)
    return buffer.getvalue()
