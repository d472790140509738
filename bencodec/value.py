"""
The value model shared by the reader and writer.

Decoded values are plain Python objects: int, str, list and dict (with str
keys). The writer additionally accepts bytes for strings and tuples for lists.
"""
from typing import Dict, List, Union

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

Value = Union[int, str, bytes, List["Value"], Dict[str, "Value"]]


class EndOfInput:
    """Marker returned by a read at a clean end of stream."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "END_OF_INPUT"


END_OF_INPUT = EndOfInput()


def fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX
