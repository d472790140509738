"""
Bencode encoding for BitTorrent protocol.
Writes values to a binary stream.
"""
import logging
from typing import Any, BinaryIO, List, Mapping, Optional, Sequence, Tuple, Union

from .config import DICT_ORDER, DICT_ORDER_SORTED, DICT_ORDERS, ENFORCE_INT64
from .errors import UnsupportedValue
from .value import Value, fits_int64

logger = logging.getLogger(__name__)


class BencodeWriter:
    """Writes bencoded values to a binary stream without buffering."""

    def __init__(self, sink: BinaryIO, dict_order: Optional[str] = None,
                 enforce_int64: Optional[bool] = None):
        """
        Args:
            sink: Any object with a write(bytes) method
            dict_order: 'insertion' to keep mapping order, 'sorted' to sort
                keys by their raw bytes
            enforce_int64: Reject integers outside the signed 64-bit range
        """
        dict_order = (dict_order or DICT_ORDER).lower()
        if dict_order not in DICT_ORDERS:
            raise ValueError(f"Unknown dict order {dict_order!r}, expected one of {DICT_ORDERS}")
        self._sink = sink
        self.dict_order = dict_order
        self.enforce_int64 = ENFORCE_INT64 if enforce_int64 is None else enforce_int64
        self.closed = False

    def __enter__(self) -> 'BencodeWriter':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def flush(self) -> None:
        flush = getattr(self._sink, 'flush', None)
        if flush is not None:
            flush()

    def close(self) -> None:
        """Flush and close the underlying sink. Calling this more than once is a no-op."""
        if self.closed:
            return
        self.closed = True
        try:
            self.flush()
        finally:
            close = getattr(self._sink, 'close', None)
            if close is not None:
                close()
        logger.debug("Closed bencode writer")

    def write_int(self, value: int) -> None:
        """
        Write a bencoded integer.

        Example: 42 -> i42e
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise UnsupportedValue(f"Expected an integer, got {type(value).__name__}")
        if self.enforce_int64 and not fits_int64(value):
            raise UnsupportedValue(f"Integer {value} does not fit in 64 bits")
        self._sink.write(f"i{value}e".encode('ascii'))

    def write_string(self, value: Union[str, bytes]) -> None:
        """
        Write a bencoded string. Text is encoded as UTF-8, bytes are written
        as they are.

        Example: 'spam' -> 4:spam
        """
        data = _string_bytes(value)
        self._sink.write(f"{len(data)}:".encode('ascii'))
        if data:
            self._sink.write(data)

    def write_list(self, values: Sequence[Value]) -> None:
        self._sink.write(b"l")
        for item in values:
            self.write(item)
        self._sink.write(b"e")

    def write_dict(self, mapping: Mapping[Any, Value]) -> None:
        """
        Write a bencoded dict. Entries follow the writer's dict_order.

        Raises:
            UnsupportedValue: If a key is not a string or two keys share the
                same bytes, before anything is written
        """
        entries: List[Tuple[bytes, Value]] = [
            (_string_bytes(key), value) for key, value in mapping.items()
        ]
        if len({key for key, _ in entries}) != len(entries):
            raise UnsupportedValue("Dict has keys that encode to the same bytes")
        if self.dict_order == DICT_ORDER_SORTED:
            entries.sort(key=lambda entry: entry[0])

        self._sink.write(b"d")
        for key, value in entries:
            self.write_string(key)
            self.write(value)
        self._sink.write(b"e")

    def write(self, value: Value) -> None:
        """
        Write any bencodable value.

        Raises:
            UnsupportedValue: If value is not an integer, string, list or dict
        """
        # bool is an int subclass but not a bencode type
        if isinstance(value, bool):
            raise UnsupportedValue("Booleans cannot be bencoded")
        if isinstance(value, int):
            self.write_int(value)
        elif isinstance(value, (str, bytes, bytearray)):
            self.write_string(value)
        elif isinstance(value, (list, tuple)):
            self.write_list(value)
        elif isinstance(value, dict):
            self.write_dict(value)
        else:
            raise UnsupportedValue(
                f"Value must either be integer, string, list or dict, was {type(value).__name__}")


def _string_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        try:
            return value.encode('utf-8')
        except UnicodeEncodeError as e:
            raise UnsupportedValue(f"String cannot be encoded as UTF-8: {e}") from e
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise UnsupportedValue(f"Expected a string, got {type(value).__name__}")
