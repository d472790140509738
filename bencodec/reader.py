"""
Bencode decoding for BitTorrent protocol.
Reads values one at a time from a binary stream.
"""
import logging
from typing import BinaryIO, Dict, Iterator, List, Optional, Union

from .config import ENFORCE_INT64, MAX_DEPTH
from .errors import (
    IntegerOverflow,
    InvalidTextEncoding,
    MalformedSyntax,
    UnexpectedEndOfInput,
)
from .value import END_OF_INPUT, INT64_MAX, EndOfInput, Value

logger = logging.getLogger(__name__)

INT_TOKEN = ord('i')
LIST_TOKEN = ord('l')
DICT_TOKEN = ord('d')
END_TOKEN = ord('e')
SEPARATOR_TOKEN = ord(':')
MINUS_TOKEN = ord('-')
ZERO = ord('0')
NINE = ord('9')

# Upper bound for a single read() on the source
READ_CHUNK_SIZE = 64 * 1024


class BencodeReader:
    """
    Reads bencoded values from a binary stream.

    The reader only consumes the bytes of the values that are requested. It
    keeps a single byte of lookahead and never buffers more than that.
    """

    def __init__(self, source: BinaryIO, enforce_int64: Optional[bool] = None,
                 max_depth: Optional[int] = None):
        """
        Args:
            source: Any object with a read(n) method returning bytes
            enforce_int64: Reject integers outside the signed 64-bit range
            max_depth: Maximum nesting of lists and dicts
        """
        self._source = source
        self._pushback: Optional[int] = None
        self._depth = 0
        self.enforce_int64 = ENFORCE_INT64 if enforce_int64 is None else enforce_int64
        self.max_depth = MAX_DEPTH if max_depth is None else max_depth
        self.closed = False

    def __enter__(self) -> 'BencodeReader':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[Value]:
        """Yield values until the source is exhausted."""
        while True:
            value = self.read()
            if value is END_OF_INPUT:
                return
            yield value

    def close(self) -> None:
        """Close the underlying source. Calling this more than once is a no-op."""
        if self.closed:
            return
        self.closed = True
        self._pushback = None
        close = getattr(self._source, 'close', None)
        if close is not None:
            close()
        logger.debug("Closed bencode reader")

    # ----- lookahead -----

    def _next_byte(self) -> Optional[int]:
        if self._pushback is not None:
            byte, self._pushback = self._pushback, None
            return byte
        chunk = self._source.read(1)
        if not chunk:
            return None
        return chunk[0]

    def _unread(self, byte: int) -> None:
        if self._pushback is not None:
            raise RuntimeError("Pushback slot already holds a byte")
        self._pushback = byte

    def _force_read(self) -> int:
        byte = self._next_byte()
        if byte is None:
            raise UnexpectedEndOfInput()
        return byte

    def _peek(self) -> int:
        byte = self._force_read()
        self._unread(byte)
        return byte

    def _read_exact(self, length: int) -> bytes:
        data = bytearray()
        if length and self._pushback is not None:
            data.append(self._pushback)
            self._pushback = None
        while len(data) < length:
            chunk = self._source.read(min(length - len(data), READ_CHUNK_SIZE))
            if not chunk:
                raise UnexpectedEndOfInput(
                    f"Expected {length} bytes of string data, got {len(data)}")
            data += chunk
        return bytes(data)

    def at_end(self) -> bool:
        """Return True if the source has no bytes left, without consuming any."""
        byte = self._next_byte()
        if byte is None:
            return True
        self._unread(byte)
        return False

    def _malformed(self, reason: str, byte: Optional[int] = None,
                   error=MalformedSyntax) -> MalformedSyntax:
        logger.debug(f"Malformed bencode: {reason}")
        return error(reason, byte)

    # ----- grammar -----

    def read_int(self) -> int:
        """
        Read a bencoded integer.

        Format: i<number>e
        Example: i42e -> 42
        """
        initial = self._force_read()
        if initial != INT_TOKEN:
            raise self._malformed(
                f"Bencoded integer must start with 'i', not {chr(initial)!r}", initial)

        value = 0
        negative = read_digit = False
        while True:
            cur = self._force_read()
            if cur == MINUS_TOKEN and not negative and not read_digit:
                negative = True
            elif ZERO <= cur <= NINE:
                read_digit = True
                value = value * 10 + (cur - ZERO)
                # -2**63 is the largest magnitude allowed
                if self.enforce_int64 and value > INT64_MAX + 1:
                    raise self._malformed(
                        "Bencoded integer does not fit in 64 bits", cur, IntegerOverflow)
            elif cur == END_TOKEN:
                if not read_digit:
                    raise self._malformed(
                        "Bencoded integer must contain at least one digit", cur)
                break
            else:
                raise self._malformed(
                    f"Unexpected character {chr(cur)!r} when reading bencoded integer", cur)

        if negative:
            return -value
        if self.enforce_int64 and value > INT64_MAX:
            raise self._malformed(
                "Bencoded integer does not fit in 64 bits", None, IntegerOverflow)
        return value

    def _read_length(self) -> int:
        # digit+ ':'
        length = 0
        read_digit = False
        while True:
            cur = self._force_read()
            if ZERO <= cur <= NINE:
                read_digit = True
                length = length * 10 + (cur - ZERO)
            elif cur == SEPARATOR_TOKEN:
                if not read_digit:
                    raise self._malformed(
                        "Bencode-length must contain at least one digit", cur)
                return length
            else:
                raise self._malformed(
                    f"Unexpected character {chr(cur)!r} when reading bencode-length of string",
                    cur)

    def read_bytes(self) -> bytes:
        """
        Read a bencoded string without interpreting it as text.

        Format: <length>:<data>
        Example: 5:hello -> b'hello'
        """
        length = self._read_length()
        if length == 0:
            return b""
        return self._read_exact(length)

    def read_string(self) -> str:
        """
        Read a bencoded string and decode it as UTF-8.

        Raises:
            InvalidTextEncoding: If the payload is not valid UTF-8
        """
        data = self.read_bytes()
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            logger.debug(f"String payload of {len(data)} bytes is not UTF-8: {e}")
            raise InvalidTextEncoding(f"Bencoded string is not valid UTF-8: {e}") from e

    def _enter_container(self, kind: str) -> None:
        if self._depth >= self.max_depth:
            raise self._malformed(f"Bencoded {kind} nested deeper than {self.max_depth} levels")
        self._depth += 1

    def read_list(self) -> List[Value]:
        """
        Read a bencoded list. The list may contain lists and dicts itself.

        Format: l<values>e
        Example: l4:spami42ee -> ['spam', 42]
        """
        initial = self._force_read()
        if initial != LIST_TOKEN:
            raise self._malformed(
                f"Bencoded list must start with 'l', not {chr(initial)!r}", initial)

        self._enter_container('list')
        try:
            result = []
            while self._peek() != END_TOKEN:
                value = self.read()
                if value is END_OF_INPUT:
                    raise UnexpectedEndOfInput()
                result.append(value)
            self._force_read()  # the 'e' we peeked
            return result
        finally:
            self._depth -= 1

    def read_dict(self) -> Dict[str, Value]:
        """
        Read a bencoded dict. Keys are always read as strings and a repeated
        key overwrites the earlier value.

        Format: d<key><value>...e
        Example: d3:bar4:spame -> {'bar': 'spam'}
        """
        initial = self._force_read()
        if initial != DICT_TOKEN:
            raise self._malformed(
                f"Bencoded dict must start with 'd', not {chr(initial)!r}", initial)

        self._enter_container('dict')
        try:
            result = {}
            while self._peek() != END_TOKEN:
                key = self.read_string()
                value = self.read()
                if value is END_OF_INPUT:
                    raise UnexpectedEndOfInput()
                result[key] = value
            self._force_read()  # the 'e' we peeked
            return result
        finally:
            self._depth -= 1

    def read(self) -> Union[Value, EndOfInput]:
        """
        Read the next bencoded value of any kind.

        Returns:
            The decoded value, or END_OF_INPUT if the source was already
            exhausted.
        """
        tag = self._next_byte()
        if tag is None:
            return END_OF_INPUT
        self._unread(tag)

        if tag == INT_TOKEN:
            return self.read_int()
        elif tag == LIST_TOKEN:
            return self.read_list()
        elif tag == DICT_TOKEN:
            return self.read_dict()
        return self.read_string()
