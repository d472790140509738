import io
from collections import OrderedDict

import pytest

from bencodec import BencodeWriter, UnsupportedValue


def written(value, **kwargs) -> bytes:
    sink = io.BytesIO()
    BencodeWriter(sink, **kwargs).write(value)
    return sink.getvalue()


class RecordingSink:
    def __init__(self):
        self.data = b''
        self.flush_calls = 0
        self.close_calls = 0

    def write(self, data: bytes) -> None:
        self.data += data

    def flush(self) -> None:
        self.flush_calls += 1

    def close(self) -> None:
        self.close_calls += 1


# --- Scalars ---

def test_write_int():
    assert written(42) == b'i42e'
    assert written(-3) == b'i-3e'
    assert written(0) == b'i0e'


def test_write_int_64_bit_bounds():
    assert written(2 ** 63 - 1) == b'i9223372036854775807e'
    assert written(-2 ** 63) == b'i-9223372036854775808e'
    with pytest.raises(UnsupportedValue):
        written(2 ** 63, enforce_int64=True)
    assert written(2 ** 63, enforce_int64=False) == b'i9223372036854775808e'


def test_write_string():
    assert written('spam') == b'4:spam'
    assert written('') == b'0:'


def test_write_string_counts_utf8_bytes():
    assert written('héllo') == '6:héllo'.encode('utf-8')


def test_write_raw_bytes():
    assert written(b'\xff\x00') == b'2:\xff\x00'
    assert written(bytearray(b'ab')) == b'2:ab'


# --- Containers ---

def test_write_list():
    assert written(['spam', 42]) == b'l4:spami42ee'
    assert written(('spam', 42)) == b'l4:spami42ee'
    assert written([]) == b'le'


def test_write_dict_insertion_order():
    data = {'foo': 42, 'bar': 'spam'}
    assert written(data, dict_order='insertion') == b'd3:fooi42e3:bar4:spame'


def test_write_dict_sorted_order():
    data = OrderedDict([('foo', 42), ('bar', 'spam')])
    assert written(data, dict_order='sorted') == b'd3:bar4:spam3:fooi42ee'


def test_write_dict_sorts_by_raw_key_bytes():
    data = {'b': 1, b'a': 2, 'B': 3}
    assert written(data, dict_order='sorted') == b'd1:Bi3e1:ai2e1:bi1ee'


def test_write_empty_dict():
    assert written({}) == b'de'


def test_write_nested():
    value = ['spam', ['a'], {'a': 'b'}]
    assert written(value) == b'l4:spaml1:aed1:a1:bee'


# --- Unsupported values ---

@pytest.mark.parametrize('value', [True, False, 1.5, None, {1, 2}, object()])
def test_write_unsupported(value):
    with pytest.raises(UnsupportedValue):
        written(value)


def test_write_unsupported_is_a_type_error():
    with pytest.raises(TypeError):
        written(None)


def test_write_dict_non_string_key_fails_before_writing():
    sink = io.BytesIO()
    with pytest.raises(UnsupportedValue):
        BencodeWriter(sink).write_dict({1: 'one'})
    assert sink.getvalue() == b''


def test_write_lone_surrogate():
    with pytest.raises(UnsupportedValue):
        written('\ud800')


def test_unknown_dict_order():
    with pytest.raises(ValueError, match="Unknown dict order"):
        BencodeWriter(io.BytesIO(), dict_order='random')


# --- Sink handling ---

def test_write_does_not_mutate_input():
    data = {'b': [1, 2], 'a': 'x'}
    written(data, dict_order='sorted')
    assert list(data) == ['b', 'a']
    assert data['b'] == [1, 2]


def test_close_flushes_and_closes_once():
    sink = RecordingSink()
    with BencodeWriter(sink) as writer:
        writer.write(['spam'])
        with pytest.raises(UnsupportedValue):
            writer.write(None)
    writer.close()
    assert sink.data == b'l4:spame'
    assert sink.flush_calls == 1
    assert sink.close_calls == 1


def test_io_errors_propagate_unchanged():
    class FullSink:
        def write(self, data):
            raise OSError("disk full")

    with pytest.raises(OSError, match="disk full"):
        BencodeWriter(FullSink()).write(1)


@pytest.mark.parametrize('dict_order', ['insertion', 'sorted'])
def test_write_dict_colliding_keys(dict_order):
    sink = io.BytesIO()
    with pytest.raises(UnsupportedValue, match="same bytes"):
        BencodeWriter(sink, dict_order=dict_order).write({'a': 1, b'a': 2})
    assert sink.getvalue() == b''
