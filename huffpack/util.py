# Copyright (c) 2025, huffpack developers; All Rights Reserved
# huffpack is published under the PSF license.
"""
Frequency tables, Huffman trees, Huffman codes and bit-packing.
"""
import logging
from collections import Counter, namedtuple
from collections.abc import Mapping
from types import MappingProxyType

from bitarray import bitarray, frozenbitarray

from huffpack.errors import EmptyInput, UnmappedByte
from huffpack.pqueue import PriorityQueue

__all__ = [
    'Leaf', 'Internal',
    'frequency_table', 'huffman_tree', 'huffman_code',
    'encoded_length', 'pack', 'iterpack',
    'frequency_report', 'code_report', 'bit_view', 'char_view',
]

logger = logging.getLogger(__name__)

_bytes_like = (bytes, bytearray, memoryview)


def _check_bytes(obj):
    if not isinstance(obj, _bytes_like):
        raise TypeError("bytes-like object expected, got '%s'" %
                        type(obj).__name__)


def _check_mapping(obj):
    if not isinstance(obj, Mapping):
        raise TypeError("mapping expected, got '%s'" % type(obj).__name__)

# ---------------------------- frequency table ------------------------------

def frequency_table(__data):
    """frequency_table(data, /) -> mapping

Count how often each byte value occurs in `data` and return a read-only
mapping of byte values to their count, ordered by byte value.  `data` is
either a bytes-like object or an iterable of bytes-like chunks (such as
the blocks read from a file).  Only byte values which occur are present.
"""
    if isinstance(__data, _bytes_like):
        __data = [__data]

    cnt = Counter()
    for chunk in __data:
        _check_bytes(chunk)
        cnt.update(bytes(chunk) if isinstance(chunk, memoryview) else chunk)

    return MappingProxyType(dict(sorted(cnt.items())))

# ------------------------------- merge tree --------------------------------

# There are two types of nodes, both have a `freq` attribute:
#   * Leaf nodes carry the `symbol` they encode.
#   * Internal nodes own exactly two children, `left` and `right`, and their
#     frequency is the sum of the frequencies of the children.
Leaf = namedtuple('Leaf', ['freq', 'symbol'])
Internal = namedtuple('Internal', ['freq', 'left', 'right'])


def huffman_tree(__freq_map):
    """huffman_tree(mapping, /) -> Leaf or Internal

Given a mapping of symbols to their frequency, construct a Huffman tree
and return its root node.  The two nodes with the lowest frequencies are
repeatedly merged into a new internal node, until a single node remains.
When only one symbol is given, the root is that symbol's leaf.
Raises `EmptyInput` when the mapping is empty.
"""
    _check_mapping(__freq_map)
    if len(__freq_map) == 0:
        raise EmptyInput("cannot create Huffman tree with no symbols")

    queue = PriorityQueue()
    # create all leaf nodes and put them into the queue
    for sym, f in __freq_map.items():
        queue.enqueue(f, Leaf(f, sym))

    while True:
        left = queue.dequeue()
        if queue.isEmpty():
            # the single remaining node is the root
            logger.debug("Huffman tree for %d symbols, weight %r",
                         len(__freq_map), left.freq)
            return left
        right = queue.dequeue()
        freq = left.freq + right.freq
        queue.enqueue(freq, Internal(freq, left, right))

# ------------------------------ Huffman code -------------------------------

def huffman_code(__tree):
    """huffman_code(tree, /) -> mapping

Return the Huffman code for the given tree, i.e. a read-only mapping of
symbols to (big-endian) frozenbitarrays.  The code of each symbol is the
path from the root to its leaf, where `0` means left and `1` means right.
Instead of a tree (as returned by `huffman_tree()`), a mapping of symbols
to their frequency may be given, in which case the tree is built first.

If the tree consists of a single leaf, its path would be empty.  Such a
symbol is represented by the single bit `0` instead, such that each
occurrence of the symbol still takes one bit in the encoded output.
"""
    if isinstance(__tree, Mapping):
        __tree = huffman_tree(__tree)
    elif not isinstance(__tree, (Leaf, Internal)):
        raise TypeError("Leaf, Internal or mapping expected, got '%s'" %
                        type(__tree).__name__)

    result = {}
    if isinstance(__tree, Leaf):
        result[__tree.symbol] = frozenbitarray('0', 'big')
        return MappingProxyType(result)

    # traverse iteratively, as degenerate trees may be deeper than the
    # recursion limit
    stack = [(__tree, bitarray(0, 'big'))]
    while stack:
        nd, prefix = stack.pop()
        if isinstance(nd, Leaf):
            result[nd.symbol] = frozenbitarray(prefix, 'big')
        else:  # internal node, so traverse both children (left first)
            stack.append((nd.right, prefix + '1'))
            stack.append((nd.left, prefix + '0'))

    return MappingProxyType(result)

# ------------------------------- bit-packing -------------------------------

def encoded_length(__freq_map, code):
    """encoded_length(mapping, /, code) -> int

Return the number of bits the encoding of an input with the given symbol
frequencies takes when using `code`.
"""
    _check_mapping(__freq_map)
    _check_mapping(code)
    try:
        return sum(f * len(code[sym]) for sym, f in __freq_map.items())
    except KeyError as exc:
        raise UnmappedByte(exc.args[0]) from None


def _encode(a, codedict, data):
    # extend bitarray `a` by the code of each byte in data
    if not data:
        return
    try:
        a.encode(codedict, data)
    except ValueError:
        # find the offending byte to report it
        for sym in data:
            if sym not in codedict:
                raise UnmappedByte(sym) from None
        raise


def pack(__data, code):
    """pack(data, /, code) -> tuple

Replace each byte of `data` by its code and pack the resulting bits into
bytes, most significant bit first.  If the total number of bits is not a
multiple of 8, the low-order bits of the last byte are set to 0.
Returns a tuple `(payload, nbits)`, where `nbits` is the number of bits
of the payload which carry information.
Raises `UnmappedByte` for a byte which has no code.
"""
    _check_bytes(__data)
    _check_mapping(code)
    a = bitarray(0, 'big')
    _encode(a, dict(code), __data)
    return a.tobytes(), len(a)


def iterpack(__chunks, code):
    """iterpack(chunks, /, code) -> iterator

Like `pack()`, but for an iterable of bytes-like chunks.  Return an
iterator over packed bytes objects, which are yielded as soon as complete
bytes are available.  The last bytes object yielded contains the padded
final byte (if any).  Concatenated, the yielded objects are equal to
`pack(b''.join(chunks), code)[0]`.
"""
    _check_mapping(code)
    codedict = dict(code)
    a = bitarray(0, 'big')
    for chunk in __chunks:
        _check_bytes(chunk)
        _encode(a, codedict, chunk)
        n = len(a) & ~7  # number of bits in complete bytes
        if n:
            yield a[:n].tobytes()
            del a[:n]
    if a:
        yield a.tobytes()

# -------------------------------- reporting --------------------------------

_special_ascii = {0: 'NUL', 9: 'TAB', 10: 'LF', 13: 'CR', 127: 'DEL'}

def _disp_char(i):
    if 32 <= i < 127:
        return repr(chr(i))
    return _special_ascii.get(i, '')


def frequency_report(__freq_map):
    """frequency_report(mapping, /) -> str

Return a table listing each byte value, its printable character and its
frequency, ordered by byte value.
"""
    _check_mapping(__freq_map)
    lines = ['Byte Frequency:', '',
             ' byte   char        freq',
             24 * '-']
    for sym in sorted(__freq_map):
        lines.append('%5d   %-5s %10d' %
                     (sym, _disp_char(sym), __freq_map[sym]))
    return '\n'.join(lines) + '\n'


def code_report(code):
    """code_report(code, /) -> str

Return a table listing each byte value, its printable character and its
Huffman code, ordered by byte value.
"""
    _check_mapping(code)
    lines = ['Huffman Tree mappings:', '',
             ' byte   char   bits   Huffman code',
             40 * '-']
    for sym in sorted(code):
        lines.append('%5d   %-5s %5d   %s' %
                     (sym, _disp_char(sym), len(code[sym]),
                      code[sym].to01()))
    return '\n'.join(lines) + '\n'


def bit_view(__data):
    """bit_view(data, /) -> str

Return the bytes of `data` as bit strings, one line of eight `0` and `1`
characters (most significant bit first) per byte.
"""
    _check_bytes(__data)
    return ''.join('{:08b}\n'.format(b) for b in bytes(__data))


def char_view(__data):
    """char_view(data, /) -> str

Return `data` as text (one character per byte), with spaces shown as
U+25A1 (white square) and tabs as U+25A0 (black square).
"""
    _check_bytes(__data)
    text = bytes(__data).decode('latin-1')
    return text.replace(' ', '\u25a1').replace('\t', '\u25a0')
