# Copyright (c) 2025, huffpack developers; All Rights Reserved
"""
This package compresses byte streams using Huffman codes.  The frequency
of each byte value in the input determines a prefix-free code, in which
frequent bytes are represented by fewer bits.  The codes of all input
bytes are then packed into a dense byte stream.

Bit-level work is done using the bitarray package:

    https://github.com/ilanschnell/bitarray
"""
from huffpack.errors import (HuffmanError, QueueEmpty, EmptyInput,
                             UnmappedByte, SourceUnreadable, SinkUnwritable)
from huffpack.pqueue import PriorityQueue
from huffpack.util import (Leaf, Internal, frequency_table, huffman_tree,
                           huffman_code, encoded_length, pack, iterpack,
                           frequency_report, code_report)
from huffpack.encoder import Encoder, encode, encode_file

__version__ = '1.0.0'

__all__ = [
    'PriorityQueue', 'Leaf', 'Internal',
    'frequency_table', 'huffman_tree', 'huffman_code', 'encoded_length',
    'pack', 'iterpack', 'frequency_report', 'code_report',
    'Encoder', 'encode', 'encode_file',
    'HuffmanError', 'QueueEmpty', 'EmptyInput', 'UnmappedByte',
    'SourceUnreadable', 'SinkUnwritable',
]


def test(verbosity=1):
    """test(verbosity=1) -> TextTestResult

Run self-test, and return `unittest.runner.TextTestResult` object.
"""
    from huffpack import test_huffpack
    return test_huffpack.run(verbosity=verbosity)
