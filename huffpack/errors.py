# Copyright (c) 2025, huffpack developers; All Rights Reserved
# huffpack is published under the PSF license.
"""
Exceptions raised by huffpack.

Each exception also derives from the built-in exception a caller would
expect for the same condition, e.g. `EmptyInput` is a `ValueError`.
"""

__all__ = ['HuffmanError', 'QueueEmpty', 'EmptyInput', 'UnmappedByte',
           'SourceUnreadable', 'SinkUnwritable']


class HuffmanError(Exception):
    "Base class of all errors raised by huffpack."


class QueueEmpty(HuffmanError, IndexError):
    """
    Raised when dequeue() or front() is called on an empty priority queue.
    Callers are expected to check isEmpty() first, so this signals a
    programming error rather than a condition to recover from.
    """


class EmptyInput(HuffmanError, ValueError):
    "No symbols to build a Huffman tree from (zero bytes of input)."


class UnmappedByte(HuffmanError, KeyError):
    """
    A byte has no entry in the code table used for packing.  This happens
    only when the code table was built from a different input.
    """

    def __init__(self, symbol):
        KeyError.__init__(self, symbol)
        self.symbol = symbol

    def __str__(self):
        return "byte not in code table: %r" % (self.symbol,)


class SourceUnreadable(HuffmanError, OSError):
    "The input source cannot be opened or read."


class SinkUnwritable(HuffmanError, OSError):
    "The output destination cannot be created or written."
