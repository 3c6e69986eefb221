# Copyright (c) 2025, huffpack developers; All Rights Reserved
# huffpack is published under the PSF license.
"""
Encoding of whole files (or in-memory data) using a Huffman code derived
from the data itself.

The `Encoder` runs the pipeline as a sequence of steps:

    idle -> counted -> tree -> codes -> packed -> written

Each step consumes the result of the previous one.  A failing step leaves
the encoder in its last good state, and no output file is left behind.
Used as a context manager, the encoder discards a packed output which was
not written.
The output consists of the packed code bits only.  It contains neither the
code table nor the number of bits, so it cannot be decoded on its own.
"""
import os
import stat
import logging
import tempfile
from collections import Counter
from contextlib import closing

from bitarray import bits2bytes

from huffpack.errors import (HuffmanError, EmptyInput, SourceUnreadable,
                             SinkUnwritable)
from huffpack.util import (frequency_table, huffman_tree, huffman_code,
                           encoded_length, iterpack,
                           frequency_report, code_report, _bytes_like)

__all__ = ['Encoder', 'encode', 'encode_file', 'CHUNK_SIZE']

logger = logging.getLogger(__name__)

# number of bytes read from the source at once
CHUNK_SIZE = 1 << 16

STATES = ('idle', 'counted', 'tree', 'codes', 'packed', 'written')


def _remove(path):
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def _umask():
    mask = os.umask(0)
    os.umask(mask)
    return mask


class Encoder(object):
    """Encoder(source, sink=None, chunk_size=CHUNK_SIZE) -> Encoder

Create an encoder for `source`, which is either a path or a bytes-like
object.  `sink` is the path the packed output is written to.  When `sink`
is None, the packed output is kept in the `payload` attribute instead.
The source is read twice (once for counting, once for packing) in blocks
of `chunk_size` bytes.
"""
    def __init__(self, source, sink=None, chunk_size=CHUNK_SIZE):
        if isinstance(source, _bytes_like):
            self._data = bytes(source)
            self.source = None
        elif isinstance(source, (str, os.PathLike)):
            self._data = None
            self.source = os.fspath(source)
        else:
            raise TypeError("path or bytes-like object expected, got '%s'" %
                            type(source).__name__)

        if sink is not None:
            if not isinstance(sink, (str, os.PathLike)):
                raise TypeError("path expected for sink, got '%s'" %
                                type(sink).__name__)
            sink = os.fspath(sink)
        self.sink = sink

        if not isinstance(chunk_size, int):
            raise TypeError("int expected for chunk_size, got '%s'" %
                            type(chunk_size).__name__)
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0, got %d" % chunk_size)
        self.chunk_size = chunk_size

        self.state = 'idle'
        self.freq = None
        self.tree = None
        self.code = None
        self.payload = None
        self.nbits = None
        self.nbytes = None
        self._tmpname = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.discard()

    def __repr__(self):
        return '<%s %s state=%r>' % (type(self).__name__, self.name,
                                     self.state)

    @property
    def name(self):
        "Name of the source, for messages."
        if self.source is None:
            return '<%d bytes>' % len(self._data)
        return self.source

    @property
    def ratio(self):
        "Packed size relative to the input size (None until packed)."
        if self.nbytes is None:
            return None
        return self.nbytes / sum(self.freq.values())

    def _expect(self, state, action):
        if self.state != state:
            raise RuntimeError("cannot %s in state %r (expected %r)" %
                               (action, self.state, state))

    def _advance(self, state):
        logger.debug("%s: %s -> %s", self.name, self.state, state)
        self.state = state

    def _read_source(self):
        # generate chunks of the source, raising SourceUnreadable on errors
        if self._data is not None:
            yield self._data
            return
        try:
            fi = open(self.source, 'rb')
        except OSError as exc:
            raise SourceUnreadable(exc.errno, exc.strerror,
                                   self.source) from exc
        with fi:
            while True:
                try:
                    chunk = fi.read(self.chunk_size)
                except OSError as exc:
                    raise SourceUnreadable(exc.errno, exc.strerror,
                                           self.source) from exc
                if not chunk:
                    return
                yield chunk

    # -------------------------------- steps --------------------------------

    def count(self):
        "Read the source and count the frequency of each byte."
        self._expect('idle', 'count frequencies')
        with closing(self._read_source()) as chunks:
            freq = frequency_table(chunks)
        if not freq:
            raise EmptyInput("no bytes to encode in %s" % self.name)
        self.freq = freq
        self._advance('counted')

    def build_tree(self):
        "Build the Huffman tree from the frequency table."
        self._expect('counted', 'build tree')
        self.tree = huffman_tree(self.freq)
        self._advance('tree')

    def generate_codes(self):
        "Derive the code table from the Huffman tree, and discard the tree."
        self._expect('tree', 'generate codes')
        self.code = huffman_code(self.tree)
        self.tree = None
        self.nbits = encoded_length(self.freq, self.code)
        self._advance('codes')

    def pack(self):
        """
        Read the source again and pack the code of each byte.  Without a
        sink, the result is stored in `payload`.  Otherwise it is streamed
        into a temporary file next to the sink, which is moved into place
        by write().
        """
        self._expect('codes', 'pack')
        if self.sink is None:
            self.payload = b''.join(self._iterpack())
        else:
            self._pack_to_tempfile()
        self.nbytes = bits2bytes(self.nbits)
        logger.info("%s: %d bytes -> %d bits (%d bytes), ratio %.2f%%",
                    self.name, sum(self.freq.values()), self.nbits,
                    self.nbytes, 100.0 * self.ratio)
        self._advance('packed')

    def _iterpack(self):
        # second pass over the source, which must still have the byte
        # frequencies the code was derived from
        freq = Counter()

        def recount(chunks):
            for chunk in chunks:
                freq.update(chunk)
                yield chunk

        with closing(self._read_source()) as chunks:
            yield from iterpack(recount(chunks), self.code)
        if dict(freq) != dict(self.freq):
            raise SourceUnreadable("%s changed while being encoded" %
                                   self.name)

    def _pack_to_tempfile(self):
        dirname = os.path.dirname(os.path.abspath(self.sink))
        try:
            fd, tmpname = tempfile.mkstemp(prefix='.huffpack-', dir=dirname)
        except OSError as exc:
            raise SinkUnwritable(exc.errno, exc.strerror, self.sink) from exc

        try:
            try:
                with os.fdopen(fd, 'wb') as fo:
                    for block in self._iterpack():
                        fo.write(block)
            except HuffmanError:
                raise
            except OSError as exc:
                raise SinkUnwritable(exc.errno, exc.strerror,
                                     self.sink) from exc
        except BaseException:
            _remove(tmpname)
            raise
        self._tmpname = tmpname

    def write(self):
        "Move the packed output into place, replacing any existing file."
        self._expect('packed', 'write')
        if self.sink is None:
            raise RuntimeError("no sink to write to, output is in .payload")
        if self._tmpname is None:
            raise RuntimeError("packed output was discarded")
        try:
            os.chmod(self._tmpname, self._sink_mode())
            os.replace(self._tmpname, self.sink)
        except OSError as exc:
            _remove(self._tmpname)
            raise SinkUnwritable(exc.errno, exc.strerror, self.sink) from exc
        finally:
            self._tmpname = None
        self._advance('written')

    def _sink_mode(self):
        # an existing sink keeps its mode, a new one gets the mode open()
        # would give it
        try:
            return stat.S_IMODE(os.stat(self.sink).st_mode)
        except FileNotFoundError:
            return 0o666 & ~_umask()

    def run(self):
        """run() -> self

Perform all remaining steps.  Without a sink, the final state is 'packed',
otherwise 'written'.
"""
        steps = [self.count, self.build_tree, self.generate_codes, self.pack]
        if self.sink is not None:
            steps.append(self.write)
        for step in steps[STATES.index(self.state):]:
            step()
        return self

    def discard(self):
        "Remove a packed output which has not been written yet."
        if self._tmpname is not None:
            _remove(self._tmpname)
            self._tmpname = None

    # ------------------------------- reports -------------------------------

    def frequency_report(self):
        """frequency_report() -> str

Re-read the source and return its byte frequency table as text.  If the
source cannot be read (anymore), the table is empty.
"""
        try:
            with closing(self._read_source()) as chunks:
                freq = frequency_table(chunks)
        except SourceUnreadable as exc:
            logger.warning("%s: cannot read source for report: %s",
                           self.name, exc)
            freq = {}
        return frequency_report(freq)

    def code_report(self):
        "Return the code table as text."
        if self.code is None:
            raise RuntimeError("codes not generated yet (state %r)" %
                               self.state)
        return code_report(self.code)


def encode(__data):
    """encode(data, /) -> tuple

Encode bytes-like `data` using the Huffman code derived from its byte
frequencies.  Returns a tuple `(code, payload, nbits)`.
Raises `EmptyInput` if `data` is empty.
"""
    if not isinstance(__data, _bytes_like):
        raise TypeError("bytes-like object expected, got '%s'" %
                        type(__data).__name__)
    enc = Encoder(__data).run()
    return enc.code, enc.payload, enc.nbits


def encode_file(source, sink, chunk_size=CHUNK_SIZE):
    """encode_file(source, sink, chunk_size=CHUNK_SIZE) -> Encoder

Encode the file `source` and write the packed output to `sink`.  Returns
the (finished) `Encoder`, which holds the frequency and code tables.
"""
    return Encoder(source, sink, chunk_size).run()
