"""
Assembles the carriage-return delimited lines sent by the receiver.
"""
import logging
import sys
import time

from denoncontrol.conduit.base import ReadStream
from denoncontrol.config.config import configure_module
from denoncontrol.errors import EndOfInput
from denoncontrol.protocol.codec import DELIMITER

logger = logging.getLogger(__name__)

# seconds to yield between two peeks that found no input
idle_interval = 0.01

configure_module(sys.modules[__name__])


class LineAssembler:
    """
    Reads lines from a stream a byte at a time.

    The stream is peeked before reading so the assembler can tell when input has stopped.
    An empty peek alone is not conclusive: input is considered ended only when a second
    empty peek follows with no bytes consumed in between.
    """

    def __init__(self, stream: ReadStream, delimiter=DELIMITER, idle=None):
        self.stream = stream
        self.delimiter = delimiter
        self.idle = idle_interval if idle is None else idle
        self.consumed = 0           # bytes read from the stream so far
        self._idle_mark = None      # the value of consumed at the last empty peek
        self._buffer = bytearray()

    def read_line(self) -> str:
        """
        Blocks until a complete line has been read.
        :return: the line, without the delimiter. Bytes that are not valid UTF-8 are replaced.
        :raises EndOfInput: when no more input will arrive.
        :raises IOError: when the stream fails.
        """
        while not self.stream.peek(1):
            self._no_input()
        return self._read_to_delimiter()

    def _no_input(self):
        if self._idle_mark == self.consumed:
            raise EndOfInput("no input after %d bytes" % self.consumed)
        self._idle_mark = self.consumed
        time.sleep(self.idle)

    def _read_to_delimiter(self):
        while True:
            b = self.stream.read_exact(1)
            self.consumed += 1
            if b == self.delimiter:
                line = bytes(self._buffer)
                self._buffer.clear()
                return line.decode('utf-8', errors='replace')
            self._buffer.extend(b)

    def lines(self):
        """ iterates over lines until the input ends. """
        try:
            while True:
                yield self.read_line()
        except EndOfInput:
            return
