"""
An in-memory conduit. Inbound bytes are fed by the test (or a harness), outbound bytes
are captured for inspection.
"""
import threading

from denoncontrol.conduit import base
from denoncontrol.errors import ConduitClosedError


class BufferReadStream(base.ReadStream):

    def __init__(self, owner):
        self.owner = owner

    def peek(self, count=1) -> bytes:
        return self.owner._peek(count)

    def read_exact(self, count) -> bytes:
        return self.owner._read_exact(count)


class BufferConduit(base.Conduit):
    """
    A thread-safe conduit backed by a byte buffer.

    :param live: when True, peek() waits for data to arrive like a socket does, so an empty peek
        only happens once end_input() or shutdown() has been called. When False, the conduit is a
        bounded feed: nothing waits, and read_exact() fails when fewer bytes have been fed than requested.
    :param responder: an optional callable invoked with each line written. Whatever bytes it returns
        are fed back as input, which simulates a receiver answering queries.
    """

    def __init__(self, data=b"", live=True, responder=None):
        self._buffer = bytearray(data)
        self._available = threading.Condition()
        self._ended = False
        self._shutdown = False
        self.live = live
        self.responder = responder
        self.written = []
        self.read = BufferReadStream(self)

    @property
    def input(self) -> base.ReadStream:
        return self.read

    @property
    def open(self) -> bool:
        return not self._shutdown

    def feed(self, data):
        """ appends bytes to the inbound side. """
        if isinstance(data, str):
            data = data.encode('ascii')
        with self._available:
            self._buffer.extend(data)
            self._available.notify_all()

    def end_input(self):
        """ marks that no more input will be fed. Readers drain what is buffered and then see the end. """
        with self._available:
            self._ended = True
            self._available.notify_all()

    def write(self, data: bytes) -> int:
        if self._shutdown:
            raise ConduitClosedError("conduit was shut down")
        self.written.append(bytes(data))
        if self.responder:
            reply = self.responder(bytes(data))
            if reply:
                self.feed(reply)
        return len(data)

    def written_lines(self):
        """ the text written to the conduit, in order, as a list of strings. """
        return [data.decode('ascii') for data in self.written]

    def shutdown(self):
        with self._available:
            self._shutdown = True
            self._available.notify_all()

    def _peek(self, count):
        with self._available:
            if self.live:
                self._available.wait_for(lambda: self._buffer or self._ended or self._shutdown)
            if self._shutdown:
                return bytes()
            return bytes(self._buffer[:count])

    def _read_exact(self, count):
        with self._available:
            if self.live:
                self._available.wait_for(lambda: len(self._buffer) >= count or self._ended or self._shutdown)
            if self._shutdown:
                raise ConduitClosedError("conduit was shut down")
            if len(self._buffer) < count:
                raise ConduitClosedError("input ended with %d of %d bytes available" % (len(self._buffer), count))
            result = bytes(self._buffer[:count])
            del self._buffer[:count]
            return result
