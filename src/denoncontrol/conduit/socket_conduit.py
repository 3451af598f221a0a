import socket
import threading

from denoncontrol.conduit import base
from denoncontrol.errors import ConduitClosedError


class SocketReadStream(base.ReadStream):
    """
    The read half of a connected socket.
    peek() waits until the socket is readable, so an empty result means the peer
    closed the stream or it was shut down locally.
    """

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self._shutdown = threading.Event()

    def peek(self, count=1) -> bytes:
        if self._shutdown.is_set():
            return bytes()
        try:
            return self.sock.recv(count, socket.MSG_PEEK)
        except OSError:
            if self._shutdown.is_set():
                return bytes()
            raise

    def read_exact(self, count) -> bytes:
        buf = bytearray()
        while len(buf) < count:
            if self._shutdown.is_set():
                raise ConduitClosedError("socket was shut down")
            chunk = self.sock.recv(count - len(buf))
            if not chunk:
                raise ConduitClosedError("connection closed by peer")
            buf.extend(chunk)
        return bytes(buf)

    def mark_shutdown(self):
        self._shutdown.set()


class SocketConduit(base.Conduit):
    """
    A conduit that provides communication via a socket.
    :param sock The open, connected socket
    """
    def __init__(self, sock: socket.socket):
        """
        :param sock: the client socket that represents the connection
        :type sock: socket
        """
        self.sock = sock
        self.read = SocketReadStream(sock)

    @property
    def open(self) -> bool:
        return self.sock.fileno() >= 0 and not self.read._shutdown.is_set()

    @property
    def input(self):
        return self.read

    def write(self, data: bytes) -> int:
        self.sock.sendall(data)
        return len(data)

    def shutdown(self):
        if not self.open:
            return
        self.read.mark_shutdown()
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # the peer may have closed the socket already
            pass
        finally:
            self.sock.close()
