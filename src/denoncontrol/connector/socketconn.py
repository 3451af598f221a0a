import logging
import socket
import sys

from denoncontrol.conduit.socket_conduit import SocketConduit
from denoncontrol.config.config import configure_module
from denoncontrol.errors import ConnectorError

logger = logging.getLogger(__name__)

# the port a receiver listens on for control connections
default_port = 23

# seconds to wait for the connection to be established
connect_timeout = 5.0

configure_module(sys.modules[__name__])


class ReceiverEndpoint:
    """
    Describes the TCP endpoint of a receiver.
    """
    def __init__(self, hostname, port=None):
        self.hostname = hostname
        self.port = default_port if port is None else port

    @staticmethod
    def parse(address):
        """
        Parses an address of the form HOSTNAME[:PORT]. A missing or invalid port is replaced by the default.
        >>> ReceiverEndpoint.parse('receiver.lan:666').key()
        'receiver.lan:666'
        >>> ReceiverEndpoint.parse('receiver.lan').port
        23
        """
        hostname, _, port = address.partition(':')
        return ReceiverEndpoint(hostname, int(port) if port.isdigit() else None)

    def key(self):
        return str(self.hostname) + ':' + str(self.port)

    def __eq__(self, other):
        return isinstance(other, ReceiverEndpoint) and self.key() == other.key()

    def __repr__(self):
        return 'ReceiverEndpoint(%r, %r)' % (self.hostname, self.port)


class SocketConnector:
    """
    A connector that opens a TCP socket to the receiver.
    """
    def __init__(self, endpoint: ReceiverEndpoint, timeout=None, report_errors=True):
        """
        :param endpoint The receiver to connect to.
        :param timeout seconds to wait for the connection. Defaults to the configured connect_timeout.
        """
        self.endpoint = endpoint
        self.timeout = connect_timeout if timeout is None else timeout
        self._report_errors = report_errors

    def connect(self) -> SocketConduit:
        """
        Opens the socket.
        :raises ConnectorError: the connection could not be established.
        """
        address = (self.endpoint.hostname, self.endpoint.port)
        try:
            sock = socket.create_connection(address, timeout=self.timeout)
            sock.settimeout(None)
            logger.debug("opened socket to %s" % self.endpoint.key())
            return SocketConduit(sock)
        except OSError as e:
            method = logger.warning if self._report_errors else logger.debug
            method("error opening socket to %s: %s" % (self.endpoint.key(), e))
            raise ConnectorError("unable to connect to %s: %s" % (self.endpoint.key(), e)) from e
