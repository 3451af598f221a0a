"""
The request/response API to a receiver.

The receiver's protocol has no request ids: a query such as "PW?" is answered by the receiver
sending its current power status, which it also sends unprompted whenever the status changes.
A get() therefore notes the generation of the kind in the status table before sending the query,
and waits for a later generation to be published by the receiver loop.
"""
import logging
import sys

from denoncontrol.conduit.base import Conduit
from denoncontrol.config.config import configure_module
from denoncontrol.errors import ConnectionClosedError, TransportError
from denoncontrol.protocol import codec
from denoncontrol.protocol.codec import StatusKind
from denoncontrol.protocol.lines import LineAssembler
from denoncontrol.protocol.receiver import ReceiverLoop
from denoncontrol.status import StatusTable

logger = logging.getLogger(__name__)

# seconds to wait for the receiver to answer a query
response_timeout = 2.0

# seconds to wait for the receiver loop to finish when closing
join_timeout = 1.0

configure_module(sys.modules[__name__])


class Connection:
    """
    A connection to a receiver over a conduit.

    The connection owns the write side of the conduit; the receiver loop owns the read side.
    Calls to get() and set() must not be made concurrently.

    :param conduit: the open conduit to the receiver
    :param timeout: seconds get() waits for an answer. Defaults to the configured response_timeout.
    """

    def __init__(self, conduit: Conduit, timeout=None, log=logger):
        self.conduit = conduit
        self.timeout = response_timeout if timeout is None else timeout
        self.status = StatusTable()
        self.receiver = ReceiverLoop(LineAssembler(conduit.input), self.status)
        self.logger = log

    def start(self):
        self.receiver.start()
        return self

    @property
    def closed(self) -> bool:
        return self.status.closed

    def get(self, kind: StatusKind):
        """
        Queries the receiver for the current value of kind. The receiver is always asked,
        since its status can be changed by other means than this connection.
        :raises ResponseTimeoutError: the receiver did not answer within the timeout.
        :raises ConnectionClosedError: the connection is closed, or closed while waiting.
        :raises TransportError: the query could not be sent.
        """
        self._check_open()
        since = self.status.generation(kind)
        self._send(codec.encode_query(kind))
        return self.status.wait_for_update(kind, since, self.timeout)

    def set(self, kind: StatusKind, value):
        """
        Sends a command setting kind to value. Does not wait for the receiver to confirm the change.
        :raises ValidationError: value is not valid for kind. Nothing is sent.
        :raises ConnectionClosedError: the connection is closed.
        :raises TransportError: the command could not be sent.
        """
        codec.validate(kind, value)
        self._check_open()
        self._send(codec.encode_command(kind, value))

    def _check_open(self):
        if self.status.closed:
            raise ConnectionClosedError("connection to receiver is closed") from self.status.close_reason

    def _send(self, text):
        try:
            self.conduit.write(codec.tobytes(text))
        except IOError as e:
            self.logger.error("error sending %r: %s" % (text, e))
            self.status.close(e)
            self.receiver.request_stop()
            self.conduit.shutdown()
            raise TransportError("unable to send %r" % text) from e

    def close(self):
        """
        Shuts down the conduit and stops the receiver loop. Any get() blocked in another thread
        fails with ConnectionClosedError. Closing again has no effect.
        """
        self.status.close()
        self.receiver.request_stop()
        self.conduit.shutdown()
        self.receiver.stop(join_timeout)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def connect(conduit: Conduit, timeout=None) -> Connection:
    """
    Creates a connection over the conduit and starts reading status from the receiver.
    """
    return Connection(conduit, timeout).start()
