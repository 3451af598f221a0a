"""
The errors raised by the receiver connection and its collaborators.

Transport and timeout errors are distinct so that callers of get()/set() can tell
a severed connection (fatal) from a receiver that did not answer in time (retryable).
"""


class DenonControlError(Exception):
    """ base class for errors raised by this package. """


class ConnectorError(DenonControlError):
    """ The transport to the receiver could not be established. """


class TransportError(DenonControlError):
    """ Reading from or writing to the receiver failed. The connection is no longer usable. """


class ConnectionClosedError(TransportError):
    """ The connection is closed, either explicitly or because the stream failed. """


class ResponseTimeoutError(DenonControlError):
    """ The receiver did not report the requested status before the deadline. """


class ValidationError(DenonControlError, ValueError):
    """ A value outside the domain of a status kind. Raised before anything is sent. """


class ReceiverNotFoundError(DenonControlError):
    """ Discovery did not find a receiver on the network. """


class ConduitClosedError(IOError):
    """ The conduit was shut down, or the peer closed it, while reading. """


class EndOfInput(Exception):
    """ No further input will arrive on the stream. """
