from abc import abstractmethod


class ReadStream:
    """
    The inbound half of a conduit. Exactly one reader, the receiver loop, owns it.
    """

    @abstractmethod
    def peek(self, count=1) -> bytes:
        """ returns up to count bytes that are available to read without consuming them.
            An empty result means nothing is available. """
        raise NotImplementedError

    @abstractmethod
    def read_exact(self, count) -> bytes:
        """ blocks until exactly count bytes have been consumed.
            Raises IOError if that cannot be satisfied, e.g. the stream was shut down. """
        raise NotImplementedError


class Conduit:
    """
    A conduit allows two-way communication. The input is a ReadStream, output is
    written directly via write().
    """

    @property
    @abstractmethod
    def input(self) -> ReadStream:
        """ fetches the stream that provides input. """
        raise NotImplementedError

    @abstractmethod
    def write(self, data: bytes) -> int:
        """ writes all of data to the peer. Raises IOError on failure. """
        raise NotImplementedError

    @property
    @abstractmethod
    def open(self) -> bool:
        """ determines if this conduit is open. """
        raise NotImplementedError

    @abstractmethod
    def shutdown(self):
        """
        Terminates the conduit. Any reader blocked in read_exact() sees an error,
        and peek() subsequently reports no bytes.
        """
        raise NotImplementedError


class ConduitDecorator(Conduit):
    """
    A ConduitDecorator wraps another conduit and delegates to it's methods.
    This allows subclasses to easily override some behaviors while keeping others
    unchanged.
    """

    def __init__(self, decorate: Conduit):
        self.decorate = decorate

    @property
    def input(self) -> ReadStream:
        return self.decorate.input

    def write(self, data: bytes) -> int:
        return self.decorate.write(data)

    @property
    def open(self) -> bool:
        return self.decorate.open

    def shutdown(self):
        self.decorate.shutdown()


class LoggingConduit(ConduitDecorator):
    """
    Logs the data written to the conduit. Used with --verbose to trace the commands sent.
    """

    def __init__(self, decorate: Conduit, log):
        super().__init__(decorate)
        self.logger = log

    def write(self, data: bytes) -> int:
        self.logger.debug("sending %r" % data)
        return super().write(data)
