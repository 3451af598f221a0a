import sys
import unittest
from unittest.mock import Mock

from hamcrest import assert_that, calling, is_, raises

from denoncontrol.conduit.base import Conduit, ConduitDecorator, LoggingConduit, ReadStream


def debug_timeout(value):
    """
    Replaces the timeout value with a very large one if the tests are running under a debugger.
    This prevents the main thread from throwing an exception and exiting when the test times out
    due to a breakpoint.
    :param value:
    :return:
    """
    return value if sys.gettrace() is None else 100000


class ConduitTest(unittest.TestCase):
    def test_abstract_methods(self):
        sut = Conduit()
        assert_that(calling(lambda: sut.input), raises(NotImplementedError))
        assert_that(calling(lambda: sut.open), raises(NotImplementedError))
        assert_that(calling(sut.write).with_args(b"PW?\r"), raises(NotImplementedError))
        assert_that(calling(sut.shutdown), raises(NotImplementedError))

    def test_read_stream_is_abstract(self):
        sut = ReadStream()
        assert_that(calling(sut.peek).with_args(1), raises(NotImplementedError))
        assert_that(calling(sut.read_exact).with_args(1), raises(NotImplementedError))


class ConduitDecoratorTest(unittest.TestCase):
    def setUp(self):
        self.decorated = Mock()
        self.sut = ConduitDecorator(self.decorated)

    def test_properties_delegate(self):
        assert_that(self.sut.input, is_(self.decorated.input))
        assert_that(self.sut.open, is_(self.decorated.open))

    def test_write_delegates(self):
        self.decorated.write.return_value = 4
        assert_that(self.sut.write(b"PW?\r"), is_(4))
        self.decorated.write.assert_called_once_with(b"PW?\r")

    def test_shutdown_delegates(self):
        self.sut.shutdown()
        self.decorated.shutdown.assert_called_once_with()


class LoggingConduitTest(unittest.TestCase):
    def test_write_is_logged_and_delegated(self):
        decorated = Mock()
        decorated.write.return_value = 5
        log = Mock()
        sut = LoggingConduit(decorated, log)
        assert_that(sut.write(b"SICD\r"), is_(5))
        decorated.write.assert_called_once_with(b"SICD\r")
        log.debug.assert_called_once_with("sending b'SICD\\r'")


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
