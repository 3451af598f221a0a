import logging

from denoncontrol.errors import EndOfInput
from denoncontrol.protocol import codec
from denoncontrol.protocol.async_loop import AsyncLoop
from denoncontrol.protocol.lines import LineAssembler
from denoncontrol.status import StatusTable

logger = logging.getLogger(__name__)


class ReceiverLoop(AsyncLoop):
    """
    Reads status lines sent by the receiver and publishes them to the status table.

    This is the only reader of the inbound stream and the only writer of the status table.
    Lines that do not decode are dropped: the receiver sends status the client did not ask about,
    and some of it is not understood. The loop ends when the stream fails or the input ends,
    and the status table is then closed.
    """

    def __init__(self, lines: LineAssembler, status: StatusTable, decode=codec.decode, log=logger):
        super().__init__(log=log, name='denon-receiver')
        self.lines = lines
        self.status = status
        self.decode = decode
        self.received = 0       # lines read
        self.published = 0      # lines decoded and published

    def startup(self):
        self.logger.debug("receiver loop started")

    def loop(self):
        line = self.lines.read_line()
        self.received += 1
        decoded = self.decode(line)
        if decoded is None:
            self.logger.debug("ignoring line %r" % line)
            return
        kind, value = decoded
        generation = self.status.publish(kind, value)
        self.published += 1
        self.logger.debug("%s is %s (generation %d)" % (kind.display_name, value, generation))

    def exception_handler(self, e):
        """ any error reading the stream ends the loop. """
        if not self.running():
            self.logger.debug("receiver loop stopped: %s" % e)
        elif isinstance(e, EndOfInput):
            self.logger.info("receiver input ended: %s" % e)
        elif isinstance(e, IOError):
            self.logger.error("receiver stream failed: %s" % e)
        else:
            self.logger.exception(e)
        self.status.close(e)
        self.stop_event.set()

    def shutdown(self):
        self.status.close()
