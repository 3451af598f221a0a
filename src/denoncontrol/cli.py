import logging
import sys
from typing import Optional

import typer
from rich.logging import RichHandler

from denoncontrol.conduit.base import LoggingConduit
from denoncontrol.config.config import configure_module
from denoncontrol.connection import Connection, connect
from denoncontrol.connector.socketconn import ReceiverEndpoint, SocketConnector
from denoncontrol.discovery import AvahiBrowseDiscovery, ZeroconfDiscovery
from denoncontrol.errors import DenonControlError, ValidationError
from denoncontrol.protocol import codec
from denoncontrol.protocol.codec import StatusKind

logger = logging.getLogger(__name__)

# do not accidentally kill the ears
max_volume = 50

configure_module(sys.modules[__name__])

app = typer.Typer(add_completion=False, help="Control a Denon receiver over the network.")


def setup_logging(verbose=False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[RichHandler(rich_tracebacks=True)])
    return logging.getLogger("denoncontrol")


def clamp_volume(volume, limit=None):
    """
    >>> clamp_volume(127)
    50
    >>> clamp_volume(30)
    30
    """
    limit = max_volume if limit is None else limit
    if volume > limit:
        logger.info("volume %d limited to %d" % (volume, limit))
        return limit
    return volume


def receiver_endpoint(address, discovery) -> ReceiverEndpoint:
    """ the endpoint given by address, or found by discovery when there is no address. """
    endpoint = ReceiverEndpoint.parse(address) if address else ReceiverEndpoint(discovery())
    typer.echo("using receiver: %s" % endpoint.key())
    return endpoint


def format_status(connection: Connection) -> str:
    lines = ["Current status of receiver:\n"]
    for kind in StatusKind:
        lines.append("\t%s(%s)\n" % (kind.display_name, connection.get(kind)))
    return "".join(lines)


def apply_settings(connection: Connection, power=None, source_input=None, volume=None):
    """ sends the settings that are given, in the order power, input, volume. """
    if power is not None:
        connection.set(StatusKind.POWER, power)
    if source_input is not None:
        connection.set(StatusKind.SOURCE_INPUT, source_input)
    if volume is not None:
        connection.set(StatusKind.MAIN_VOLUME, clamp_volume(volume))


def parse_option(kind, text):
    try:
        return codec.parse_state(kind, text) if text is not None else None
    except ValidationError as e:
        raise typer.BadParameter(str(e))


@app.command()
def main(
    address: Optional[str] = typer.Option(None, "--address", "-a", metavar="HOSTNAME[:PORT]",
                                          help="Address of the receiver, with optional port (default: 23)"),
    power: Optional[str] = typer.Option(None, "--power", "-p", metavar="POWER_MODE", help="Power ON or STANDBY"),
    volume: Optional[int] = typer.Option(None, "--volume", "-v", min=0,
                                         help="Set the main volume, at most %d" % max_volume),
    source_input: Optional[str] = typer.Option(None, "--input", "-i", metavar="SOURCE_INPUT",
                                               help="Set the source input, e.g. DVD, GAME2, NET/USB"),
    extern_avahi: bool = typer.Option(False, "--extern-avahi", "-e",
                                      help="Use avahi-browse to find the receiver instead of the zeroconf library"),
    status: bool = typer.Option(False, "--status", "-s", help="Print the status of the receiver"),
    verbose: bool = typer.Option(False, "--verbose", help="Log the commands sent and the status received"),
):
    setup_logging(verbose)
    power_state = parse_option(StatusKind.POWER, power)
    input_state = parse_option(StatusKind.SOURCE_INPUT, source_input)
    discovery = AvahiBrowseDiscovery() if extern_avahi else ZeroconfDiscovery()
    try:
        endpoint = receiver_endpoint(address, discovery)
        conduit = SocketConnector(endpoint).connect()
        if verbose:
            conduit = LoggingConduit(conduit, logger)
        with connect(conduit) as connection:
            if status:
                typer.echo(format_status(connection), nl=False)
            apply_settings(connection, power_state, input_state, volume)
    except DenonControlError as e:
        typer.echo("Error: %s" % e, err=True)
        raise typer.Exit(code=1)


if __name__ == '__main__':
    app()
