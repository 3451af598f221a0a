"""
Converts between the receiver's line protocol and typed status values.

Each line starts with a prefix naming the status kind, followed by the value:
    PWON  PWSTANDBY  SICD  SINET/USB  MV50  MVMAX 86
Queries are the prefix followed by '?'. All lines end with a carriage return.
"""
import re
from enum import Enum

from denoncontrol.errors import ValidationError

DELIMITER = b'\r'

MAX_VOLUME_CODE = 999

_digits = re.compile(r"[0-9]+\Z")


def tobytes(arg):
    """
    Converts a string to bytes
    >>> tobytes("abc")
    b'abc'
    >>> tobytes(b"abc")
    b'abc'
    """
    if isinstance(arg, type("")):
        # noinspection PyArgumentList
        arg = bytes(arg, encoding='ascii')
    return arg


class StatusKind(Enum):
    """ The kinds of receiver status. The value is the wire prefix. """
    POWER = 'PW'
    SOURCE_INPUT = 'SI'
    MAIN_VOLUME = 'MV'
    MAX_VOLUME = 'MVMAX'

    @property
    def display_name(self):
        return _display_names[self]

    def __str__(self):
        return self.value


_display_names = {
    StatusKind.POWER: 'Power',
    StatusKind.SOURCE_INPUT: 'SourceInput',
    StatusKind.MAIN_VOLUME: 'MainVolume',
    StatusKind.MAX_VOLUME: 'MaxVolume',
}


class PowerState(Enum):
    ON = 'ON'
    STANDBY = 'STANDBY'

    def __str__(self):
        return self.value


class SourceInput(Enum):
    """ The source inputs of the receiver. UNKNOWN stands for any name the receiver reports that is not listed. """
    PHONO = 'PHONO'
    CD = 'CD'
    TUNER = 'TUNER'
    DVD = 'DVD'
    BD = 'BD'
    TV = 'TV'
    SAT_CBL = 'SAT/CBL'
    GAME = 'GAME'
    GAME2 = 'GAME2'
    V_AUX = 'V.AUX'
    DOCK = 'DOCK'
    IPOD = 'IPOD'
    NET_USB = 'NET/USB'
    RHAPSODY = 'RHAPSODY'
    NAPSTER = 'NAPSTER'
    PANDORA = 'PANDORA'
    LASTFM = 'LASTFM'
    FLICKR = 'FLICKR'
    FAVORITES = 'FAVORITES'
    IRADIO = 'IRADIO'
    SERVER = 'SERVER'
    USB_IPOD = 'USB/IPOD'
    UNKNOWN = 'UNKNOWN'

    def __str__(self):
        return self.value


# tested in this order so the longer MVMAX prefix is not mistaken for MV
_decode_order = sorted(StatusKind, key=lambda kind: len(kind.value), reverse=True)


def parse_volume(text):
    """
    Parses a volume code. Codes below 100 carry an implied decimal digit.
    >>> parse_volume('23')
    230
    >>> parse_volume('100')
    100
    >>> parse_volume('x') is None
    True
    """
    if not _digits.match(text):
        return None
    value = int(text)
    if value < 100:
        value *= 10
    return value


def parse_power(text):
    try:
        return PowerState(text)
    except ValueError:
        return None


def parse_source_input(text):
    if not text:
        return None
    try:
        return SourceInput(text)
    except ValueError:
        return SourceInput.UNKNOWN


_parsers = {
    StatusKind.POWER: parse_power,
    StatusKind.SOURCE_INPUT: parse_source_input,
    StatusKind.MAIN_VOLUME: parse_volume,
    StatusKind.MAX_VOLUME: parse_volume,
}


def decode(line: str):
    """
    Decodes a status line into a (kind, value) tuple.
    :return: the decoded tuple, or None if the line is not a recognised status.
    >>> decode('MVMAX 86')
    (<StatusKind.MAX_VOLUME: 'MVMAX'>, 860)
    >>> decode('GARBAGE') is None
    True
    """
    trimmed = line.strip().strip('\r')
    for kind in _decode_order:
        if trimmed.startswith(kind.value):
            value = _parsers[kind](trimmed[len(kind.value):].strip())
            return None if value is None else (kind, value)
    return None


def encode_query(kind: StatusKind) -> str:
    """
    >>> encode_query(StatusKind.MAX_VOLUME)
    'MVMAX?\\r'
    """
    return kind.value + '?' + DELIMITER.decode()


def encode_command(kind: StatusKind, value) -> str:
    """
    Renders a command setting the kind to value. Volumes are sent as given, without scaling.
    >>> encode_command(StatusKind.POWER, PowerState.ON)
    'PWON\\r'
    >>> encode_command(StatusKind.MAIN_VOLUME, 50)
    'MV50\\r'
    """
    return kind.value + str(value) + DELIMITER.decode()


_states = {
    StatusKind.POWER: [p for p in PowerState],
    StatusKind.SOURCE_INPUT: [s for s in SourceInput if s is not SourceInput.UNKNOWN],
}


def _is_volume(kind):
    return kind in (StatusKind.MAIN_VOLUME, StatusKind.MAX_VOLUME)


def states(kind: StatusKind):
    """ the values that can be set for an enumerated kind. """
    return list(_states[kind])


def parse_state(kind: StatusKind, text: str):
    """
    Maps a name entered by a user to the value for the given kind. Names are matched
    without regard to case.
    :raises ValidationError: when the name is not a value of the kind.
    >>> parse_state(StatusKind.POWER, 'standby')
    <PowerState.STANDBY: 'STANDBY'>
    """
    text = text.strip()
    if _is_volume(kind):
        if not _digits.match(text):
            raise ValidationError("%s must be a non-negative number, not '%s'" % (kind.display_name, text))
        return validate(kind, int(text))
    for state in _states[kind]:
        if state.value == text.upper():
            return state
    raise ValidationError("'%s' is not a valid %s, use one of: %s" %
                          (text, kind.display_name, ", ".join(s.value for s in _states[kind])))


def validate(kind: StatusKind, value):
    """
    Checks that value can be sent for the kind.
    :return: the value
    :raises ValidationError: when the value is outside the kind's domain.
    """
    if _is_volume(kind):
        valid = isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_VOLUME_CODE
    else:
        valid = value in _states[kind]
    if not valid:
        raise ValidationError("%r is not a valid value for %s" % (value, kind.display_name))
    return value
