import unittest

from hamcrest import assert_that, calling, contains_string, equal_to, is_, none, raises

from denoncontrol.errors import ValidationError
from denoncontrol.protocol.codec import PowerState, SourceInput, StatusKind, decode, encode_command, encode_query, \
    parse_state, states, tobytes, validate


class DecodeTest(unittest.TestCase):

    def test_unknown_lines(self):
        assert_that(decode(""), is_(none()))
        assert_that(decode("blub"), is_(none()))
        assert_that(decode("GARBAGE\r"), is_(none()))

    def test_max_volume_without_value(self):
        for line in ("MVMAX", "MVMAXfda", "MVMAXđðſæ", "MVMAX&%", "MVMAX!", "MVMAXxyz\r"):
            assert_that(decode(line), is_(none()), line)

    def test_max_volume(self):
        assert_that(decode("MVMAX0"), is_((StatusKind.MAX_VOLUME, 0)))
        assert_that(decode("MVMAX23"), is_((StatusKind.MAX_VOLUME, 230)))
        assert_that(decode("MVMAX99"), is_((StatusKind.MAX_VOLUME, 990)))
        assert_that(decode("MVMAX100"), is_((StatusKind.MAX_VOLUME, 100)))
        assert_that(decode("MVMAX230"), is_((StatusKind.MAX_VOLUME, 230)))
        assert_that(decode("MVMAX999"), is_((StatusKind.MAX_VOLUME, 999)))
        assert_that(decode("MVMAX 86"), is_((StatusKind.MAX_VOLUME, 860)))

    def test_main_volume_without_value(self):
        for line in ("MV", "MV\r", "MVŧ¶ŋđ", "MV»«", "MV²!", "MV²"):
            assert_that(decode(line), is_(none()), line)

    def test_main_volume(self):
        assert_that(decode("MV0"), is_((StatusKind.MAIN_VOLUME, 0)))
        assert_that(decode("MV23"), is_((StatusKind.MAIN_VOLUME, 230)))
        assert_that(decode("MV99"), is_((StatusKind.MAIN_VOLUME, 990)))
        assert_that(decode("MV100"), is_((StatusKind.MAIN_VOLUME, 100)))
        assert_that(decode("MV999"), is_((StatusKind.MAIN_VOLUME, 999)))
        assert_that(decode("MV 230"), is_((StatusKind.MAIN_VOLUME, 230)))
        assert_that(decode(" MV53\r"), is_((StatusKind.MAIN_VOLUME, 530)))

    def test_power(self):
        assert_that(decode("PW"), is_(none()))
        assert_that(decode("PWđðæſ"), is_(none()))
        assert_that(decode("PWfdasfdas"), is_(none()))
        assert_that(decode("PWOFF"), is_(none()))
        assert_that(decode("PWSTANDBY"), is_((StatusKind.POWER, PowerState.STANDBY)))
        assert_that(decode("PWON\r"), is_((StatusKind.POWER, PowerState.ON)))

    def test_source_input(self):
        assert_that(decode("SI"), is_(none()))
        assert_that(decode("SITV"), is_((StatusKind.SOURCE_INPUT, SourceInput.TV)))
        assert_that(decode("SINET/USB"), is_((StatusKind.SOURCE_INPUT, SourceInput.NET_USB)))
        assert_that(decode("SIV.AUX"), is_((StatusKind.SOURCE_INPUT, SourceInput.V_AUX)))

    def test_unlisted_source_input_is_unknown(self):
        assert_that(decode("SIblub"), is_((StatusKind.SOURCE_INPUT, SourceInput.UNKNOWN)))
        assert_that(decode("SIcd"), is_((StatusKind.SOURCE_INPUT, SourceInput.UNKNOWN)))


class EncodeTest(unittest.TestCase):

    def test_queries(self):
        assert_that(encode_query(StatusKind.POWER), is_("PW?\r"))
        assert_that(encode_query(StatusKind.SOURCE_INPUT), is_("SI?\r"))
        assert_that(encode_query(StatusKind.MAIN_VOLUME), is_("MV?\r"))
        assert_that(encode_query(StatusKind.MAX_VOLUME), is_("MVMAX?\r"))

    def test_commands(self):
        assert_that(encode_command(StatusKind.POWER, PowerState.STANDBY), is_("PWSTANDBY\r"))
        assert_that(encode_command(StatusKind.SOURCE_INPUT, SourceInput.CD), is_("SICD\r"))
        assert_that(encode_command(StatusKind.SOURCE_INPUT, SourceInput.SAT_CBL), is_("SISAT/CBL\r"))
        assert_that(encode_command(StatusKind.MAIN_VOLUME, 50), is_("MV50\r"))

    def test_commands_decode_to_the_same_status(self):
        for kind, value in [(StatusKind.POWER, PowerState.ON), (StatusKind.POWER, PowerState.STANDBY),
                            (StatusKind.MAIN_VOLUME, 230), (StatusKind.MAX_VOLUME, 666)]:
            line = encode_command(kind, value).rstrip("\r")
            assert_that(decode(line), is_(equal_to((kind, value))), line)
        for source_input in states(StatusKind.SOURCE_INPUT):
            line = encode_command(StatusKind.SOURCE_INPUT, source_input)
            assert_that(decode(line), is_((StatusKind.SOURCE_INPUT, source_input)))

    def test_tobytes(self):
        assert_that(tobytes("PW?\r"), is_(b"PW?\r"))
        assert_that(tobytes(b"PW?\r"), is_(b"PW?\r"))

    def test_display_names(self):
        assert_that([k.display_name for k in StatusKind], is_(['Power', 'SourceInput', 'MainVolume', 'MaxVolume']))
        assert_that(str(SourceInput.NET_USB), is_('NET/USB'))
        assert_that(str(PowerState.ON), is_('ON'))


class ParseStateTest(unittest.TestCase):

    def test_power_names(self):
        assert_that(parse_state(StatusKind.POWER, "ON"), is_(PowerState.ON))
        assert_that(parse_state(StatusKind.POWER, "standby"), is_(PowerState.STANDBY))

    def test_power_off_is_rejected(self):
        assert_that(calling(parse_state).with_args(StatusKind.POWER, "OFF"),
                    raises(ValidationError, "'OFF' is not a valid Power, use one of: ON, STANDBY"))

    def test_source_input_names(self):
        assert_that(parse_state(StatusKind.SOURCE_INPUT, "DVD"), is_(SourceInput.DVD))
        assert_that(parse_state(StatusKind.SOURCE_INPUT, "net/usb"), is_(SourceInput.NET_USB))
        assert_that(parse_state(StatusKind.SOURCE_INPUT, " game2 "), is_(SourceInput.GAME2))

    def test_unknown_source_input_cannot_be_set(self):
        assert_that(calling(parse_state).with_args(StatusKind.SOURCE_INPUT, "UNKNOWN"), raises(ValidationError))
        assert_that(calling(parse_state).with_args(StatusKind.SOURCE_INPUT, "blub"), raises(ValidationError))

    def test_volume(self):
        assert_that(parse_state(StatusKind.MAIN_VOLUME, "42"), is_(42))
        assert_that(calling(parse_state).with_args(StatusKind.MAIN_VOLUME, "-1"),
                    raises(ValidationError, "non-negative"))
        assert_that(calling(parse_state).with_args(StatusKind.MAIN_VOLUME, "loud"), raises(ValidationError))

    def test_validation_error_is_a_value_error(self):
        assert_that(calling(parse_state).with_args(StatusKind.POWER, "OFF"), raises(ValueError))


class ValidateTest(unittest.TestCase):

    def test_valid_values(self):
        assert_that(validate(StatusKind.POWER, PowerState.ON), is_(PowerState.ON))
        assert_that(validate(StatusKind.SOURCE_INPUT, SourceInput.CD), is_(SourceInput.CD))
        assert_that(validate(StatusKind.MAIN_VOLUME, 0), is_(0))
        assert_that(validate(StatusKind.MAX_VOLUME, 999), is_(999))

    def test_invalid_values(self):
        for kind, value in [(StatusKind.POWER, "ON"), (StatusKind.POWER, SourceInput.CD),
                            (StatusKind.SOURCE_INPUT, SourceInput.UNKNOWN), (StatusKind.SOURCE_INPUT, "CD"),
                            (StatusKind.MAIN_VOLUME, -1), (StatusKind.MAIN_VOLUME, 1000),
                            (StatusKind.MAIN_VOLUME, "50"), (StatusKind.MAIN_VOLUME, True),
                            (StatusKind.MAIN_VOLUME, 5.5)]:
            assert_that(calling(validate).with_args(kind, value), raises(ValidationError))

    def test_message_names_the_kind(self):
        try:
            validate(StatusKind.MAIN_VOLUME, 1000)
            self.fail("expected ValidationError")
        except ValidationError as e:
            assert_that(str(e), contains_string("MainVolume"))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
