import pytest

from signal_gen.src import tracking
from signal_gen.src.errors import RangeViolation, UnsupportedValue
from signal_gen.src.tracking import Tracking


@pytest.mark.parametrize("bits", range(32))
def test_every_flag_set_survives_each_text_form(bits):
    flags = tracking.from_bits(bits)
    assert tracking.decode(tracking.encode(flags)) == flags
    assert tracking.decode(tracking.to_digits(flags)) == flags


def test_encode():
    assert tracking.encode(Tracking.NONE) == "0,0,0,0,0"
    assert tracking.encode(Tracking.FREQUENCY | Tracking.AMPLITUDE) == "1,0,1,0,0"
    assert tracking.encode(Tracking.OFFSET) == "0,0,0,0,1"
    assert tracking.to_digits(Tracking.WAVEFORM | Tracking.DUTYCYCLE) == "01010"


def test_names_and_letters_agree():
    assert tracking.decode("freq,amp") == tracking.decode("fa")
    assert tracking.decode("frequency,waveform,amplitude,dutycycle,offset") == tracking.decode("fwado")
    assert tracking.decode("fwado") == tracking.from_bits(31)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("10100", Tracking.FREQUENCY | Tracking.AMPLITUDE),
        ("1,0,1", Tracking.FREQUENCY | Tracking.AMPLITUDE),
        ("1", Tracking.FREQUENCY),
        ("00001", Tracking.OFFSET),
        ("0", Tracking.NONE),
    ],
)
def test_digit_forms(text, expected):
    assert tracking.decode(text) == expected


@pytest.mark.parametrize("text", ["none", "null", "non", "nil", "no", "n", "", "  "])
def test_no_tracking(text):
    assert tracking.decode(text) == Tracking.NONE


def test_whole_names_take_precedence_over_letters():
    # "dc" is the duty cycle name, not "d" followed by "c"
    assert tracking.decode("dc") == Tracking.DUTYCYCLE
    assert tracking.decode("off") == Tracking.OFFSET
    assert tracking.decode("am,os") == Tracking.AMPLITUDE | Tracking.OFFSET


def test_spaces_around_names_are_ignored():
    assert tracking.decode("freq, amp") == Tracking.FREQUENCY | Tracking.AMPLITUDE
    assert tracking.decode("f, a") == Tracking.FREQUENCY | Tracking.AMPLITUDE
    assert tracking.decode(" wave ,  offset ") == Tracking.WAVEFORM | Tracking.OFFSET


def test_mixed_names_and_letters():
    assert tracking.decode("freq,wo") == Tracking.FREQUENCY | Tracking.WAVEFORM | Tracking.OFFSET


@pytest.mark.parametrize(
    "text,error",
    [
        ("102", UnsupportedValue),
        ("110011", RangeViolation),
        ("1,1,0,0,1,1", RangeViolation),
        ("f,w,a,d,o,n", RangeViolation),
        ("fx", UnsupportedValue),
        ("Freq", UnsupportedValue),
        ("frequency,bogus", UnsupportedValue),
    ],
)
def test_rejected_text(text, error):
    with pytest.raises(error):
        tracking.decode(text)


def test_to_names():
    assert tracking.to_names(Tracking.NONE) == "none"
    assert tracking.to_names(Tracking.FREQUENCY | Tracking.OFFSET) == "frequency, offset"


def test_from_bits_bounds():
    assert tracking.from_bits(0) == Tracking.NONE
    assert tracking.from_bits(31) == Tracking(31)
    with pytest.raises(RangeViolation):
        tracking.from_bits(32)
    with pytest.raises(RangeViolation):
        tracking.from_bits(-1)


def test_parsers_on_their_own():
    assert tracking.parse_digits("11") == Tracking.FREQUENCY | Tracking.WAVEFORM
    assert tracking.parse_letters("da") == Tracking.DUTYCYCLE | Tracking.AMPLITUDE
    assert tracking.parse_aliases("wave,duty") == Tracking.WAVEFORM | Tracking.DUTYCYCLE
    with pytest.raises(UnsupportedValue):
        tracking.parse_letters("z")


def test_coerce():
    assert tracking.coerce(Tracking.AMPLITUDE) == Tracking.AMPLITUDE
    assert tracking.coerce(5) == Tracking.FREQUENCY | Tracking.AMPLITUDE
    assert tracking.coerce("fa") == Tracking.FREQUENCY | Tracking.AMPLITUDE
    with pytest.raises(RangeViolation):
        tracking.coerce(64)
