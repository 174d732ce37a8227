"""
Tracking flags: which channel 2 parameters follow channel 1.

The device takes five comma separated bits (``:w54=1,0,1,0,0.``). Users can
write the same set as digits (``"10100"`` or ``"1,0,1"``), as feature names
(``"freq,amp"``), or as single letters (``"fa"``).
"""

from enum import IntFlag

from .errors import RangeViolation, UnsupportedValue
from .protocol import ARG_SEP


class Tracking(IntFlag):
    NONE = 0
    FREQUENCY = 1
    WAVEFORM = 2
    AMPLITUDE = 4
    DUTYCYCLE = 8
    OFFSET = 16


FEATURES = [
    (Tracking.FREQUENCY, "frequency"),
    (Tracking.WAVEFORM, "waveform"),
    (Tracking.AMPLITUDE, "amplitude"),
    (Tracking.DUTYCYCLE, "dutycycle"),
    (Tracking.OFFSET, "offset"),
]
BIT_COUNT = len(FEATURES)

# Case-sensitive names accepted for each feature
ALIASES = {
    "none": Tracking.NONE, "null": Tracking.NONE, "non": Tracking.NONE,
    "nil": Tracking.NONE, "no": Tracking.NONE, "n": Tracking.NONE,
    "frequency": Tracking.FREQUENCY, "freq": Tracking.FREQUENCY, "fq": Tracking.FREQUENCY,
    "fr": Tracking.FREQUENCY, "f": Tracking.FREQUENCY,
    "waveform": Tracking.WAVEFORM, "wave": Tracking.WAVEFORM, "wav": Tracking.WAVEFORM,
    "wv": Tracking.WAVEFORM, "w": Tracking.WAVEFORM,
    "amplitude": Tracking.AMPLITUDE, "ampli": Tracking.AMPLITUDE, "amp": Tracking.AMPLITUDE,
    "am": Tracking.AMPLITUDE, "a": Tracking.AMPLITUDE,
    "dutycycle": Tracking.DUTYCYCLE, "duty": Tracking.DUTYCYCLE, "dc": Tracking.DUTYCYCLE,
    "du": Tracking.DUTYCYCLE, "d": Tracking.DUTYCYCLE,
    "offset": Tracking.OFFSET, "off": Tracking.OFFSET, "os": Tracking.OFFSET,
    "ot": Tracking.OFFSET, "o": Tracking.OFFSET,
}


def from_bits(bits: int) -> Tracking:
    """Build a flag set from an integer, rejecting anything wider than five bits."""
    if bits < 0 or bits >= 1 << BIT_COUNT:
        raise RangeViolation(f"tracking value out of range: {bits} (0-{(1 << BIT_COUNT) - 1})")
    return Tracking(bits)


def encode(flags: Tracking) -> str:
    """Render flags as the wire argument, e.g. ``"1,0,1,0,0"``."""
    return ARG_SEP.join(_bits(flags))


def to_digits(flags: Tracking) -> str:
    """Render flags as a compact digit string, e.g. ``"10100"``."""
    return "".join(_bits(flags))


def to_names(flags: Tracking) -> str:
    """Render flags as feature names, e.g. ``"frequency, amplitude"``."""
    names = [name for flag, name in FEATURES if flags & flag]
    return ", ".join(names) if names else "none"


def _bits(flags):
    return ["1" if flags & flag else "0" for flag, _ in FEATURES]


def parse_digits(text: str) -> Tracking:
    """
    Parse a digit string such as ``"10100"`` or ``"1,0,1"``.

    The first digit is the frequency bit.

    Raises:
        UnsupportedValue: A digit other than 0 or 1
        RangeViolation: More than five digits
    """
    digits = text.replace(ARG_SEP, "")
    if len(digits) > BIT_COUNT:
        raise RangeViolation(f"too many tracking digits ({len(digits)}, {BIT_COUNT} max): {text}")

    flags = Tracking.NONE
    for position, digit in enumerate(digits):
        if digit == "1":
            flags |= FEATURES[position][0]
        elif digit != "0":
            raise UnsupportedValue(f"tracking digits must be 0 or 1: {text}")
    return flags


def parse_letters(token: str) -> Tracking:
    """
    Parse concatenated single-letter codes such as ``"fa"``.

    Raises:
        UnsupportedValue: If any character is not a known code
    """
    flags = Tracking.NONE
    for char in token:
        if char not in ALIASES:
            raise UnsupportedValue(f"unknown tracking code {char!r} in {token!r}")
        flags |= ALIASES[char]
    return flags


def parse_aliases(text: str) -> Tracking:
    """
    Parse a comma separated list of feature names.

    Tokens are trimmed; those missing from the alias table are read as
    single-letter codes.

    Raises:
        RangeViolation: More than five tokens
        UnsupportedValue: A token that is neither a name nor letter codes
    """
    tokens = text.split(ARG_SEP)
    if len(tokens) > BIT_COUNT:
        raise RangeViolation(f"too many tracking features ({len(tokens)}, {BIT_COUNT} max): {text}")

    flags = Tracking.NONE
    for token in tokens:
        token = token.strip()
        if token in ALIASES:
            flags |= ALIASES[token]
        else:
            flags |= parse_letters(token)
    return flags


def decode(text: str) -> Tracking:
    """
    Parse any accepted tracking form.

    Digit strings are tried first, then names, then letter codes.
    An empty string is no tracking.
    """
    text = text.strip()
    if not text:
        return Tracking.NONE
    digits = text.replace(ARG_SEP, "")
    if digits and digits.isdigit():
        return parse_digits(text)
    return parse_aliases(text)


def coerce(flags) -> Tracking:
    """Accept a ``Tracking`` set, an int bitmask or any text form."""
    if isinstance(flags, str):
        return decode(flags)
    return from_bits(int(flags))
