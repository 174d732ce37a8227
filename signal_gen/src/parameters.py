"""
Parameter validation for CJDS66 commands.

Each numeric argument the device accepts is described by a ``ParameterDomain``
in ``DOMAINS``. ``validate`` turns user input into the integer the device
expects on the wire, or raises one of the validation errors.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidChannel, ParseFailure, PrecisionExceeded, RangeViolation, UnsupportedValue
from .protocol import ARBITRARY_SLOTS

Amount = Union[str, int, float]


@dataclass(frozen=True)
class ParameterDomain:
    """
    Validation and scaling rules for one numeric parameter.

    The wire value is ``round(round((bias + amount * scale) * inner) / inner)``
    with half-away-from-zero rounding. An ``inner`` of 1 is a single rounding.

    Attributes:
        name: Human readable name used in error messages
        minimum: Smallest accepted value (user units)
        maximum: Largest accepted value (user units)
        decimals: Maximum digits after the decimal point
        scale: Multiplier from user units to wire units
        bias: Added after scaling
        inner: Inner rounding factor
        step: If set, the value must be a multiple of it
        zero_fraction: Also accept a fractional part of exactly "0" (``"5.0"``)
    """

    name: str
    minimum: float
    maximum: float
    decimals: int
    scale: float = 1
    bias: float = 0
    inner: float = 1
    step: Optional[int] = None
    zero_fraction: bool = False

    def to_wire(self, value: float) -> int:
        scaled = round_half_away((self.bias + value * self.scale) * self.inner)
        return round_half_away(scaled / self.inner)

    def from_wire(self, wire: float) -> float:
        return (wire - self.bias) / self.scale


DOMAINS = {
    "frequency_uhz": ParameterDomain("frequency (uHz)", 0.01, 80_000_000.0, 2, 100),
    "frequency_millihz": ParameterDomain("frequency (mHz)", 0.01, 80_000_000.0, 2, 100),
    "frequency_hz": ParameterDomain("frequency (Hz)", 0.01, 60_000_000.0, 2, 100),
    "frequency_khz": ParameterDomain("frequency (kHz)", 0.00001, 60_000.0, 5, 1e5, inner=1e5),
    "frequency_megahz": ParameterDomain("frequency (MHz)", 0.00000001, 60.0, 8, 1e8, inner=1e7),
    "amplitude": ParameterDomain("amplitude (V)", 0.0, 20.0, 3, 1000, inner=1000),
    "duty_cycle": ParameterDomain("duty cycle (%)", 0.0, 99.9, 1, 10, inner=10),
    "offset": ParameterDomain("voltage offset (V)", -9.99, 9.99, 2, 100, bias=1000, inner=100),
    "phase": ParameterDomain("phase (degrees)", 0.0, 360.0, 1, 10, inner=10),
    "gate_time": ParameterDomain("measurement gate time (s)", 0.01, 10.0, 2, 100, inner=100),
    "burst_count": ParameterDomain("burst pulse count", 1, 1_048_575, 0, zero_fraction=True),
    "sweep_frequency": ParameterDomain("sweep frequency (Hz)", 0.01, 60_000_000.0, 2, 100, inner=10),
    "sweep_time": ParameterDomain("sweep time (s)", 0.1, 999.9, 1, 10),
    "pulse_time_ns": ParameterDomain("pulse time (ns)", 25, 4_000_000_000, 0, step=5),
    "pulse_time_us": ParameterDomain("pulse time (us)", 1, 4_000_000_000, 0),
    "pulse_offset": ParameterDomain("pulse offset (%)", 0, 100, 0),
    "pulse_amplitude": ParameterDomain("pulse amplitude (V)", 0.0, 10.0, 2, 100, inner=100),
    "preset": ParameterDomain("preset number", 0, 99, 0),
    "arbitrary_slot": ParameterDomain("arbitrary wave slot", 1, ARBITRARY_SLOTS, 0),
}


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def parse_amount(amount: Amount) -> float:
    """
    Parse user input as a finite number.

    Raises:
        ParseFailure: If the input is not a finite number
    """
    if isinstance(amount, bool):
        raise ParseFailure(f"not a number: {amount!r}")
    try:
        value = float(str(amount).strip())
    except ValueError:
        raise ParseFailure(f"not a number: {amount!r}") from None
    if not math.isfinite(value):
        raise ParseFailure(f"not a finite number: {amount!r}")
    return value


def decimal_places(amount: Amount) -> int:
    """Count the characters after the decimal point of the input text."""
    text = str(amount).strip()
    if "." not in text:
        return 0
    return len(text.split(".", 1)[1])


def _check_precision(amount, value, domain):
    # Text is counted by characters, numbers by value against the domain decimals
    if isinstance(amount, str):
        text = amount.strip()
        if domain.zero_fraction and text.split(".", 1)[1:] == ["0"]:
            return
        places = decimal_places(text)
        if places <= domain.decimals:
            return
    else:
        if abs(value - round(value, domain.decimals)) < 10 ** -(domain.decimals + 3):
            return
        places = decimal_places(repr(value))
    raise PrecisionExceeded(
        f"{domain.name}: {amount}: too many decimal places "
        f"({places}, {domain.decimals} max)"
    )


def validate(amount: Amount, domain: Union[str, ParameterDomain]) -> int:
    """
    Validate an amount against a domain and convert it to wire units.

    Args:
        amount: User value, as text or a number
        domain: A ``ParameterDomain`` or its key in ``DOMAINS``

    Returns:
        The integer wire value

    Raises:
        ParseFailure: Not a number
        PrecisionExceeded: Too many decimal places
        RangeViolation: Outside the domain bounds
        UnsupportedValue: Not a multiple of the domain step
    """
    if isinstance(domain, str):
        domain = DOMAINS[domain]

    value = parse_amount(amount)

    _check_precision(amount, value, domain)

    if not domain.minimum <= value <= domain.maximum:
        raise RangeViolation(
            f"{domain.name}: {amount}: must be {domain.minimum:g}-{domain.maximum:g}"
        )

    if domain.step and value % domain.step != 0:
        raise UnsupportedValue(f"{domain.name}: {amount}: must be a multiple of {domain.step}")

    return domain.to_wire(value)


def validate_channel(channel) -> int:
    """
    Validate a channel selector.

    Args:
        channel: 1 or 2, as an int or digit string

    Returns:
        The channel as an int

    Raises:
        InvalidChannel: If the channel is anything else
    """
    if isinstance(channel, bool):
        raise InvalidChannel(f"Channel must be 1 or 2, got {channel!r}")
    if isinstance(channel, str) and channel.strip() in ("1", "2"):
        return int(channel)
    if isinstance(channel, int) and channel in (1, 2):
        return channel
    raise InvalidChannel(f"Channel must be 1 or 2, got {channel!r}")


def lookup(value: str, table: dict, what: str):
    """
    Look up a name in one of the closed value tables.

    Raises:
        UnsupportedValue: If the name is not in the table
    """
    key = str(value).strip()
    if key not in table:
        raise UnsupportedValue(f"unsupported {what}: {value!r} (valid: {', '.join(table)})")
    return table[key]
