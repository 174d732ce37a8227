"""
Command encoders for the CJDS66.

Every function validates its arguments and returns a ``Command`` holding the
exact text to send and how many bytes of response to read. Nothing here
touches the transport.
"""

from typing import NamedTuple, Optional, Sequence, Tuple, Union

from . import tracking
from .errors import UnsupportedValue
from .parameters import Amount, lookup, validate, validate_channel
from .protocol import (
    ARBITRARY_PRESET_BASE,
    ARG_SEP,
    BEGIN,
    BURST_MODES,
    CHANNEL_OUTPUT,
    COUPLING,
    END,
    EXTENDED_FUNCTIONS,
    FREQUENCY_UNIT_ALIASES,
    FREQUENCY_UNITS,
    MEASUREMENT_MODES,
    OPERATIONS,
    PANELS,
    PULSE_UNITS,
    SEP,
    SWEEP_DIRECTIONS,
    SWEEP_MODES,
    WAVEFORM_ALIASES,
    WAVEFORM_NAMES,
    Operation,
)
from .waveform import parse_samples


class Command(NamedTuple):
    operation: Operation
    text: str
    response_length: int

    @property
    def payload(self) -> bytes:
        return self.text.encode("ascii")


def encode(operation: Operation, *args, channel: Optional[int] = None,
           slot: Optional[int] = None) -> Command:
    """
    Frame already validated wire arguments into a command.

    Args:
        operation: The operation to encode
        *args: Wire arguments, joined with commas
        channel: Channel for per-channel operations
        slot: Arbitrary wave slot, for wave transfers

    Returns:
        Command ready to send
    """
    spec = OPERATIONS[operation]
    if len(args) != spec.arity:
        raise ValueError(f"{operation.value} takes {spec.arity} argument(s), got {len(args)}")

    if slot is not None:
        opcode = f"{slot:02d}"
    elif spec.per_channel:
        opcode = spec.opcodes[validate_channel(channel) - 1]
    else:
        opcode = spec.opcodes[0]

    body = ARG_SEP.join(str(arg) for arg in args)
    return Command(operation, f"{BEGIN}{spec.mode}{opcode}{SEP}{body}{END}", spec.response_length)


def _read(operation, channel=None, arg=0):
    return encode(operation, arg, channel=channel)


# ============================================================================
# DEVICE INFO
# ============================================================================

def read_model() -> Command:
    return _read(Operation.READ_MODEL)


def read_serial() -> Command:
    return _read(Operation.READ_SERIAL)


def read_model_and_serial() -> Command:
    return _read(Operation.READ_MODEL_AND_SERIAL, arg=1)


# ============================================================================
# CHANNEL OUTPUT / WAVEFORM
# ============================================================================

def set_channel_output(state: Union[str, Tuple[bool, bool]]) -> Command:
    """
    Turn the channel outputs on or off.

    Args:
        state: An alias such as ``"on"``, ``"10"`` or ``"off,on"``, or a
            ``(ch1, ch2)`` pair of booleans
    """
    if isinstance(state, tuple) and len(state) == 2:
        ch1, ch2 = ("1" if on else "0" for on in state)
    else:
        ch1, ch2 = lookup(state, CHANNEL_OUTPUT, "channel output state")
    return encode(Operation.SET_CHANNEL_OUTPUT, ch1, ch2)


def get_channel_output() -> Command:
    return _read(Operation.GET_CHANNEL_OUTPUT)


def waveform_code(preset: Union[str, int]) -> int:
    """Resolve a built-in waveform preset given by number or name."""
    key = str(preset).strip().lower()
    if key.isdigit() and int(key) < len(WAVEFORM_NAMES):
        return int(key)
    if key in WAVEFORM_ALIASES:
        return WAVEFORM_ALIASES[key]
    raise UnsupportedValue(
        f"unsupported waveform preset: {preset!r} "
        f"(0-{len(WAVEFORM_NAMES) - 1} or one of: {', '.join(WAVEFORM_NAMES)})"
    )


def set_waveform(channel: int, preset: Union[str, int]) -> Command:
    """Select a built-in waveform preset on a channel."""
    channel = validate_channel(channel)
    return encode(Operation.SET_WAVEFORM, waveform_code(preset), channel=channel)


def set_arbitrary_preset(channel: int, slot: Amount) -> Command:
    """Select arbitrary wave slot 1-60 as the waveform of a channel."""
    channel = validate_channel(channel)
    slot = validate(slot, "arbitrary_slot")
    return encode(Operation.SET_WAVEFORM, ARBITRARY_PRESET_BASE + slot, channel=channel)


def get_waveform(channel: int) -> Command:
    return _read(Operation.GET_WAVEFORM, validate_channel(channel))


# ============================================================================
# CHANNEL PARAMETERS
# ============================================================================

def frequency_unit(unit: str) -> Tuple[str, str]:
    """Resolve a frequency unit name to its (unit code, domain name)."""
    unit = str(unit).strip()
    unit = FREQUENCY_UNIT_ALIASES.get(unit, unit)
    return lookup(unit, FREQUENCY_UNITS, "frequency unit")


def set_frequency(channel: int, amount: Amount, unit: str = "Hz") -> Command:
    """
    Set the frequency of a channel.

    Args:
        channel: Channel number (1 or 2)
        amount: Frequency in the given unit
        unit: One of uHz, mHz, Hz, kHz, MHz (case-sensitive)
    """
    channel = validate_channel(channel)
    code, domain = frequency_unit(unit)
    return encode(Operation.SET_FREQUENCY, validate(amount, domain), code, channel=channel)


def get_frequency(channel: int) -> Command:
    return _read(Operation.GET_FREQUENCY, validate_channel(channel))


def set_amplitude(channel: int, amount: Amount) -> Command:
    channel = validate_channel(channel)
    return encode(Operation.SET_AMPLITUDE, validate(amount, "amplitude"), channel=channel)


def get_amplitude(channel: int) -> Command:
    return _read(Operation.GET_AMPLITUDE, validate_channel(channel))


def set_offset(channel: int, amount: Amount) -> Command:
    channel = validate_channel(channel)
    return encode(Operation.SET_OFFSET, validate(amount, "offset"), channel=channel)


def get_offset(channel: int) -> Command:
    return _read(Operation.GET_OFFSET, validate_channel(channel))


def set_duty_cycle(channel: int, amount: Amount) -> Command:
    channel = validate_channel(channel)
    return encode(Operation.SET_DUTY_CYCLE, validate(amount, "duty_cycle"), channel=channel)


def get_duty_cycle(channel: int) -> Command:
    return _read(Operation.GET_DUTY_CYCLE, validate_channel(channel))


def set_phase(amount: Amount) -> Command:
    """Set the phase between the two channels in degrees."""
    return encode(Operation.SET_PHASE, validate(amount, "phase"))


def get_phase() -> Command:
    return _read(Operation.GET_PHASE)


def set_tracking(flags: Union[tracking.Tracking, str, int]) -> Command:
    """
    Choose which channel 2 parameters follow channel 1.

    Args:
        flags: A ``Tracking`` set, an int bitmask, or any text form
            ``tracking.decode`` accepts
    """
    flags = tracking.coerce(flags)
    return encode(Operation.SET_TRACKING, *tracking.encode(flags).split(ARG_SEP))


# ============================================================================
# PANELS / EXTENDED FUNCTIONS
# ============================================================================

def set_extended_function(function: str) -> Command:
    """Start one of: measure, count, sweep, pulse, burst."""
    args = lookup(function, EXTENDED_FUNCTIONS, "extended function")
    return encode(Operation.SET_EXTENDED_FUNCTION, *args)


def switch_panel(panel: str) -> Command:
    """Show one of the device panels (see ``PANELS``)."""
    return encode(Operation.SWITCH_PANEL, lookup(panel, PANELS, "panel"))


# ============================================================================
# MEASUREMENT
# ============================================================================

MEASUREMENTS = {
    "count": Operation.GET_MEASUREMENT_COUNT,
    "frequency": Operation.GET_MEASUREMENT_FREQUENCY,
    "frequency_period": Operation.GET_MEASUREMENT_FREQUENCY_PERIOD,
    "pulse_width_positive": Operation.GET_MEASUREMENT_PULSE_WIDTH_POSITIVE,
    "pulse_width_negative": Operation.GET_MEASUREMENT_PULSE_WIDTH_NEGATIVE,
    "period": Operation.GET_MEASUREMENT_PERIOD,
    "duty_cycle": Operation.GET_MEASUREMENT_DUTY_CYCLE,
}


def set_measurement_coupling(coupling: str) -> Command:
    return encode(Operation.SET_MEASUREMENT_COUPLING,
                  lookup(str(coupling).lower(), COUPLING, "coupling"))


def set_measurement_gate_time(amount: Amount) -> Command:
    """Set the counter gate time in seconds (0.01-10)."""
    return encode(Operation.SET_MEASUREMENT_GATE_TIME, validate(amount, "gate_time"))


def set_measurement_mode(mode: str) -> Command:
    return encode(Operation.SET_MEASUREMENT_MODE,
                  lookup(mode, MEASUREMENT_MODES, "measurement mode"))


def clear_measurement_count() -> Command:
    return encode(Operation.CLEAR_MEASUREMENT_COUNT, 0)


def get_measurement(quantity: str) -> Command:
    """Read one measured quantity (see ``MEASUREMENTS``)."""
    return _read(lookup(quantity, MEASUREMENTS, "measurement"))


# ============================================================================
# SWEEP
# ============================================================================

def set_sweep_start(amount: Amount) -> Command:
    return encode(Operation.SET_SWEEP_START, validate(amount, "sweep_frequency"))


def set_sweep_end(amount: Amount) -> Command:
    return encode(Operation.SET_SWEEP_END, validate(amount, "sweep_frequency"))


def set_sweep_time(amount: Amount) -> Command:
    return encode(Operation.SET_SWEEP_TIME, validate(amount, "sweep_time"))


def set_sweep_direction(direction: str) -> Command:
    return encode(Operation.SET_SWEEP_DIRECTION,
                  lookup(direction, SWEEP_DIRECTIONS, "sweep direction"))


def set_sweep_mode(mode: str) -> Command:
    return encode(Operation.SET_SWEEP_MODE, lookup(mode, SWEEP_MODES, "sweep mode"))


# ============================================================================
# PULSE
# ============================================================================

def _pulse_time(operation, amount, unit):
    code, domain = lookup(unit, PULSE_UNITS, "pulse time unit")
    return encode(operation, validate(amount, domain), code)


def set_pulse_width(amount: Amount, unit: str = "ns") -> Command:
    """
    Set the pulse width.

    Sending a value in ``us`` leaves the device in microsecond mode until a
    ``ns`` value is sent or it is power cycled.
    """
    return _pulse_time(Operation.SET_PULSE_WIDTH, amount, unit)


def set_pulse_period(amount: Amount, unit: str = "ns") -> Command:
    return _pulse_time(Operation.SET_PULSE_PERIOD, amount, unit)


def set_pulse_offset(amount: Amount) -> Command:
    return encode(Operation.SET_PULSE_OFFSET, validate(amount, "pulse_offset"))


def set_pulse_amplitude(amount: Amount) -> Command:
    return encode(Operation.SET_PULSE_AMPLITUDE, validate(amount, "pulse_amplitude"))


# ============================================================================
# BURST
# ============================================================================

def set_burst_count(amount: Amount) -> Command:
    return encode(Operation.SET_BURST_COUNT, validate(amount, "burst_count"))


def set_burst_mode(mode: str) -> Command:
    return encode(Operation.SET_BURST_MODE, lookup(mode, BURST_MODES, "burst mode"))


def burst_once() -> Command:
    return encode(Operation.BURST_ONCE, 1)


# ============================================================================
# PRESETS
# ============================================================================

def save_preset(number: Amount) -> Command:
    return encode(Operation.SAVE_PRESET, validate(number, "preset"))


def recall_preset(number: Amount) -> Command:
    return encode(Operation.RECALL_PRESET, validate(number, "preset"))


def clear_preset(number: Amount) -> Command:
    # Accepted by the device, but has not been seen to clear anything.
    return encode(Operation.CLEAR_PRESET, validate(number, "preset"))


# ============================================================================
# ARBITRARY WAVES
# ============================================================================

def write_arbitrary_wave(slot: Amount, samples: Union[str, Sequence[int]]) -> Command:
    """
    Upload 2048 samples (0-4095) to arbitrary wave slot 1-60.

    Args:
        slot: Slot number
        samples: Newline delimited text or a sequence of ints
    """
    slot = validate(slot, "arbitrary_slot")
    values = parse_samples(samples)
    return encode(Operation.WRITE_ARBITRARY_WAVE, *values.tolist(), slot=slot)


def read_arbitrary_wave(slot: Amount) -> Command:
    return encode(Operation.READ_ARBITRARY_WAVE, 0, slot=validate(slot, "arbitrary_slot"))
