"""
Wire grammar for the CJDS66 (JDS6600 family) serial protocol.

Command format: :<mode><opcode>=<arg>[,<arg>...].<CR><LF>

Every logical operation the driver knows is listed in ``Operation`` and
described by an ``OperationSpec`` in ``OPERATIONS``: the mode letter, the
opcode (one per channel for channel-taking operations), how many arguments
it carries, and how many bytes the device answers with.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

# ============================================================================
# FRAMING
# ============================================================================

BEGIN = ":"
GET = "r"
SET = "w"
WAVE_WRITE = "a"
WAVE_READ = "b"
SEP = "="
ARG_SEP = ","
STOP = "."
LINEBREAK = "\r\n"
END = STOP + LINEBREAK

# ============================================================================
# SERIAL DEFAULTS
# ============================================================================

BAUD_RATE = 115200
DATA_BITS = 8
TIMEOUT_MS = 3000
COMMAND_DELAY = 0.05  # seconds between a write and the matching read

# Arbitrary wave sample window
SAMPLE_COUNT = 2048
SAMPLE_MIN = 0
SAMPLE_MAX = 4095
ARBITRARY_SLOTS = 60
ARBITRARY_PRESET_BASE = 100


class Operation(Enum):
    READ_MODEL = "read_model"
    READ_SERIAL = "read_serial"
    READ_MODEL_AND_SERIAL = "read_model_and_serial"
    SET_CHANNEL_OUTPUT = "set_channel_output"
    GET_CHANNEL_OUTPUT = "get_channel_output"
    SET_WAVEFORM = "set_waveform"
    GET_WAVEFORM = "get_waveform"
    SET_FREQUENCY = "set_frequency"
    GET_FREQUENCY = "get_frequency"
    SET_AMPLITUDE = "set_amplitude"
    GET_AMPLITUDE = "get_amplitude"
    SET_OFFSET = "set_offset"
    GET_OFFSET = "get_offset"
    SET_DUTY_CYCLE = "set_duty_cycle"
    GET_DUTY_CYCLE = "get_duty_cycle"
    SET_PHASE = "set_phase"
    GET_PHASE = "get_phase"
    SET_EXTENDED_FUNCTION = "set_extended_function"
    SWITCH_PANEL = "switch_panel"
    SET_MEASUREMENT_COUPLING = "set_measurement_coupling"
    SET_MEASUREMENT_GATE_TIME = "set_measurement_gate_time"
    SET_MEASUREMENT_MODE = "set_measurement_mode"
    CLEAR_MEASUREMENT_COUNT = "clear_measurement_count"
    SET_SWEEP_START = "set_sweep_start"
    SET_SWEEP_END = "set_sweep_end"
    SET_SWEEP_TIME = "set_sweep_time"
    SET_SWEEP_DIRECTION = "set_sweep_direction"
    SET_SWEEP_MODE = "set_sweep_mode"
    SET_PULSE_WIDTH = "set_pulse_width"
    SET_PULSE_PERIOD = "set_pulse_period"
    SET_PULSE_OFFSET = "set_pulse_offset"
    SET_PULSE_AMPLITUDE = "set_pulse_amplitude"
    SET_BURST_COUNT = "set_burst_count"
    SET_BURST_MODE = "set_burst_mode"
    SET_TRACKING = "set_tracking"
    BURST_ONCE = "burst_once"
    SAVE_PRESET = "save_preset"
    RECALL_PRESET = "recall_preset"
    CLEAR_PRESET = "clear_preset"
    GET_MEASUREMENT_COUNT = "get_measurement_count"
    GET_MEASUREMENT_FREQUENCY = "get_measurement_frequency"
    GET_MEASUREMENT_FREQUENCY_PERIOD = "get_measurement_frequency_period"
    GET_MEASUREMENT_PULSE_WIDTH_POSITIVE = "get_measurement_pulse_width_positive"
    GET_MEASUREMENT_PULSE_WIDTH_NEGATIVE = "get_measurement_pulse_width_negative"
    GET_MEASUREMENT_PERIOD = "get_measurement_period"
    GET_MEASUREMENT_DUTY_CYCLE = "get_measurement_duty_cycle"
    WRITE_ARBITRARY_WAVE = "write_arbitrary_wave"
    READ_ARBITRARY_WAVE = "read_arbitrary_wave"


@dataclass(frozen=True)
class OperationSpec:
    """
    Wire description of one operation.

    Attributes:
        mode: Mode letter (``r``, ``w``, ``a`` or ``b``)
        opcodes: One opcode, or (channel 1, channel 2) for channel-taking operations
        arity: Number of arguments after the ``=``
        response_length: Bytes the device answers with (maximum for wave reads)
        response_lines: Lines making up one complete response
    """

    mode: str
    opcodes: Tuple[str, ...]
    arity: int
    response_length: int
    response_lines: int = 1

    @property
    def per_channel(self) -> bool:
        return len(self.opcodes) == 2


ACK_LENGTH = 6
WAVE_READ_LENGTH = 10247


def _w(opcode, arity=1, *, ch2=None):
    opcodes = (opcode, ch2) if ch2 else (opcode,)
    return OperationSpec(SET, opcodes, arity, ACK_LENGTH)


def _r(opcode, length, *, ch2=None, lines=1):
    opcodes = (opcode, ch2) if ch2 else (opcode,)
    return OperationSpec(GET, opcodes, 1, length, lines)


OPERATIONS: Dict[Operation, OperationSpec] = {
    Operation.READ_MODEL: _r("00", 10),
    Operation.READ_SERIAL: _r("01", 18),
    Operation.READ_MODEL_AND_SERIAL: _r("00", 28, lines=2),
    Operation.SET_CHANNEL_OUTPUT: _w("20", 2),
    Operation.GET_CHANNEL_OUTPUT: _r("20", 11),
    Operation.SET_WAVEFORM: _w("21", ch2="22"),
    Operation.GET_WAVEFORM: _r("21", 11, ch2="22"),
    Operation.SET_FREQUENCY: _w("23", 2, ch2="24"),
    Operation.GET_FREQUENCY: _r("23", 21, ch2="24"),
    Operation.SET_AMPLITUDE: _w("25", ch2="26"),
    Operation.GET_AMPLITUDE: _r("25", 13, ch2="26"),
    Operation.SET_OFFSET: _w("27", ch2="28"),
    Operation.GET_OFFSET: _r("27", 11, ch2="28"),
    Operation.SET_DUTY_CYCLE: _w("29", ch2="30"),
    Operation.GET_DUTY_CYCLE: _r("29", 11, ch2="30"),
    Operation.SET_PHASE: _w("31"),
    Operation.GET_PHASE: _r("31", 12),
    Operation.SET_EXTENDED_FUNCTION: _w("32", 4),
    Operation.SWITCH_PANEL: _w("33"),
    Operation.SET_MEASUREMENT_COUPLING: _w("36"),
    Operation.SET_MEASUREMENT_GATE_TIME: _w("37"),
    Operation.SET_MEASUREMENT_MODE: _w("38"),
    Operation.CLEAR_MEASUREMENT_COUNT: _w("39"),
    Operation.SET_SWEEP_START: _w("40"),
    Operation.SET_SWEEP_END: _w("41"),
    Operation.SET_SWEEP_TIME: _w("42"),
    Operation.SET_SWEEP_DIRECTION: _w("43"),
    Operation.SET_SWEEP_MODE: _w("44"),
    Operation.SET_PULSE_WIDTH: _w("45", 2),
    Operation.SET_PULSE_PERIOD: _w("46", 2),
    Operation.SET_PULSE_OFFSET: _w("47"),
    Operation.SET_PULSE_AMPLITUDE: _w("48"),
    Operation.SET_BURST_COUNT: _w("49"),
    Operation.SET_BURST_MODE: _w("50"),
    Operation.SET_TRACKING: _w("54", 5),
    Operation.BURST_ONCE: _w("59"),
    Operation.SAVE_PRESET: _w("70"),
    Operation.RECALL_PRESET: _w("71"),
    Operation.CLEAR_PRESET: _w("72"),
    Operation.GET_MEASUREMENT_COUNT: _r("80", 18),
    Operation.GET_MEASUREMENT_FREQUENCY: _r("81", 16),
    Operation.GET_MEASUREMENT_FREQUENCY_PERIOD: _r("82", 16),
    Operation.GET_MEASUREMENT_PULSE_WIDTH_POSITIVE: _r("83", 12),
    Operation.GET_MEASUREMENT_PULSE_WIDTH_NEGATIVE: _r("84", 12),
    Operation.GET_MEASUREMENT_PERIOD: _r("85", 12),
    Operation.GET_MEASUREMENT_DUTY_CYCLE: _r("86", 12),
    # The slot number takes the place of the opcode for wave transfers.
    Operation.WRITE_ARBITRARY_WAVE: OperationSpec(WAVE_WRITE, (), SAMPLE_COUNT, ACK_LENGTH),
    Operation.READ_ARBITRARY_WAVE: OperationSpec(WAVE_READ, (), 1, WAVE_READ_LENGTH),
}

# ============================================================================
# VALUE TABLES
# ============================================================================

# (channel 1, channel 2) output states
CHANNEL_OUTPUT = {
    "1,1": ("1", "1"), "11": ("1", "1"), "on,on": ("1", "1"), "1": ("1", "1"), "on": ("1", "1"),
    "0,0": ("0", "0"), "00": ("0", "0"), "off,off": ("0", "0"), "0": ("0", "0"), "off": ("0", "0"),
    "1,0": ("1", "0"), "10": ("1", "0"), "on,off": ("1", "0"),
    "0,1": ("0", "1"), "01": ("0", "1"), "off,on": ("0", "1"),
}

# Built-in waveform presets, display name first
WAVEFORM_PRESETS = [
    ("sine", "sin"),
    ("square", "sq"),
    ("pulse", "pul"),
    ("triangle", "tri"),
    ("partial-sine", "partialsine", "parsine", "par-sine", "parsin", "par-sin",
     "psine", "p-sine", "psin", "p-sin"),
    ("cmos", "cm"),
    ("dc",),
    ("half-wave", "halfwave", "hw", "h-w"),
    ("full-wave", "fullwave", "fw", "f-w"),
    ("pos-ladder", "posladder", "pos-lad", "poslad", "positive-ladder",
     "positiveladder", "pl"),
    ("neg-ladder", "negladder", "neg-lad", "neglad", "negative-ladder",
     "negativeladder", "nl"),
    ("noise", "nois", "noi", "no", "n"),
    ("exp-rise", "exprise", "e-r", "er", "e-rise", "erise", "e-ris", "eris"),
    ("exp-decay", "expdecay", "e-d", "ed", "e-decay", "edecay", "e-dec", "edec"),
    ("multi-tone", "multitone", "m-t", "mt", "m-tone", "mtone"),
    ("sinc", "sc"),
    ("lorenz", "loren", "lor", "lz"),
]

WAVEFORM_NAMES = [names[0] for names in WAVEFORM_PRESETS]
WAVEFORM_ALIASES = {
    alias: code for code, names in enumerate(WAVEFORM_PRESETS) for alias in names
}

# Frequency unit -> (unit code, domain name). Unit names are case-sensitive
# so that mHz and MHz stay distinct.
FREQUENCY_UNITS = {
    "uHz": ("4", "frequency_uhz"),
    "mHz": ("3", "frequency_millihz"),
    "Hz": ("0", "frequency_hz"),
    "kHz": ("1", "frequency_khz"),
    "MHz": ("2", "frequency_megahz"),
}
FREQUENCY_UNIT_ALIASES = {
    "µHz": "uHz", "uhz": "uHz",
    "millihz": "mHz",
    "hz": "Hz",
    "khz": "kHz",
    "megahz": "MHz",
}

EXTENDED_FUNCTIONS = {
    "measure": ("0", "0", "0", "0"),
    "count": ("1", "0", "0", "0"),
    "sweep": ("0", "1", "0", "0"),
    "pulse": ("1", "0", "1", "1"),
    "burst": ("1", "0", "0", "1"),
}

PANELS = {
    "main_ch1": "0",
    "main_ch2": "1",
    "system": "2",
    "measurement": "4",
    "counting": "5",
    "sweep_ch1": "6",
    "sweep_ch2": "7",
    "pulse": "8",
    "burst": "9",
}

COUPLING = {"ac": "0", "dc": "1"}
MEASUREMENT_MODES = {"frequency": "0", "period": "1"}
SWEEP_DIRECTIONS = {"rise": "0", "fall": "1", "rise_fall": "2"}
SWEEP_MODES = {"linear": "0", "logarithm": "1"}
BURST_MODES = {
    "manual": "0",
    "ch2": "1",
    "external_ac": "2",
    "external_dc": "3",
}

# Pulse time unit -> (unit code, domain name)
PULSE_UNITS = {
    "ns": ("0", "pulse_time_ns"),
    "us": ("1", "pulse_time_us"),
}
