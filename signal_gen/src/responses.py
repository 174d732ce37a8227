"""
Response decoders for the CJDS66.

Read responses echo the command with the value in place of the argument,
e.g. ``:r25=5000.\r\n`` for 5 V amplitude. Each decoder undoes the scaling
the matching encoder applied.
"""

from typing import Tuple, Union

from .errors import MalformedResponse
from .parameters import DOMAINS
from .protocol import (
    ARBITRARY_PRESET_BASE,
    ARG_SEP,
    SAMPLE_COUNT,
    SAMPLE_MAX,
    SAMPLE_MIN,
    SEP,
    STOP,
    WAVEFORM_NAMES,
)

Response = Union[bytes, str]


def _text(response: Response) -> str:
    if isinstance(response, bytes):
        try:
            return response.decode("ascii")
        except UnicodeDecodeError:
            raise MalformedResponse("response is not ASCII", repr(response)) from None
    return response


def fields(response: Response, count: int = 1) -> list:
    """
    Split a response on ``=`` and return the payload fields after it.

    Raises:
        MalformedResponse: Fewer than ``count`` separators
    """
    text = _text(response)
    parts = text.split(SEP)
    if len(parts) < count + 1:
        raise MalformedResponse(f"missing '{SEP}' separator in response: {text!r}", text)
    return parts[1:count + 1]


def _value(field: str, text: str) -> str:
    parts = field.split(STOP)
    if len(parts) < 2:
        raise MalformedResponse(f"missing '{STOP}' terminator in response: {text!r}", text)
    return parts[0]


def payload(response: Response) -> str:
    """Return the value between ``=`` and ``.``."""
    text = _text(response)
    return _value(fields(text)[0], text)


def _number(value: str, text: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise MalformedResponse(f"non-numeric value {value!r} in response: {text!r}", text) from None


def _pair(response):
    text = _text(response)
    parts = payload(text).split(ARG_SEP)
    if len(parts) < 2:
        raise MalformedResponse(f"missing '{ARG_SEP}' in response: {text!r}", text)
    return parts[0], parts[1], text


def numeric(response: Response) -> float:
    """Decode a plain numeric payload."""
    text = _text(response)
    return _number(payload(text), text)


def scaled(response: Response, domain: str) -> float:
    """Decode a numeric payload with the inverse of a domain's scaling."""
    return DOMAINS[domain].from_wire(numeric(response))


# ============================================================================
# DEVICE INFO
# ============================================================================

def decode_model(response: Response) -> str:
    return payload(response)


def decode_serial(response: Response) -> str:
    return payload(response)


def decode_model_and_serial(response: Response) -> Tuple[str, str]:
    """Decode the two line answer to ``:r00=1.``."""
    text = _text(response)
    model, serial = fields(text, 2)
    return _value(model, text), _value(serial, text)


def decode_ack(response: Response) -> str:
    """Write commands answer ``:ok``; the text is returned as is."""
    return _text(response).strip()


# ============================================================================
# CHANNEL SETTINGS
# ============================================================================

def decode_channel_output(response: Response) -> Tuple[bool, bool]:
    ch1, ch2, text = _pair(response)
    if ch1 not in ("0", "1") or ch2 not in ("0", "1"):
        raise MalformedResponse(f"unexpected channel output state in response: {text!r}", text)
    return ch1 == "1", ch2 == "1"


def decode_waveform(response: Response) -> int:
    return int(numeric(response))


def waveform_name(code: int) -> str:
    """Display name of a waveform code, including arbitrary slots."""
    if 0 <= code < len(WAVEFORM_NAMES):
        return WAVEFORM_NAMES[code]
    if code > ARBITRARY_PRESET_BASE:
        return f"arbitrary{code - ARBITRARY_PRESET_BASE}"
    return f"unknown({code})"


def decode_frequency(response: Response) -> float:
    """
    Decode a frequency read.

    The payload is ``value,unit``; the value is always in hundredths of the
    unit, so only the number is converted.
    """
    value, _unit, text = _pair(response)
    return _number(value, text) / DOMAINS["frequency_hz"].scale


def decode_amplitude(response: Response) -> float:
    return scaled(response, "amplitude")


def decode_offset(response: Response) -> float:
    return scaled(response, "offset")


def decode_duty_cycle(response: Response) -> float:
    return scaled(response, "duty_cycle")


def decode_phase(response: Response) -> float:
    return scaled(response, "phase")


# ============================================================================
# MEASUREMENT
# ============================================================================

def decode_measurement(response: Response) -> float:
    return numeric(response)


def decode_measurement_frequency_period(response: Response) -> float:
    return numeric(response) / 1000


# ============================================================================
# ARBITRARY WAVES
# ============================================================================

def decode_arbitrary_wave(response: Response) -> str:
    """
    Decode an arbitrary wave read into newline delimited sample text.

    The device sends ``:b01=v1,v2,...,v2048,`` followed by the terminator,
    so the last comma separated element is dropped.
    """
    text = _text(response)
    values = fields(text)[0].split(ARG_SEP)[:-1]
    if len(values) != SAMPLE_COUNT:
        raise MalformedResponse(
            f"expected {SAMPLE_COUNT} samples in response, got {len(values)}", text
        )
    for value in values:
        if not value.isdigit() or not SAMPLE_MIN <= int(value) <= SAMPLE_MAX:
            raise MalformedResponse(f"invalid sample {value!r} in response", text)
    return "\n".join(values)
