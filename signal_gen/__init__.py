__version__ = "1.0.0"

from .src.device_manager import DeviceManager
from .src.cjds66_generator import CJDS66_Generator
from .src.terminal import ColorPrinter
from .src.tracking import Tracking
from .src.errors import (
    SignalGenError,
    SignalGenValidationError,
    ParseFailure,
    PrecisionExceeded,
    RangeViolation,
    InvalidChannel,
    UnsupportedValue,
    MalformedResponse,
    IoFailure,
)

__all__ = [
    "DeviceManager",
    "CJDS66_Generator",
    "ColorPrinter",
    "Tracking",
    "SignalGenError",
    "SignalGenValidationError",
    "ParseFailure",
    "PrecisionExceeded",
    "RangeViolation",
    "InvalidChannel",
    "UnsupportedValue",
    "MalformedResponse",
    "IoFailure",
]
