"""Exceptions raised by the CJDS66 codec and driver."""

from typing import Optional


class SignalGenError(Exception):
    """Base exception for all signal generator errors."""
    pass


class SignalGenValidationError(SignalGenError, ValueError):
    """Raised when a parameter is rejected before anything is sent."""
    pass


class ParseFailure(SignalGenValidationError):
    """Raised when a value is not a number."""
    pass


class PrecisionExceeded(SignalGenValidationError):
    """Raised when a value has more decimal places than its domain allows."""
    pass


class RangeViolation(SignalGenValidationError):
    """Raised when a value falls outside its domain bounds."""
    pass


class InvalidChannel(SignalGenValidationError):
    """Raised when the channel is not 1 or 2."""
    pass


class UnsupportedValue(SignalGenValidationError):
    """Raised when a value is not one of the accepted names or codes."""
    pass


class MalformedResponse(SignalGenError):
    """Raised when the device answers in an unexpected shape."""
    def __init__(self, message: str, response: Optional[str] = None) -> None:
        super().__init__(message)
        self.response = response


class IoFailure(SignalGenError, ConnectionError):
    """Raised when the transport fails while running an operation."""
    def __init__(self, message: str, operation: Optional[str] = None,
                 pyvisa_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.pyvisa_error = pyvisa_error
