import pyvisa

from .errors import IoFailure
from .protocol import BAUD_RATE, DATA_BITS, TIMEOUT_MS
from .terminal import ColorPrinter


class DeviceManager:
    """
    Base class for serial instrument management using PyVISA.

    The instrument is any object with ``write_raw``, ``read_bytes`` and
    ``close``; a pyvisa ``SerialInstrument`` when opened by ``connect``, or
    a stand-in handed to ``attach``.
    """

    BAUD_RATE = BAUD_RATE
    TIMEOUT_MS = TIMEOUT_MS

    def __init__(self, resource_name, backend="", timeout_ms=None, baud_rate=None):
        self.resource_name = resource_name
        self.backend = backend
        self.timeout_ms = timeout_ms or self.TIMEOUT_MS
        self.baud_rate = baud_rate or self.BAUD_RATE
        self.rm = None
        self.instrument = None

    @property
    def connected(self):
        return self.instrument is not None

    def connect(self):
        """Opens the serial port: 8 data bits, no parity, 1 stop bit, no flow control."""
        try:
            self.rm = pyvisa.ResourceManager(self.backend)
            self.instrument = self.rm.open_resource(self.resource_name)
            self.instrument.timeout = self.timeout_ms
            self.instrument.baud_rate = self.baud_rate
            self.instrument.data_bits = DATA_BITS
            self.instrument.parity = pyvisa.constants.Parity.none
            self.instrument.stop_bits = pyvisa.constants.StopBits.one
            self.instrument.flow_control = pyvisa.constants.ControlFlow.none
            self.instrument.read_termination = "\n"
            self.instrument.write_termination = ""
            ColorPrinter.success(f"Connected to {self.resource_name}")
        except (pyvisa.errors.VisaIOError, OSError, ValueError) as e:
            ColorPrinter.error(f"Failed to connect to {self.resource_name}: {e}")
            self.instrument = None
            raise IoFailure(f"Failed to connect to {self.resource_name}: {e}",
                            operation="connect", pyvisa_error=e) from e

    def attach(self, instrument):
        """Use an already open instrument (or a mock) instead of opening one."""
        self.instrument = instrument

    def disconnect(self):
        """Disconnects from the instrument."""
        if self.instrument:
            self.instrument.close()
            self.instrument = None
            ColorPrinter.info(f"Disconnected from {self.resource_name}")

    def write_bytes(self, data, operation=None):
        """Writes raw bytes to the instrument."""
        if not self.instrument:
            raise IoFailure("Instrument not connected.", operation=operation)
        try:
            return self.instrument.write_raw(data)
        except (pyvisa.errors.VisaIOError, OSError) as e:
            raise IoFailure(f"{operation}: write failed: {e}",
                            operation=operation, pyvisa_error=e) from e

    def read_bytes(self, count, operation=None):
        """Reads at most ``count`` bytes, stopping early at a line feed."""
        if not self.instrument:
            raise IoFailure("Instrument not connected.", operation=operation)
        try:
            return self.instrument.read_bytes(count, break_on_termchar=True)
        except (pyvisa.errors.VisaIOError, OSError) as e:
            raise IoFailure(f"{operation}: read failed: {e}",
                            operation=operation, pyvisa_error=e) from e

    def __enter__(self):
        if not self.connected:
            self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.disconnect()
