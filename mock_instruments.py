"""
Mock CJDS66 serial port for testing the driver and REPL without hardware.

The mock answers the same ASCII protocol as the device, remembering every
value written so that reads return it.

Usage:
    python -m signal_gen.repl --mock
"""

import pyvisa

from signal_gen import CJDS66_Generator

ACK = b":ok\r\n"


class MockSerialBase:
    """Byte level stand-in for a pyvisa serial resource."""

    def __init__(self):
        self.written = []
        self.next_response = None
        self.closed = False
        self._pending = b""

    def write_raw(self, data):
        self.written.append(data)
        if self.next_response is not None:
            response, self.next_response = self.next_response, None
        else:
            response = self.respond(data.decode("ascii"))
        self._pending += response
        return len(data)

    def read_bytes(self, count, break_on_termchar=False):
        if not self._pending:
            raise pyvisa.errors.VisaIOError(pyvisa.constants.StatusCode.error_timeout)
        chunk = self._pending[:count]
        if break_on_termchar and b"\n" in chunk:
            chunk = chunk[:chunk.index(b"\n") + 1]
        self._pending = self._pending[len(chunk):]
        return chunk

    def close(self):
        self.closed = True

    def respond(self, text):
        raise NotImplementedError


class MockCJDS66(MockSerialBase):
    MODEL = "60"
    SERIAL = "1234567890"

    def __init__(self):
        super().__init__()
        self.registers = {
            "20": "0,0",
            "21": "0", "22": "0",
            "23": "100000,0", "24": "100000,0",
            "25": "5000", "26": "5000",
            "27": "1000", "28": "1000",
            "29": "500", "30": "500",
            "31": "0",
            "54": "0,0,0,0,0",
            "80": "1234",
            "81": "100000",
            "82": "1000000",
            "83": "5000",
            "84": "5000",
            "85": "10000",
            "86": "500",
        }
        self.waves = {}

    @property
    def commands(self):
        return [data.decode("ascii") for data in self.written]

    def respond(self, text):
        body = text[1:].rstrip("\r\n").rstrip(".")
        mode, rest = body[0], body[1:]
        opcode, _, args = rest.partition("=")

        if mode == "w":
            self.registers[opcode] = args
            return ACK
        if mode == "a":
            self.waves[opcode] = args
            return ACK
        if mode == "b":
            wave = self.waves.get(opcode, ",".join(["2048"] * 2048))
            return f":b{opcode}={wave},\r\n".encode("ascii")
        if opcode == "00" and args == "1":
            return f":r00={self.MODEL}.\r\n:r01={self.SERIAL}.\r\n".encode("ascii")
        if opcode == "00":
            value = self.MODEL
        elif opcode == "01":
            value = self.SERIAL
        else:
            value = self.registers.get(opcode, "0")
        return f":r{opcode}={value}.\r\n".encode("ascii")


def get_mock_generator(verbose=False):
    """Return a generator driver wired to a fresh mock device."""
    gen = CJDS66_Generator("MOCK::CJDS66", verbose=verbose, command_delay=0)
    gen.attach(MockCJDS66())
    return gen
