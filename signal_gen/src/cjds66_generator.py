"""
Driver for the CJDS66 (JDS6600 family) DDS Signal Generator
Instrument Type: Dual-channel DDS Function/Arbitrary Waveform Generator

Protocol: ASCII commands over USB serial at 115200 baud, 8N1
Command format: :wNN=DATA.<CR><LF> (write) / :rNN=0.<CR><LF> (read)
"""

import time
from pathlib import Path

from . import commands, responses, tracking, waveform
from .device_manager import DeviceManager
from .parameters import validate_channel
from .protocol import COMMAND_DELAY, OPERATIONS, SAMPLE_COUNT, Operation
from .terminal import ColorPrinter


class CJDS66_Generator(DeviceManager):
    """
    Driver for the CJDS66 DDS Signal Generator (dual channel, up to 60MHz).

    Every method validates its arguments before anything is written, so a
    bad value never reaches the device.
    """

    COMMAND_DELAY = COMMAND_DELAY

    def __init__(self, resource_name, verbose=False, command_delay=None, **kwargs):
        """Initialize the CJDS66 Generator."""
        super().__init__(resource_name, **kwargs)
        self.verbose = verbose
        self.command_delay = self.COMMAND_DELAY if command_delay is None else command_delay

    def _transact(self, command: commands.Command) -> bytes:
        """
        Send a command and read its response.

        Args:
            command: Encoded command

        Returns:
            Raw response bytes
        """
        operation = command.operation.value
        if self.verbose:
            ColorPrinter.traffic(">>", command.text)

        self.write_bytes(command.payload, operation=operation)
        if self.command_delay:
            time.sleep(self.command_delay)

        lines = OPERATIONS[command.operation].response_lines
        data = b""
        while len(data) < command.response_length:
            chunk = self.read_bytes(command.response_length - len(data), operation=operation)
            if not chunk:
                break
            data += chunk
            if not data.strip(b"\r\n"):
                # Line ending left over from a reply cut at its declared length
                data = b""
                continue
            if command.operation is Operation.READ_ARBITRARY_WAVE:
                # One value per comma; the terminator comes after the last one
                if data.count(b",") >= SAMPLE_COUNT:
                    break
            elif data.count(b"\n") >= lines:
                break

        if self.verbose:
            ColorPrinter.traffic("<<", data)
        return data

    def _set(self, command: commands.Command) -> str:
        return responses.decode_ack(self._transact(command))

    # ========================================================================
    # DEVICE INFO
    # ========================================================================

    def get_model(self) -> str:
        return responses.decode_model(self._transact(commands.read_model()))

    def get_serial(self) -> str:
        return responses.decode_serial(self._transact(commands.read_serial()))

    def get_model_and_serial(self):
        """Returns (model, serial) from a single request."""
        return responses.decode_model_and_serial(self._transact(commands.read_model_and_serial()))

    # ========================================================================
    # OUTPUTS AND WAVEFORMS
    # ========================================================================

    def set_channel_output(self, state):
        """
        Set channel outputs.

        Args:
            state: Alias such as "on", "off", "10", "on,off", or a (ch1, ch2) tuple
        """
        self._set(commands.set_channel_output(state))
        print(f"Output: {state}")

    def enable_output(self, ch1: bool = True, ch2: bool = True):
        """Enable or disable channel outputs."""
        self._set(commands.set_channel_output((ch1, ch2)))
        print(f"Output: CH1={'ON' if ch1 else 'OFF'}, CH2={'ON' if ch2 else 'OFF'}")

    def disable_output(self):
        """Disable both channel outputs for safety."""
        self.enable_output(False, False)

    def get_channel_output(self):
        """Returns (ch1_on, ch2_on)."""
        return responses.decode_channel_output(self._transact(commands.get_channel_output()))

    def set_waveform(self, channel: int, preset):
        """
        Set waveform type for a channel.

        Args:
            channel: Channel number (1 or 2)
            preset: Preset number 0-16 or name (sine, square, pulse, ...)
        """
        command = commands.set_waveform(channel, preset)
        self._set(command)
        print(f"CH{channel} waveform: {responses.waveform_name(commands.waveform_code(preset))}")

    def set_arbitrary_preset(self, channel: int, slot):
        """Use arbitrary wave slot 1-60 as the waveform of a channel."""
        self._set(commands.set_arbitrary_preset(channel, slot))
        print(f"CH{channel} waveform: arbitrary{slot}")

    def get_waveform(self, channel: int) -> int:
        return responses.decode_waveform(self._transact(commands.get_waveform(channel)))

    def get_waveform_name(self, channel: int) -> str:
        return responses.waveform_name(self.get_waveform(channel))

    # ========================================================================
    # CHANNEL PARAMETERS
    # ========================================================================

    def set_frequency(self, channel: int, amount, unit: str = "Hz"):
        """
        Set frequency for a channel.

        Args:
            channel: Channel number (1 or 2)
            amount: Frequency in ``unit``
            unit: uHz, mHz, Hz, kHz or MHz
        """
        self._set(commands.set_frequency(channel, amount, unit))
        print(f"CH{channel} frequency: {amount} {unit}")

    def get_frequency(self, channel: int) -> float:
        return responses.decode_frequency(self._transact(commands.get_frequency(channel)))

    def set_amplitude(self, channel: int, amount):
        """Set amplitude for a channel in volts (0-20, 3 decimals)."""
        self._set(commands.set_amplitude(channel, amount))
        print(f"CH{channel} amplitude: {amount} V")

    def get_amplitude(self, channel: int) -> float:
        return responses.decode_amplitude(self._transact(commands.get_amplitude(channel)))

    def set_offset(self, channel: int, amount):
        """Set DC offset for a channel in volts (-9.99 to 9.99)."""
        self._set(commands.set_offset(channel, amount))
        print(f"CH{channel} offset: {amount} V")

    def get_offset(self, channel: int) -> float:
        return responses.decode_offset(self._transact(commands.get_offset(channel)))

    def set_duty_cycle(self, channel: int, amount):
        """Set duty cycle for a channel in percent (0-99.9)."""
        self._set(commands.set_duty_cycle(channel, amount))
        print(f"CH{channel} duty cycle: {amount}%")

    def get_duty_cycle(self, channel: int) -> float:
        return responses.decode_duty_cycle(self._transact(commands.get_duty_cycle(channel)))

    def set_phase(self, amount):
        """Set the phase between channels in degrees (0-360)."""
        self._set(commands.set_phase(amount))
        print(f"Phase: {amount} degrees")

    def get_phase(self) -> float:
        return responses.decode_phase(self._transact(commands.get_phase()))

    def set_tracking(self, flags) -> tracking.Tracking:
        """
        Set which channel 2 parameters track channel 1.

        Args:
            flags: Tracking set, bitmask, or text ("10100", "freq,amp", "fa", "none")

        Returns:
            The flags that were sent
        """
        sent = tracking.coerce(flags)
        self._set(commands.set_tracking(sent))
        print(f"Tracking: {tracking.to_names(sent)}")
        return sent

    # ========================================================================
    # PANELS AND EXTENDED FUNCTIONS
    # ========================================================================

    def switch_panel(self, panel: str):
        self._set(commands.switch_panel(panel))

    def start(self, function: str, channel: int = 1):
        """
        Start an extended function: measure, count, sweep, pulse or burst.

        Sweeping first switches to the sweep panel of ``channel``.
        """
        if function == "sweep":
            channel = validate_channel(channel)
            self.switch_panel(f"sweep_ch{channel}")
        self._set(commands.set_extended_function(function))
        print(f"Started: {function}")

    # ========================================================================
    # MEASUREMENT
    # ========================================================================

    def set_measurement_coupling(self, coupling: str):
        self._set(commands.set_measurement_coupling(coupling))

    def set_measurement_gate_time(self, seconds):
        self._set(commands.set_measurement_gate_time(seconds))

    def set_measurement_mode(self, mode: str):
        """Mode: "frequency" (count frequency) or "period" (counting period)."""
        self._set(commands.set_measurement_mode(mode))

    def clear_measurement_count(self):
        self._set(commands.clear_measurement_count())

    def get_measurement(self, quantity: str) -> float:
        """
        Read a measured value.

        Args:
            quantity: count, frequency, frequency_period, pulse_width_positive,
                pulse_width_negative, period or duty_cycle
        """
        command = commands.get_measurement(quantity)
        data = self._transact(command)
        if command.operation is Operation.GET_MEASUREMENT_FREQUENCY_PERIOD:
            return responses.decode_measurement_frequency_period(data)
        return responses.decode_measurement(data)

    # ========================================================================
    # SWEEP / PULSE / BURST
    # ========================================================================

    def set_sweep_start(self, hz):
        self._set(commands.set_sweep_start(hz))

    def set_sweep_end(self, hz):
        self._set(commands.set_sweep_end(hz))

    def set_sweep_time(self, seconds):
        self._set(commands.set_sweep_time(seconds))

    def set_sweep_direction(self, direction: str):
        """Direction: rise, fall or rise_fall."""
        self._set(commands.set_sweep_direction(direction))

    def set_sweep_mode(self, mode: str):
        """Mode: linear or logarithm."""
        self._set(commands.set_sweep_mode(mode))

    def set_pulse_width(self, amount, unit: str = "ns"):
        """Set pulse width in ns (multiple of 5) or us."""
        self._set(commands.set_pulse_width(amount, unit))

    def set_pulse_period(self, amount, unit: str = "ns"):
        self._set(commands.set_pulse_period(amount, unit))

    def set_pulse_offset(self, percent):
        self._set(commands.set_pulse_offset(percent))

    def set_pulse_amplitude(self, volts):
        self._set(commands.set_pulse_amplitude(volts))

    def set_burst_count(self, count):
        self._set(commands.set_burst_count(count))

    def set_burst_mode(self, mode: str):
        """Mode: manual, ch2, external_ac or external_dc."""
        self._set(commands.set_burst_mode(mode))

    def burst_once(self):
        self._set(commands.burst_once())

    # ========================================================================
    # PRESETS
    # ========================================================================

    def save_preset(self, number):
        self._set(commands.save_preset(number))
        print(f"Saved preset {number}")

    def recall_preset(self, number):
        self._set(commands.recall_preset(number))
        print(f"Recalled preset {number}")

    def clear_preset(self, number):
        self._set(commands.clear_preset(number))

    # ========================================================================
    # ARBITRARY WAVES
    # ========================================================================

    def set_arbitrary_wave(self, slot, samples):
        """
        Upload 2048 samples to an arbitrary wave slot.

        Args:
            slot: Slot number (1-60)
            samples: Newline delimited text (0-4095 per line) or a sequence of ints
        """
        self._set(commands.write_arbitrary_wave(slot, samples))
        print(f"Wrote arbitrary wave to slot {slot}")

    def set_arbitrary_wave_from_file(self, slot, path):
        """
        Upload a ``.txt`` sample list or a ``.wav`` container file.

        Clamped samples in a ``.wav`` file are reported as warnings.
        """
        path = Path(path)
        if path.suffix.lower() == waveform.CONTAINER_SUFFIX:
            text, report = waveform.container_to_text(path.read_bytes())
            ColorPrinter.clamp_report(report)
        else:
            text = path.read_text()
        self.set_arbitrary_wave(slot, text)

    def get_arbitrary_wave(self, slot) -> str:
        """Returns the 2048 samples of a slot as newline delimited text."""
        return responses.decode_arbitrary_wave(self._transact(commands.read_arbitrary_wave(slot)))

    def save_arbitrary_wave(self, slot, path):
        """Download a slot to a ``.txt`` sample list or a ``.wav`` container file."""
        text = self.get_arbitrary_wave(slot)
        path = Path(path)
        if path.suffix.lower() == waveform.CONTAINER_SUFFIX:
            path.write_bytes(waveform.text_to_container(text))
        else:
            path.write_text(text + "\n")
        print(f"Saved arbitrary wave {slot} to {path}")
        return path

    def __repr__(self):
        """String representation for debugging."""
        return f"CJDS66_Generator(resource={self.resource_name})"
