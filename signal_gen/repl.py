#!/usr/bin/env python3
"""
Interactive REPL for the CJDS66 signal generator.

Usage:
    signal-gen ASRL/dev/ttyUSB0::INSTR [--verbose]
    signal-gen --mock
"""

import cmd
import shlex
import sys

from signal_gen import CJDS66_Generator, ColorPrinter, SignalGenError
from signal_gen.src import tracking, waveform
from signal_gen.src.commands import MEASUREMENTS
from signal_gen.src.protocol import (
    BURST_MODES,
    EXTENDED_FUNCTIONS,
    PANELS,
    SWEEP_DIRECTIONS,
    SWEEP_MODES,
    WAVEFORM_NAMES,
)


class GeneratorRepl(cmd.Cmd):
    intro = "CJDS66 Signal Generator REPL. Type 'help' for commands."
    prompt = "cjds66> "

    def __init__(self, gen):
        super().__init__()
        self.gen = gen

    def _parse_args(self, arg):
        try:
            return shlex.split(arg)
        except ValueError as exc:
            ColorPrinter.error(f"Parse error: {exc}")
            return []

    def _print_colored_usage(self, lines):
        """Print colorful usage help for a command."""
        for line in lines:
            if line.strip().startswith("#"):
                ColorPrinter.header(line.strip("# ").strip())
            elif line.strip().startswith("-"):
                print(f"{ColorPrinter.YELLOW}{line}{ColorPrinter.RESET}")
            elif line.strip() and not line.startswith(" "):
                print(f"{ColorPrinter.CYAN}{line}{ColorPrinter.RESET}")
            else:
                print(line)

    def onecmd(self, line):
        try:
            return super().onecmd(line)
        except SignalGenError as exc:
            ColorPrinter.error(str(exc))
            return False

    def emptyline(self):
        pass

    # --------------------------
    # Device info / outputs
    # --------------------------
    def do_info(self, arg):
        "info: show model and serial number"
        model, serial = self.gen.get_model_and_serial()
        ColorPrinter.cyan(f"model:  {model}")
        ColorPrinter.cyan(f"serial: {serial}")

    def do_output(self, arg):
        "output [on|off|10|01|on,off|...]: set or show channel outputs"
        args = self._parse_args(arg)
        if args:
            self.gen.set_channel_output(args[0])
            return
        ch1, ch2 = self.gen.get_channel_output()
        ColorPrinter.cyan(f"CH1={'ON' if ch1 else 'OFF'}, CH2={'ON' if ch2 else 'OFF'}")

    def do_wave(self, arg):
        "wave <1|2> [preset|arb<slot>]: set or show the waveform of a channel"
        args = self._parse_args(arg)
        if not args:
            self._print_colored_usage([
                "wave <1|2> [preset|arb<slot>]",
                f"  - presets: {', '.join(WAVEFORM_NAMES)}",
                "  - example: wave 1 square",
                "  - example: wave 2 arb12",
            ])
            return
        channel = args[0]
        if len(args) == 1:
            ColorPrinter.cyan(f"CH{channel}: {self.gen.get_waveform_name(channel)}")
        elif args[1].lower().startswith("arb"):
            self.gen.set_arbitrary_preset(channel, args[1][3:])
        else:
            self.gen.set_waveform(channel, args[1])

    def _channel_value(self, arg, name, setter, getter, unit):
        args = self._parse_args(arg)
        if not args:
            ColorPrinter.warning(f"usage: {name} <1|2> [value]")
            return
        if len(args) == 1:
            ColorPrinter.cyan(f"CH{args[0]} {name}: {getter(args[0])} {unit}")
        else:
            setter(args[0], args[1])

    def do_freq(self, arg):
        "freq <1|2> [value [uHz|mHz|Hz|kHz|MHz]]: set or show frequency"
        args = self._parse_args(arg)
        if len(args) >= 2:
            self.gen.set_frequency(args[0], args[1], args[2] if len(args) > 2 else "Hz")
        elif args:
            ColorPrinter.cyan(f"CH{args[0]} frequency: {self.gen.get_frequency(args[0])} Hz")
        else:
            ColorPrinter.warning("usage: freq <1|2> [value [unit]]")

    def do_amp(self, arg):
        "amp <1|2> [V]: set or show amplitude"
        self._channel_value(arg, "amplitude", self.gen.set_amplitude, self.gen.get_amplitude, "V")

    def do_offset(self, arg):
        "offset <1|2> [V]: set or show voltage offset"
        self._channel_value(arg, "offset", self.gen.set_offset, self.gen.get_offset, "V")

    def do_duty(self, arg):
        "duty <1|2> [%]: set or show duty cycle"
        self._channel_value(arg, "duty cycle", self.gen.set_duty_cycle, self.gen.get_duty_cycle, "%")

    def do_phase(self, arg):
        "phase [deg]: set or show the phase between channels"
        args = self._parse_args(arg)
        if args:
            self.gen.set_phase(args[0])
        else:
            ColorPrinter.cyan(f"phase: {self.gen.get_phase()} degrees")

    def do_track(self, arg):
        "track <flags>: CH2 follows CH1 (e.g. none, 10100, freq,amp, fa)"
        args = self._parse_args(arg)
        if not args:
            self._print_colored_usage([
                "track <flags>",
                f"  - features: {', '.join(name for _, name in tracking.FEATURES)}",
                "  - example: track freq,amp",
                "  - example: track 11000",
                "  - example: track none",
            ])
            return
        self.gen.set_tracking(args[0])

    # --------------------------
    # Extended functions
    # --------------------------
    def do_panel(self, arg):
        "panel <name>: switch the front panel display"
        args = self._parse_args(arg)
        if not args:
            ColorPrinter.warning(f"usage: panel <{'|'.join(PANELS)}>")
            return
        self.gen.switch_panel(args[0])

    def do_start(self, arg):
        "start <measure|count|sweep|pulse|burst> [channel]: start an extended function"
        args = self._parse_args(arg)
        if not args:
            ColorPrinter.warning(f"usage: start <{'|'.join(EXTENDED_FUNCTIONS)}> [channel]")
            return
        self.gen.start(args[0], args[1] if len(args) > 1 else 1)

    def do_measure(self, arg):
        "measure <quantity>|coupling <ac|dc>|gate <s>|mode <frequency|period>|clear"
        args = self._parse_args(arg)
        if not args:
            self._print_colored_usage([
                "# MEASUREMENT",
                "measure coupling <ac|dc>",
                "measure gate <seconds>",
                "measure mode <frequency|period>",
                "measure clear",
                f"measure <{'|'.join(MEASUREMENTS)}>",
            ])
            return
        sub = args[0].lower()
        if sub == "coupling" and len(args) > 1:
            self.gen.set_measurement_coupling(args[1])
        elif sub == "gate" and len(args) > 1:
            self.gen.set_measurement_gate_time(args[1])
        elif sub == "mode" and len(args) > 1:
            self.gen.set_measurement_mode(args[1])
        elif sub == "clear":
            self.gen.clear_measurement_count()
        else:
            ColorPrinter.cyan(f"{sub}: {self.gen.get_measurement(sub)}")

    def do_sweep(self, arg):
        "sweep start|end <Hz> | time <s> | direction <dir> | mode <linear|logarithm>"
        args = self._parse_args(arg)
        if len(args) < 2:
            self._print_colored_usage([
                "# SWEEP",
                "sweep start <Hz>",
                "sweep end <Hz>",
                "sweep time <seconds>",
                f"sweep direction <{'|'.join(SWEEP_DIRECTIONS)}>",
                f"sweep mode <{'|'.join(SWEEP_MODES)}>",
            ])
            return
        setters = {
            "start": self.gen.set_sweep_start,
            "end": self.gen.set_sweep_end,
            "time": self.gen.set_sweep_time,
            "direction": self.gen.set_sweep_direction,
            "mode": self.gen.set_sweep_mode,
        }
        setter = setters.get(args[0].lower())
        if setter is None:
            ColorPrinter.error(f"Unknown sweep setting '{args[0]}'")
            return
        setter(args[1])

    def do_pulse(self, arg):
        "pulse width|period <n> [ns|us] | offset <%> | amp <V>"
        args = self._parse_args(arg)
        if len(args) < 2:
            self._print_colored_usage([
                "# PULSE",
                "pulse width <n> [ns|us]",
                "pulse period <n> [ns|us]",
                "  - ns values must be a multiple of 5",
                "pulse offset <%>",
                "pulse amp <V>",
            ])
            return
        sub = args[0].lower()
        unit = args[2] if len(args) > 2 else "ns"
        if sub == "width":
            self.gen.set_pulse_width(args[1], unit)
        elif sub == "period":
            self.gen.set_pulse_period(args[1], unit)
        elif sub == "offset":
            self.gen.set_pulse_offset(args[1])
        elif sub in ("amp", "amplitude"):
            self.gen.set_pulse_amplitude(args[1])
        else:
            ColorPrinter.error(f"Unknown pulse setting '{args[0]}'")

    def do_burst(self, arg):
        "burst count <n> | mode <mode> | once"
        args = self._parse_args(arg)
        if args and args[0].lower() == "once":
            self.gen.burst_once()
        elif len(args) > 1 and args[0].lower() == "count":
            self.gen.set_burst_count(args[1])
        elif len(args) > 1 and args[0].lower() == "mode":
            self.gen.set_burst_mode(args[1])
        else:
            ColorPrinter.warning(f"usage: burst count <n> | mode <{'|'.join(BURST_MODES)}> | once")

    # --------------------------
    # Presets / arbitrary waves
    # --------------------------
    def do_preset(self, arg):
        "preset save|recall|clear <0-99>"
        args = self._parse_args(arg)
        actions = {
            "save": self.gen.save_preset,
            "recall": self.gen.recall_preset,
            "load": self.gen.recall_preset,
            "clear": self.gen.clear_preset,
        }
        if len(args) < 2 or args[0].lower() not in actions:
            ColorPrinter.warning("usage: preset save|recall|clear <0-99>")
            return
        actions[args[0].lower()](args[1])

    def do_arb(self, arg):
        "arb write <slot> <file> | read <slot> [file]"
        args = self._parse_args(arg)
        if len(args) < 2:
            self._print_colored_usage([
                "# ARBITRARY WAVES",
                "arb write <1-60> <file.txt|file.wav>",
                "arb read <1-60> [file.txt|file.wav]",
                "  - select a slot as a waveform with: wave <1|2> arb<slot>",
            ])
            return
        sub = args[0].lower()
        if sub == "write" and len(args) > 2:
            self.gen.set_arbitrary_wave_from_file(args[1], args[2])
        elif sub == "read" and len(args) > 2:
            self.gen.save_arbitrary_wave(args[1], args[2])
        elif sub == "read":
            print(self.gen.get_arbitrary_wave(args[1]))
        else:
            ColorPrinter.error(f"Unknown arb command '{args[0]}'")

    def do_convert(self, arg):
        "convert <file.wav|file.txt>: convert between WaveCAD .wav and sample list .txt"
        args = self._parse_args(arg)
        if not args:
            ColorPrinter.warning("usage: convert <file.wav|file.txt>")
            return
        path = args[0]
        if path.lower().endswith(waveform.CONTAINER_SUFFIX):
            output, report = waveform.wav_to_txt(path)
            ColorPrinter.clamp_report(report)
        else:
            output = waveform.txt_to_wav(path)
        ColorPrinter.success(f"Wrote {output}")

    # --------------------------
    # Session
    # --------------------------
    def do_exit(self, arg):
        "exit: quit the REPL"
        return True

    def do_quit(self, arg):
        "quit: quit the REPL"
        return True

    def do_EOF(self, arg):
        print()
        return True

    def do_help(self, arg):
        "help [command]: show help for a command, or list all commands"
        if arg:
            super().do_help(arg)
            return

        C = ColorPrinter.CYAN
        Y = ColorPrinter.YELLOW
        B = ColorPrinter.BOLD
        R = ColorPrinter.RESET

        def section(title):
            print(f"\n{Y}{B}{title}{R}")

        def cmd_line(name, desc):
            print(f"  {C}{name:<10}{R} {desc}")

        print(f"{B}CJDS66 Signal Generator REPL{R}  -  type {C}help <command>{R} for details\n")

        section("CHANNELS")
        cmd_line("info", "model and serial number")
        cmd_line("output", "channel outputs  (on, off, 10, 01)")
        cmd_line("wave", "waveform preset or arbitrary slot")
        cmd_line("freq", "frequency  (uHz, mHz, Hz, kHz, MHz)")
        cmd_line("amp", "amplitude in volts")
        cmd_line("offset", "voltage offset")
        cmd_line("duty", "duty cycle")
        cmd_line("phase", "phase between channels")
        cmd_line("track", "CH2 follows CH1")

        section("EXTENDED FUNCTIONS")
        cmd_line("panel", "switch front panel")
        cmd_line("start", "start measure, count, sweep, pulse or burst")
        cmd_line("measure", "counter settings and readings")
        cmd_line("sweep", "sweep settings")
        cmd_line("pulse", "pulse settings")
        cmd_line("burst", "burst settings")

        section("STORAGE")
        cmd_line("preset", "save, recall or clear presets")
        cmd_line("arb", "write or read arbitrary waves")
        cmd_line("convert", "convert .wav and .txt wave files")
        cmd_line("exit", "quit the REPL")
        print()


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    verbose = "--verbose" in args or "-v" in args
    args = [a for a in args if a not in ("--verbose", "-v")]

    if "--mock" in args:
        from mock_instruments import get_mock_generator
        gen = get_mock_generator(verbose)
    elif args:
        gen = CJDS66_Generator(args[0], verbose=verbose)
        try:
            gen.connect()
        except SignalGenError:
            return 1
    else:
        ColorPrinter.error("usage: signal-gen <resource> [--verbose] | --mock")
        return 1

    try:
        GeneratorRepl(gen).cmdloop()
    finally:
        gen.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())
