"""
Bench check for a real CJDS66 on a serial port.

Steps both channels through a set of waveforms and asks the operator to
confirm each one on a scope, then reads back the settings.

Usage:
    python tests/bench_cjds66.py ASRL/dev/ttyUSB0::INSTR
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from signal_gen import CJDS66_Generator, ColorPrinter, SignalGenError  # noqa: E402


def main():
    if len(sys.argv) < 2:
        ColorPrinter.error("usage: bench_cjds66.py <resource>")
        return 1

    ColorPrinter.header("Testing CJDS66 Signal Generator")

    gen = CJDS66_Generator(sys.argv[1])
    try:
        gen.connect()
    except SignalGenError:
        return 1

    model, serial = gen.get_model_and_serial()
    ColorPrinter.info(f"Model {model}, serial {serial}")

    test_waveforms = ["sine", "square", "triangle", "pos-ladder", "noise", "dc"]
    channels = [1, 2]
    results = {}
    try:
        for channel in channels:
            gen.set_frequency(channel, "1", "kHz")
            gen.set_amplitude(channel, "2")
            gen.set_offset(channel, "0")
            for waveform in test_waveforms:
                ColorPrinter.info(f"Setting CH{channel} to {waveform}")
                gen.set_waveform(channel, waveform)
                gen.enable_output(channel == 1, channel == 2)
                user_input = (
                    input(
                        "Press Enter if the waveform works, type 'no' if it doesn't: "
                    )
                    .strip()
                    .lower()
                )
                results[(channel, waveform)] = user_input != "no"

            readback = (
                gen.get_frequency(channel),
                gen.get_amplitude(channel),
                gen.get_offset(channel),
            )
            results[(channel, "readback")] = readback == (1000.0, 2.0, 0.0)
    finally:
        ColorPrinter.info("Disabling all outputs and disconnecting.")
        gen.disable_output()
        gen.disconnect()

    ColorPrinter.header("Test Summary")
    for (channel, check), passed in results.items():
        status = "PASS" if passed else "FAIL"
        if passed:
            ColorPrinter.success(f"CH{channel} {check}: {status}")
        else:
            ColorPrinter.error(f"CH{channel} {check}: {status}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
