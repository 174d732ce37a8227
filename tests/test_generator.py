import numpy as np
import pytest
from pyvisa.errors import VisaIOError

from signal_gen import (
    CJDS66_Generator,
    InvalidChannel,
    IoFailure,
    MalformedResponse,
    PrecisionExceeded,
    RangeViolation,
    Tracking,
    UnsupportedValue,
)


def test_model_and_serial(gen, device):
    assert gen.get_model() == "60"
    assert gen.get_serial() == "1234567890"
    assert gen.get_model_and_serial() == ("60", "1234567890")
    assert device.commands == [":r00=0.\r\n", ":r01=0.\r\n", ":r00=1.\r\n"]


def test_channel_output(gen, device):
    gen.set_channel_output("on,off")
    assert gen.get_channel_output() == (True, False)
    gen.enable_output(False, True)
    assert gen.get_channel_output() == (False, True)
    gen.disable_output()
    assert gen.get_channel_output() == (False, False)
    assert device.commands[0] == ":w20=1,0.\r\n"


def test_waveform(gen, device):
    gen.set_waveform(2, "triangle")
    assert device.commands[-1] == ":w22=3.\r\n"
    assert gen.get_waveform(2) == 3
    assert gen.get_waveform_name(2) == "triangle"

    gen.set_arbitrary_preset(1, 12)
    assert device.commands[-1] == ":w21=112.\r\n"
    assert gen.get_waveform_name(1) == "arbitrary12"


@pytest.mark.parametrize(
    "setter,getter,value",
    [
        ("set_amplitude", "get_amplitude", 1.005),
        ("set_offset", "get_offset", -2.5),
        ("set_duty_cycle", "get_duty_cycle", 25.5),
    ],
)
@pytest.mark.parametrize("channel", [1, 2])
def test_channel_parameters(gen, setter, getter, value, channel):
    getattr(gen, setter)(channel, str(value))
    assert getattr(gen, getter)(channel) == value


def test_frequency(gen, device):
    gen.set_frequency(1, "1234.5")
    assert device.commands[-1] == ":w23=123450,0.\r\n"
    assert gen.get_frequency(1) == 1234.5

    gen.set_frequency(2, "2.5", "kHz")
    assert device.commands[-1] == ":w24=250000,1.\r\n"


def test_phase(gen, device):
    gen.set_phase("90.5")
    assert device.commands[-1] == ":w31=905.\r\n"
    assert gen.get_phase() == 90.5


def test_offset_read_followed_by_write(gen, device):
    # an offset reply is one byte longer than the declared read
    assert gen.get_offset(1) == 0.0
    gen.set_amplitude(1, "2")
    assert gen.get_amplitude(1) == 2.0


def test_tracking(gen, device):
    assert gen.set_tracking("freq,amp") == Tracking.FREQUENCY | Tracking.AMPLITUDE
    assert device.commands[-1] == ":w54=1,0,1,0,0.\r\n"
    assert gen.set_tracking(0) == Tracking.NONE
    assert device.commands[-1] == ":w54=0,0,0,0,0.\r\n"


def test_start_sweep_switches_panel_first(gen, device):
    gen.start("sweep", channel="2")
    assert device.commands == [":w33=7.\r\n", ":w32=0,1,0,0.\r\n"]


def test_start_measure(gen, device):
    gen.start("measure")
    assert device.commands == [":w32=0,0,0,0.\r\n"]


def test_measurements(gen, device):
    gen.set_measurement_coupling("AC")
    gen.set_measurement_gate_time("1")
    gen.set_measurement_mode("period")
    gen.clear_measurement_count()
    assert gen.get_measurement("count") == 1234.0
    assert gen.get_measurement("frequency") == 100000.0
    assert gen.get_measurement("frequency_period") == 1000.0
    assert gen.get_measurement("duty_cycle") == 500.0
    with pytest.raises(UnsupportedValue):
        gen.get_measurement("voltage")


def test_sweep_pulse_burst(gen, device):
    gen.set_sweep_start("10")
    gen.set_sweep_end("1000.25")
    gen.set_sweep_time("5.5")
    gen.set_sweep_direction("rise_fall")
    gen.set_sweep_mode("logarithm")
    gen.set_pulse_width("1000")
    gen.set_pulse_period("20", "us")
    gen.set_pulse_offset("50")
    gen.set_pulse_amplitude("5")
    gen.set_burst_count("3")
    gen.set_burst_mode("manual")
    gen.burst_once()
    assert device.commands == [
        ":w40=1000.\r\n",
        ":w41=100025.\r\n",
        ":w42=55.\r\n",
        ":w43=2.\r\n",
        ":w44=1.\r\n",
        ":w45=1000,0.\r\n",
        ":w46=20,1.\r\n",
        ":w47=50.\r\n",
        ":w48=500.\r\n",
        ":w49=3.\r\n",
        ":w50=0.\r\n",
        ":w59=1.\r\n",
    ]


def test_presets(gen, device):
    gen.save_preset(5)
    gen.recall_preset("5")
    gen.clear_preset(5)
    assert device.commands == [":w70=5.\r\n", ":w71=5.\r\n", ":w72=5.\r\n"]


@pytest.mark.parametrize(
    "call,error",
    [
        (lambda gen: gen.set_amplitude(1, "20.001"), RangeViolation),
        (lambda gen: gen.set_amplitude(3, "1"), InvalidChannel),
        (lambda gen: gen.set_offset(1, "1.001"), PrecisionExceeded),
        (lambda gen: gen.set_frequency(1, "1", "GHz"), UnsupportedValue),
        (lambda gen: gen.set_waveform(1, "sawtooth"), UnsupportedValue),
        (lambda gen: gen.set_tracking("fx"), UnsupportedValue),
        (lambda gen: gen.start("sweep", channel=3), InvalidChannel),
        (lambda gen: gen.set_pulse_width("1001"), UnsupportedValue),
        (lambda gen: gen.set_arbitrary_wave(1, [0] * 2047), UnsupportedValue),
    ],
)
def test_validation_happens_before_any_write(gen, device, call, error):
    with pytest.raises(error):
        call(gen)
    assert device.written == []


def test_arbitrary_wave_round_trip(gen, device):
    samples = list(range(0, 4096, 2))
    gen.set_arbitrary_wave(7, samples)
    assert device.commands[-1].startswith(":a07=0,2,4,")
    assert gen.get_arbitrary_wave(7) == "\n".join(map(str, samples))


def test_unwritten_arbitrary_slot(gen):
    assert gen.get_arbitrary_wave(60).splitlines() == ["2048"] * 2048


def test_arbitrary_wave_files(gen, device, tmp_path):
    samples = [i % 4096 for i in range(2048)]
    source = tmp_path / "ramp.txt"
    source.write_text("".join(f"{s}\n" for s in samples))
    gen.set_arbitrary_wave_from_file(3, source)

    wav = gen.save_arbitrary_wave(3, tmp_path / "copy.wav")
    data = np.frombuffer(wav.read_bytes(), dtype="<i2")
    assert list(data[:3]) == [-2048, -2047, -2046]

    txt = gen.save_arbitrary_wave(3, tmp_path / "copy.txt")
    assert txt.read_text() == source.read_text()


def test_wav_upload_reports_clamping(gen, device, tmp_path, capsys):
    values = np.zeros(2048, dtype="<i2")
    values[4] = 3000
    path = tmp_path / "spike.wav"
    path.write_bytes(values.tobytes())

    gen.set_arbitrary_wave_from_file(2, path)

    out = capsys.readouterr().out
    assert "line 5" in out
    assert "clamped 1 sample(s)" in out
    assert device.commands[-1].startswith(":a02=2048,2048,2048,2048,4095,")


def test_timeout_raises_io_failure(gen, device):
    device.next_response = b""
    with pytest.raises(IoFailure) as excinfo:
        gen.get_amplitude(1)
    assert excinfo.value.operation == "get_amplitude"
    assert isinstance(excinfo.value.pyvisa_error, VisaIOError)


def test_malformed_reply(gen, device):
    device.next_response = b":r25=abc.\r\n"
    with pytest.raises(MalformedResponse):
        gen.get_amplitude(1)


def test_not_connected():
    gen = CJDS66_Generator("MOCK::CJDS66", command_delay=0)
    assert not gen.connected
    with pytest.raises(IoFailure):
        gen.get_model()


def test_verbose_traffic(device, capsys):
    gen = CJDS66_Generator("MOCK::CJDS66", verbose=True, command_delay=0)
    gen.attach(device)
    gen.get_amplitude(1)
    out = capsys.readouterr().out
    assert ">> :r25=0.\\r\\n" in out
    assert "<< :r25=5000.\\r\\n" in out


def test_disconnect_closes_device(gen, device):
    gen.disconnect()
    assert device.closed
    assert not gen.connected
