import numpy as np
import pytest

from signal_gen.src import waveform
from signal_gen.src.errors import ParseFailure, RangeViolation, UnsupportedValue


def container(values):
    return np.asarray(values, dtype="<i2").tobytes()


def sample_text(values):
    return "".join(f"{value}\n" for value in values)


def test_container_round_trip():
    samples = np.arange(2048) * 2
    text = waveform.samples_to_text(samples)
    data = waveform.text_to_container(text)
    assert len(data) == 4096

    back, report = waveform.container_to_text(data)
    assert back == text
    assert not report
    assert report.total_count == 0


def test_container_is_little_endian_and_centred():
    data = waveform.text_to_container([0] + [2048] * 2046 + [4095])
    assert data[:2] == (-2048).to_bytes(2, "little", signed=True)
    assert data[2:4] == b"\x00\x00"
    assert data[-2:] == (2047).to_bytes(2, "little", signed=True)


def test_clamped_samples_are_reported():
    values = [0] * 2048
    values[0] = -2050
    values[1] = -32768
    values[10] = 2048
    values[20] = 32767

    samples, report = waveform.container_to_samples(container(values))

    assert samples[0] == 0 and samples[1] == 0
    assert samples[10] == 4095 and samples[20] == 4095
    assert samples[5] == 2048

    assert report.min_count == 2
    assert report.min_total == 30722
    assert report.max_count == 2
    assert report.max_total == -30721
    assert report.total_count == 4
    assert report.total_adjustment == 61443
    assert [event.line for event in report.events] == [1, 2, 11, 21]
    assert [event.bound for event in report.events] == ["min", "min", "max", "max"]
    assert report.events[0].value == -2
    assert "4 sample(s)" in report.summary()


@pytest.mark.parametrize("size", [0, 4094, 4098])
def test_container_size(size):
    with pytest.raises(UnsupportedValue):
        waveform.container_to_samples(b"\x00" * size)


@pytest.mark.parametrize("count", [2047, 2049])
def test_sample_count(count):
    with pytest.raises(UnsupportedValue):
        waveform.parse_samples(sample_text([0] * count))


def test_sample_range():
    values = [0] * 2048
    values[7] = 4096
    with pytest.raises(RangeViolation, match="sample 8"):
        waveform.parse_samples(sample_text(values))

    values[7] = -1
    with pytest.raises(RangeViolation):
        waveform.parse_samples(values)


def test_non_integer_line():
    values = ["0"] * 2048
    values[3] = "abc"
    with pytest.raises(ParseFailure, match="line 4"):
        waveform.parse_samples("\n".join(values))


def test_blank_lines_are_skipped():
    text = sample_text([1] * 2048) + "\n\n"
    samples = waveform.parse_samples(text)
    assert samples.shape == (2048,)
    assert samples.dtype == np.int32


def test_swap_extension():
    assert waveform.swap_extension("wave.wav").name == "wave.txt"
    assert waveform.swap_extension("wave.WAV").name == "wave.txt"
    assert waveform.swap_extension("wave.txt").name == "wave.wav"


def test_file_conversion(tmp_path):
    values = [int(v) for v in (np.arange(2048) % 4096)]
    source = tmp_path / "ramp.txt"
    source.write_text(sample_text(values))

    wav = waveform.txt_to_wav(source)
    assert wav == tmp_path / "ramp.wav"
    assert wav.stat().st_size == 4096

    source.unlink()
    txt, report = waveform.wav_to_txt(wav)
    assert txt == source
    assert not report
    assert txt.read_text() == sample_text(values)


def test_wav_to_txt_reports_clamping(tmp_path):
    values = [0] * 2048
    values[100] = 3000
    path = tmp_path / "spike.wav"
    path.write_bytes(container(values))

    _, report = waveform.wav_to_txt(path)
    assert report.max_count == 1
    assert report.events[0].line == 101
    assert (tmp_path / "spike.txt").read_text().splitlines()[100] == "4095"
