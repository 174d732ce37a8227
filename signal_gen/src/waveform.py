"""
Arbitrary waveform sample conversion.

The device stores 2048 samples per wave as 12-bit DAC codes (0-4095) and
transfers them as comma separated integers. WaveCAD style ``.wav`` files hold
the same wave as 2048 little-endian int16 values centred on zero, so a file
value ``v`` is the device code ``v + 2048``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple, Union

import numpy as np

from .errors import ParseFailure, RangeViolation, UnsupportedValue
from .protocol import SAMPLE_COUNT, SAMPLE_MAX, SAMPLE_MIN

SAMPLE_OFFSET = 2048
CONTAINER_DTYPE = "<i2"
CONTAINER_SIZE = SAMPLE_COUNT * np.dtype(CONTAINER_DTYPE).itemsize

TEXT_SUFFIX = ".txt"
CONTAINER_SUFFIX = ".wav"


@dataclass(frozen=True)
class ClampEvent:
    """One sample forced back into the device range."""

    line: int
    value: int
    adjustment: int

    @property
    def bound(self) -> str:
        return "min" if self.adjustment > 0 else "max"


@dataclass
class ClampReport:
    """Clamped samples found while converting a container to text."""

    events: List[ClampEvent] = field(default_factory=list)
    min_count: int = 0
    min_total: int = 0
    max_count: int = 0
    max_total: int = 0

    @property
    def total_count(self) -> int:
        return self.min_count + self.max_count

    @property
    def total_adjustment(self) -> int:
        # max adjustments are negative, so this is the summed magnitude
        return self.min_total - self.max_total

    def __bool__(self):
        return self.total_count > 0

    def summary(self) -> str:
        return (
            f"clamped {self.total_count} sample(s), total adjustment {self.total_adjustment}: "
            f"{self.min_count} at min (+{self.min_total}), "
            f"{self.max_count} at max ({self.max_total})"
        )


def container_to_samples(data: bytes) -> Tuple[np.ndarray, ClampReport]:
    """
    Decode a 4096 byte container into device sample codes.

    Out of range samples are clamped to 0 or 4095 and recorded in the report.

    Raises:
        UnsupportedValue: If the buffer is not exactly 4096 bytes
    """
    if len(data) != CONTAINER_SIZE:
        raise UnsupportedValue(f"waveform container must be {CONTAINER_SIZE} bytes, got {len(data)}")

    raw = np.frombuffer(data, dtype=CONTAINER_DTYPE).astype(np.int32) + SAMPLE_OFFSET
    samples = np.clip(raw, SAMPLE_MIN, SAMPLE_MAX)

    report = ClampReport()
    for index in np.flatnonzero(raw != samples):
        value = int(raw[index])
        adjustment = int(samples[index]) - value
        report.events.append(ClampEvent(int(index) + 1, value, adjustment))
        if adjustment > 0:
            report.min_count += 1
            report.min_total += adjustment
        else:
            report.max_count += 1
            report.max_total += adjustment

    return samples, report


def samples_to_text(samples: Iterable[int]) -> str:
    """Render sample codes one per line, each line newline terminated."""
    return "".join(f"{int(sample)}\n" for sample in samples)


def container_to_text(data: bytes) -> Tuple[str, ClampReport]:
    """Convert a ``.wav`` container buffer to device sample-list text."""
    samples, report = container_to_samples(data)
    return samples_to_text(samples), report


def parse_samples(source: Union[str, Iterable[int]]) -> np.ndarray:
    """
    Parse and check one full wave of device sample codes.

    Args:
        source: Newline delimited text, or a sequence of integers

    Returns:
        int32 array of exactly 2048 samples

    Raises:
        ParseFailure: A line is not an integer
        RangeViolation: A sample is outside 0-4095
        UnsupportedValue: Not exactly 2048 samples
    """
    if isinstance(source, str):
        values = []
        for number, line in enumerate(source.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                values.append(int(line))
            except ValueError:
                raise ParseFailure(f"line {number}: not an integer: {line!r}") from None
    else:
        values = [int(value) for value in source]

    if len(values) != SAMPLE_COUNT:
        raise UnsupportedValue(f"waveform needs exactly {SAMPLE_COUNT} samples, got {len(values)}")

    samples = np.asarray(values, dtype=np.int64)
    bad = np.flatnonzero((samples < SAMPLE_MIN) | (samples > SAMPLE_MAX))
    if bad.size:
        index = int(bad[0])
        raise RangeViolation(
            f"sample {index + 1}: {int(samples[index])} outside {SAMPLE_MIN}-{SAMPLE_MAX}"
        )
    return samples.astype(np.int32)


def text_to_container(source: Union[str, Iterable[int]]) -> bytes:
    """Convert device sample-list text to a 4096 byte ``.wav`` container."""
    samples = parse_samples(source)
    return (samples - SAMPLE_OFFSET).astype(CONTAINER_DTYPE).tobytes()


def swap_extension(path: Union[str, Path]) -> Path:
    """Return the path with ``.wav`` and ``.txt`` swapped."""
    path = Path(path)
    if path.suffix.lower() == CONTAINER_SUFFIX:
        return path.with_suffix(TEXT_SUFFIX)
    return path.with_suffix(CONTAINER_SUFFIX)


def wav_to_txt(path: Union[str, Path]) -> Tuple[Path, ClampReport]:
    """
    Convert a ``.wav`` container file to a ``.txt`` sample list beside it.

    Returns:
        (output path, clamp report)
    """
    text, report = container_to_text(Path(path).read_bytes())
    output = swap_extension(path)
    output.write_text(text)
    return output, report


def txt_to_wav(path: Union[str, Path]) -> Path:
    """Convert a ``.txt`` sample list to a ``.wav`` container file beside it."""
    data = text_to_container(Path(path).read_text())
    output = swap_extension(path)
    output.write_bytes(data)
    return output
