from __future__ import annotations

import errno
import logging
import re
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar

import numpy as np

from rpt2chn.errors import FormatError, ValidationError
from rpt2chn.models.report import AcquisitionDate, RptReport


logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_MONTH_NAMES = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)
_INTEGER_RE = re.compile(r"^[+-]?\d+$", re.ASCII)

_FLOAT32_MAX = float(np.finfo(np.float32).max)
_UINT32_MAX = 0xFFFFFFFF

# The CHN channel-count field is 16 bits wide; 2**15 is the largest power of two it carries.
MAX_CHANNELS = 32768


def parse_acquisition_date(line: str) -> AcquisitionDate:
    """
    Parse the first report line.

    Fields are separated by single spaces; field 2 is 'DD-MM-YYYY', field 3 is 'HH:MM:SS'.
    """
    items = line.strip().split(" ")
    if len(items) < 4:
        raise FormatError(f"acquisition date: expected at least 4 fields, got {len(items)}")

    dt, tm = items[2], items[3]
    if len(dt) != 10 or len(tm) != 8:
        raise FormatError(f"acquisition date: invalid date/time tokens {dt!r} {tm!r}")
    if not (dt.isascii() and tm.isascii()):
        raise FormatError(f"acquisition date: non-ASCII date/time tokens {dt!r} {tm!r}")

    month_txt = dt[3:5].strip()
    month = int(month_txt) if _INTEGER_RE.match(month_txt) else 0
    if month < 1 or month > 12:
        raise FormatError(f"acquisition date: month out of range in {dt!r}")

    parts = (dt[:2], _MONTH_NAMES[month - 1], dt[8:10], "1", tm[:2], tm[3:5])
    return AcquisitionDate(
        date_token=dt,
        time_token=tm,
        month=month,
        start_field="".join(parts).encode("ascii"),
        seconds_field=tm[6:8].encode("ascii"),
    )


def parse_trailing_float(line: str) -> float:
    """Last space-separated field of a line as a decimal, rounded to float32 precision."""
    items = line.strip().split(" ")
    token = items[-1]
    if not token:
        raise FormatError("no valid decimal found")
    if not _DECIMAL_RE.match(token):
        raise FormatError(f"invalid decimal {token!r}")
    value = float(token)
    if abs(value) > _FLOAT32_MAX:
        raise FormatError(f"decimal {token!r} out of range")
    return float(np.float32(value))


def parse_channel_values(line: str) -> List[int]:
    """
    Channel magnitudes on one data line.

    The first token is a channel-group index and is ignored; blank and label-only lines
    yield an empty list.
    """
    items = line.split()
    values: List[int] = []
    for tok in items[1:]:
        if not _INTEGER_RE.match(tok):
            raise FormatError(f"invalid channel value {tok!r}")
        v = int(tok)
        if v < 0 or v > _UINT32_MAX:
            raise FormatError(f"channel value {tok} out of range 0..{_UINT32_MAX}")
        values.append(v)
    return values


def is_power_of_two(n: int) -> bool:
    return n != 0 and (n & (n - 1)) == 0


def validate_channel_count(n: int) -> None:
    if not is_power_of_two(n):
        raise ValidationError("number of channels is not a power of two")
    if n > MAX_CHANNELS:
        raise ValidationError(f"number of channels {n} exceeds the CHN limit of {MAX_CHANNELS}")


class ChannelEncoder:
    """
    Accumulates channel lines into a little-endian uint32 payload.

    The encoder owns its buffer; :meth:`payload` returns an immutable copy.
    """

    def __init__(self) -> None:
        self._buf = bytearray()
        self.n_channels = 0

    def absorb(self, line: str) -> int:
        """Encode the channels of one line; returns how many it contributed."""
        values = parse_channel_values(line)
        if values:
            self._buf += np.asarray(values, dtype="<u4").tobytes()
            self.n_channels += len(values)
        return len(values)

    def validate(self) -> None:
        validate_channel_count(self.n_channels)

    @property
    def payload(self) -> bytes:
        return bytes(self._buf)


def _at_line(lineno: int, func: Callable[[str], _T], line: str) -> _T:
    try:
        return func(line)
    except FormatError as e:
        raise FormatError(f"line {lineno}: {e}") from e


def _next_line(it: Iterator[str], lineno: int, what: str) -> str:
    line = next(it, None)
    if line is None:
        raise FormatError(f"line {lineno}: missing {what} line")
    return line


class RptReader:
    """
    Reader for RPT spectrum reports.

    Layout:
      line 1: '... ... DD-MM-YYYY HH:MM:SS ...'
      line 2: '... <live time [s]>'
      line 3: '... <real time [s]>'
      line 4..: '<index> <ch> <ch> ...' or blank

    Lines are consumed strictly in order and the first malformed line aborts the read.
    The channel count is validated before the report is returned.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def read(self, file_path: str | Path) -> RptReport:
        path = Path(file_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(errno.ENOENT, "no such file", str(path))

        with open(path, "r", encoding=self.encoding, errors="replace") as f:
            return self.read_lines(f, source_path=path)

    def read_lines(self, lines: Iterable[str], *, source_path: Optional[Path] = None) -> RptReport:
        it = iter(lines)

        acquisition = _at_line(1, parse_acquisition_date, _next_line(it, 1, "acquisition date"))
        logger.debug("acquisition start=%r seconds=%r", acquisition.start_field, acquisition.seconds_field)

        live_time = _at_line(2, parse_trailing_float, _next_line(it, 2, "live time"))
        real_time = _at_line(3, parse_trailing_float, _next_line(it, 3, "real time"))
        logger.debug("live_time=%g s, real_time=%g s", live_time, real_time)

        encoder = ChannelEncoder()
        warnings: List[str] = []
        n_blank = 0
        for lineno, line in enumerate(it, start=4):
            if not line.strip():
                n_blank += 1
                continue
            n = _at_line(lineno, encoder.absorb, line)
            if n == 0:
                warnings.append(f"line {lineno}: label-only line, no channels")

        if n_blank:
            warnings.append(f"skipped {n_blank} blank lines")

        encoder.validate()
        logger.debug("absorbed %d channels", encoder.n_channels)

        return RptReport(
            acquisition=acquisition,
            live_time=live_time,
            real_time=real_time,
            n_channels=encoder.n_channels,
            channel_payload=encoder.payload,
            warnings=tuple(warnings),
            source_path=source_path,
        )
