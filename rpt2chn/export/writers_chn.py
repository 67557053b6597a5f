"""CHN record assembly.

Layout (little-endian, 32-byte header followed by the channel payload):

  offset  size  field
  0       2     sentinel, int16 = -1
  2       2     MCA number, int16 = 1
  4       2     segment number, int16 = 1
  6       2     start seconds, ASCII 'SS'
  8       4     real time, int32, 1/50 s ticks
  12      4     live time, int32, 1/50 s ticks
  16      12    start date/time, ASCII 'DDMMMYY1HHMM'
  28      2     reserved, int16 = 0
  30      2     number of channels, 16 bits
  32      4*n   channel counts, uint32
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from rpt2chn.errors import FormatError
from rpt2chn.ingest.readers_rpt import validate_channel_count
from rpt2chn.models.report import RptReport, TICKS_PER_SECOND


logger = logging.getLogger(__name__)

CHN_SENTINEL = -1
CHN_MCA_NUMBER = 1
CHN_SEGMENT_NUMBER = 1

CHN_HEADER_DTYPE = np.dtype(
    [
        ("sentinel", "<i2"),
        ("mca_number", "<i2"),
        ("segment_number", "<i2"),
        ("seconds", "S2"),
        ("realtime", "<i4"),
        ("livetime", "<i4"),
        ("start", "S12"),
        ("reserved", "<i2"),
        ("n_channels", "<u2"),
    ]
)
CHN_HEADER_SIZE = CHN_HEADER_DTYPE.itemsize

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def scale_time(seconds: float) -> int:
    """Seconds -> int32 count of 1/50 s ticks, truncated toward zero."""
    ticks = int(seconds * TICKS_PER_SECOND)
    if ticks < _INT32_MIN or ticks > _INT32_MAX:
        raise FormatError(f"time {seconds:g} s does not fit the CHN 32-bit time field")
    return ticks


def encode_header(report: RptReport) -> bytes:
    acq = report.acquisition
    if len(acq.start_field) != 12 or len(acq.seconds_field) != 2:
        raise FormatError("acquisition date fields must be 12 and 2 bytes long")

    hdr = np.zeros(1, dtype=CHN_HEADER_DTYPE)
    hdr["sentinel"] = CHN_SENTINEL
    hdr["mca_number"] = CHN_MCA_NUMBER
    hdr["segment_number"] = CHN_SEGMENT_NUMBER
    hdr["seconds"] = acq.seconds_field
    hdr["realtime"] = scale_time(report.real_time)
    hdr["livetime"] = scale_time(report.live_time)
    hdr["start"] = acq.start_field
    hdr["reserved"] = 0
    hdr["n_channels"] = report.n_channels
    return hdr.tobytes()


def assemble_chn(report: RptReport) -> bytes:
    """Header and channel payload as one CHN record."""
    validate_channel_count(report.n_channels)
    if len(report.channel_payload) != 4 * report.n_channels:
        raise FormatError(
            f"channel payload is {len(report.channel_payload)} bytes, expected {4 * report.n_channels}"
        )
    return encode_header(report) + report.channel_payload


def write_chn(path: str | Path, report: RptReport) -> int:
    """
    Write the CHN record for ``report`` to ``path`` (created or truncated).

    The record is assembled completely before the file is opened, so a failure never
    leaves a partial file behind. Returns the number of bytes written.
    """
    data = assemble_chn(report)
    out = Path(path).expanduser()
    with open(out, "wb") as f:
        f.write(data)
    logger.debug("wrote %d bytes to %s", len(data), out)
    return len(data)
