from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np


# CHN time fields count ticks of 1/50 s.
TICKS_PER_SECOND = 50.0


@dataclass(frozen=True)
class AcquisitionDate:
    """
    Acquisition start parsed from the first report line.

    date_token / time_token: raw 'DD-MM-YYYY' and 'HH:MM:SS' tokens as found in the file.
    start_field: 12 ASCII bytes, DD + MMM + YY + '1' + HH + MM (e.g. b'01JUN2011345').
    seconds_field: 2 ASCII bytes, SS.
    """
    date_token: str
    time_token: str
    month: int
    start_field: bytes
    seconds_field: bytes


@dataclass(frozen=True)
class RptReport:
    """
    In-memory representation of one RPT report after parsing and validation.

    Notes
    - live_time / real_time are in seconds, already rounded to 32-bit float precision.
    - channel_payload holds n_channels little-endian uint32 values, in file order.
    - warnings collects non-fatal observations (label-only lines, blank lines).
    """
    acquisition: AcquisitionDate
    live_time: float
    real_time: float
    n_channels: int
    channel_payload: bytes
    warnings: Tuple[str, ...] = ()
    source_path: Optional[Path] = None

    @property
    def counts(self) -> np.ndarray:
        return np.frombuffer(self.channel_payload, dtype="<u4")

    def to_chn_bytes(self) -> bytes:
        """Assemble the CHN record for this report."""
        from rpt2chn.export.writers_chn import assemble_chn

        return assemble_chn(self)


@dataclass(frozen=True)
class ChnSpectrum:
    """
    Decoded CHN record.

    Times are kept in the raw 1/50 s ticks stored in the file; the properties
    convert them to seconds.
    """
    sentinel: int
    mca_number: int
    segment_number: int
    seconds_field: bytes
    realtime_ticks: int
    livetime_ticks: int
    start_field: bytes
    reserved: int
    n_channels: int
    counts: np.ndarray
    source_path: Optional[Path] = None

    @property
    def real_time(self) -> float:
        return self.realtime_ticks / TICKS_PER_SECOND

    @property
    def live_time(self) -> float:
        return self.livetime_ticks / TICKS_PER_SECOND

    @property
    def total_counts(self) -> int:
        return int(self.counts.sum(dtype=np.uint64))
