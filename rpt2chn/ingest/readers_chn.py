from __future__ import annotations

import errno
from pathlib import Path
from typing import Optional

import numpy as np

from rpt2chn.errors import FormatError
from rpt2chn.export.writers_chn import CHN_HEADER_DTYPE, CHN_HEADER_SIZE, CHN_SENTINEL
from rpt2chn.models.report import ChnSpectrum


def decode_chn(data: bytes, *, source_path: Optional[Path] = None) -> ChnSpectrum:
    """
    Decode a CHN record produced by :func:`rpt2chn.export.writers_chn.assemble_chn`.

    STRICT: the payload must hold exactly n_channels uint32 values; trailers are rejected.
    """
    if len(data) < CHN_HEADER_SIZE:
        raise FormatError(f"CHN data too small: {len(data)} bytes, header needs {CHN_HEADER_SIZE}")

    hdr = np.frombuffer(data, dtype=CHN_HEADER_DTYPE, count=1)[0]
    if int(hdr["sentinel"]) != CHN_SENTINEL:
        raise FormatError(f"not a CHN record: sentinel={int(hdr['sentinel'])}")

    n = int(hdr["n_channels"])
    expected = CHN_HEADER_SIZE + 4 * n
    if len(data) != expected:
        raise FormatError(f"CHN size mismatch: {len(data)} bytes for {n} channels (expected {expected})")

    if n:
        counts = np.frombuffer(data, dtype="<u4", count=n, offset=CHN_HEADER_SIZE).copy()
    else:
        counts = np.zeros(0, dtype="<u4")

    return ChnSpectrum(
        sentinel=int(hdr["sentinel"]),
        mca_number=int(hdr["mca_number"]),
        segment_number=int(hdr["segment_number"]),
        seconds_field=bytes(data[6:8]),
        realtime_ticks=int(hdr["realtime"]),
        livetime_ticks=int(hdr["livetime"]),
        start_field=bytes(data[16:28]),
        reserved=int(hdr["reserved"]),
        n_channels=n,
        counts=counts,
        source_path=source_path,
    )


class ChnReader:
    """Reads a CHN file back into a :class:`~rpt2chn.models.report.ChnSpectrum`."""

    def read(self, file_path: str | Path) -> ChnSpectrum:
        path = Path(file_path).expanduser().resolve()
        if not path.exists():
            raise FileNotFoundError(errno.ENOENT, "no such file", str(path))
        return decode_chn(path.read_bytes(), source_path=path)
