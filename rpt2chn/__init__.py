"""rpt2chn -- convert RPT spectrum reports to the CHN binary spectrum format.

The conversion is a single linear pipeline:
- Header: acquisition date/time from line 1
- Scalars: live time (line 2) and real time (line 3)
- Channels: every remaining line, '<index> <count> <count> ...'
- Record: 32-byte little-endian CHN header followed by uint32 channel counts

Key principles:
- The first malformed line aborts the run
- The channel count must be a power of two
- Nothing is written unless the whole report validated

Main subpackages:
- ingest: RPT parser and CHN decoder
- export: CHN record assembly
- models: Data models (AcquisitionDate, RptReport, ChnSpectrum)
"""

__version__ = "1.0.0"

from .config import ConverterConfig
from .convert import convert
from .errors import FormatError, MissingArgumentError, Rpt2ChnError, ValidationError

__all__ = [
    "ConverterConfig",
    "convert",
    "FormatError",
    "MissingArgumentError",
    "Rpt2ChnError",
    "ValidationError",
]
