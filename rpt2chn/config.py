from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from rpt2chn.errors import MissingArgumentError


LOG_LEVEL_ENV = "RPT2CHN_LOG_LEVEL"
_DEFAULT_LOG_LEVEL = logging.WARNING


@dataclass(frozen=True)
class ConverterConfig:
    """
    Immutable run configuration, built once by the CLI and handed to :func:`rpt2chn.convert.convert`.

    input_path:
      RPT report to read. Must exist before parsing starts.
    output_path:
      CHN file to create. Truncated if it exists; written only after the whole report validated.
    encoding:
      Text encoding of the report. Undecodable bytes are replaced; they can only matter inside
      the date/time tokens, which are then rejected as non-ASCII.
    """
    input_path: Path
    output_path: Path
    encoding: str = "utf-8"

    @classmethod
    def from_args(cls, in_file: Optional[str], out_file: Optional[str]) -> "ConverterConfig":
        if not in_file:
            raise MissingArgumentError("missing value for --if (RPT file to read from)")
        if not out_file:
            raise MissingArgumentError("missing value for --of (CHN file to write to)")
        return cls(input_path=Path(in_file), output_path=Path(out_file))


def log_level_from_env(environ: Optional[Mapping[str, str]] = None) -> int:
    """Logging level named by RPT2CHN_LOG_LEVEL; unknown or unset names give WARNING."""
    env = os.environ if environ is None else environ
    name = str(env.get(LOG_LEVEL_ENV, "")).strip().upper()
    if not name:
        return _DEFAULT_LOG_LEVEL
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return _DEFAULT_LOG_LEVEL
