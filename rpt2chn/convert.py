from __future__ import annotations

import logging

from rpt2chn.config import ConverterConfig
from rpt2chn.export.writers_chn import write_chn
from rpt2chn.ingest.readers_rpt import RptReader
from rpt2chn.models.report import RptReport


logger = logging.getLogger(__name__)


def convert(config: ConverterConfig) -> RptReport:
    """
    Convert one RPT report into a CHN file.

    ReadHeader -> ReadLiveTime -> ReadRealTime -> ReadChannels -> Validate -> Write.
    The output file is only created once the whole report parsed and validated;
    any error propagates to the caller and nothing is written.
    """
    report = RptReader(encoding=config.encoding).read(config.input_path)
    for w in report.warnings:
        logger.debug("%s: %s", config.input_path, w)

    n_bytes = write_chn(config.output_path, report)
    logger.info(
        "converted %s -> %s (%d channels, %d bytes)",
        config.input_path,
        config.output_path,
        report.n_channels,
        n_bytes,
    )
    return report
