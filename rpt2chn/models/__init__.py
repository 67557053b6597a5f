from .report import AcquisitionDate, ChnSpectrum, RptReport, TICKS_PER_SECOND

__all__ = [
    "AcquisitionDate",
    "ChnSpectrum",
    "RptReport",
    "TICKS_PER_SECOND",
]
