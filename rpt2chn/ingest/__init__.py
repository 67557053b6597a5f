"""Ingest package - spectrum file readers.

This package handles:
- Parsing RPT text reports (acquisition date, live/real time, channel lines)
- Decoding CHN binary records back into memory

Key classes:
- RptReader: Reads an RPT report into a validated RptReport
- ChannelEncoder: Accumulates channel lines into the uint32 payload
- ChnReader: Reads a CHN file into a ChnSpectrum

Design principle:
- Readers either return a fully validated object or raise on the first bad line
- No permissive mode: token lengths and the power-of-two channel count are always checked
"""
