"""Export package - CHN record assembly and writing."""

from .writers_chn import CHN_HEADER_DTYPE, CHN_HEADER_SIZE, assemble_chn, encode_header, scale_time, write_chn

__all__ = [
    "CHN_HEADER_DTYPE",
    "CHN_HEADER_SIZE",
    "assemble_chn",
    "encode_header",
    "scale_time",
    "write_chn",
]
