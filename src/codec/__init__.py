"""Raster codec module for pgmfilter."""

from .image import PGMImage
from .pgm import (FormatError, TruncatedDataError, decode, encode,
                  decode_bytes, encode_bytes, read_pgm, write_pgm)

__all__ = [
    "PGMImage", "FormatError", "TruncatedDataError",
    "decode", "encode", "decode_bytes", "encode_bytes", "read_pgm", "write_pgm"
]
