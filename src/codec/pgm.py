"""Binary PGM (P5) reader and writer."""

import io
import logging
from typing import BinaryIO

import numpy as np

from config.settings import SETTINGS
from .image import PGMImage

logger = logging.getLogger(__name__)

WHITESPACE = b" \t\n\v\f\r"
COMMENT = b"#"


class FormatError(ValueError):
    """Raised when a stream is not an 8-bit binary PGM."""


class TruncatedDataError(OSError):
    """Raised when a stream ends before the header or pixel body is complete."""


class _HeaderReader:
    """Byte-at-a-time tokenizer over a PGM header."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.max_token_length = SETTINGS["codec"].MAX_TOKEN_LENGTH

    def _read_byte(self) -> bytes:
        byte = self.stream.read(1)
        if not byte:
            raise TruncatedDataError("unexpected end of file in header")
        return byte

    def _skip_separators(self) -> bytes:
        """Skip whitespace and comments, return the first byte of the next token."""
        byte = self._read_byte()
        while byte in WHITESPACE or byte == COMMENT:
            if byte == COMMENT:
                while byte not in (b"\n", b"\r"):
                    byte = self._read_byte()
            byte = self._read_byte()
        return byte

    def read_token(self) -> bytes:
        token = self._skip_separators()
        while len(token) <= self.max_token_length:
            byte = self.stream.read(1)
            if not byte or byte in WHITESPACE:
                return token
            token += byte
        raise FormatError("unsupported format")

    def read_int(self, name: str) -> int:
        """Read an unsigned decimal field and consume the byte that ends it."""
        byte = self._skip_separators()
        digits = b""
        while byte.isdigit():
            digits += byte
            if len(digits) > self.max_token_length:
                raise FormatError(f"invalid header field: {name}")
            byte = self._read_byte()
        if not digits:
            raise FormatError(f"invalid header field: {name}")
        return int(digits)


def _read_body(stream: BinaryIO, expected: int, chunk_size: int) -> bytearray:
    """Read exactly ``expected`` bytes in bounded chunks.

    The header size is untrusted, so the buffer only grows as data arrives.
    """
    data = bytearray()
    while len(data) < expected:
        chunk = stream.read(min(chunk_size, expected - len(data)))
        if not chunk:
            raise TruncatedDataError(
                f"short read: expected {expected} pixel bytes, got {len(data)}"
            )
        data += chunk
    return data


def decode(stream: BinaryIO) -> PGMImage:
    """Decode a binary PGM from a readable byte stream.

    Args:
        stream: Binary stream positioned at the start of the file

    Returns:
        Decoded PGMImage

    Raises:
        FormatError: Wrong magic, malformed header field or unsupported depth
        TruncatedDataError: Stream ends inside the header or pixel body
    """
    codec_settings = SETTINGS["codec"]
    reader = _HeaderReader(stream)

    magic = reader.read_token()
    if magic != codec_settings.MAGIC:
        raise FormatError("unsupported format")

    width = reader.read_int("width")
    height = reader.read_int("height")
    if width == 0 or height == 0:
        raise FormatError("invalid dimensions")

    max_intensity = reader.read_int("max intensity")
    if max_intensity != codec_settings.MAX_INTENSITY:
        raise FormatError("unsupported depth")

    data = _read_body(stream, width * height, codec_settings.READ_CHUNK_SIZE)

    logger.debug(f"Decoded P5 header: {width}x{height}, max intensity {max_intensity}")
    pixels = np.frombuffer(data, dtype=np.uint8).copy()
    return PGMImage(width=width, height=height, pixels=pixels, max_intensity=max_intensity)


def encode(image: PGMImage, stream: BinaryIO) -> None:
    """Write an image as binary PGM to a writable byte stream."""
    header = f"P5\n{image.width} {image.height}\n255\n".encode("ascii")
    stream.write(header)
    stream.write(image.tobytes())


def decode_bytes(data: bytes) -> PGMImage:
    return decode(io.BytesIO(data))


def encode_bytes(image: PGMImage) -> bytes:
    buffer = io.BytesIO()
    encode(image, buffer)
    return buffer.getvalue()


def read_pgm(path: str) -> PGMImage:
    """Read a PGM file from disk."""
    with open(path, 'rb') as f:
        image = decode(f)
    logger.info(f"Loaded {path}: {image.width}x{image.height}")
    return image


def write_pgm(image: PGMImage, path: str) -> None:
    """Write a PGM file to disk."""
    with open(path, 'wb') as f:
        encode(image, f)
    logger.debug(f"Wrote {path} ({image.width}x{image.height})")
