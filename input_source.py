"""Collect the full message to hash from a string, buffer, file or stream.

Every reader returns the complete message as `bytes` and checks that its
bit length fits the 64-bit length field, so errors surface before padding.
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO, Union

from errors import InputUnavailable
from padding import check_length


logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


def as_message_bytes(data: BytesLike) -> bytes:
    """Return `data` as immutable bytes; reject text and other types."""
    if isinstance(data, str):
        raise TypeError("Strings must be encoded before hashing (use from_text)")
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Expected a bytes-like object, got {type(data).__name__}")
    message = bytes(data)
    check_length(len(message) * 8)
    return message


def from_text(text: str, encoding: str = "utf-8") -> bytes:
    """Encode a text argument, UTF-8 unless told otherwise.

    Command-line bytes that are not valid in the locale arrive as lone
    surrogates and cannot be encoded; they are reported as unreadable input.
    """
    try:
        encoded = text.encode(encoding)
    except UnicodeEncodeError as e:
        raise InputUnavailable("<argument>", f"not valid {encoding} text ({e.reason})") from e
    return as_message_bytes(encoded)


def read_file(path: Union[str, os.PathLike]) -> bytes:
    """Read the raw bytes of a file."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise InputUnavailable(os.fspath(path), e.strerror or str(e)) from e
    logger.debug("read %d bytes from %s", len(data), path)
    return as_message_bytes(data)


def read_stream(stream: BinaryIO, name: str = "<stdin>") -> bytes:
    """Read a binary stream to EOF."""
    try:
        data = stream.read()
    except (OSError, ValueError) as e:
        # ValueError: I/O operation on closed file
        raise InputUnavailable(name, str(e)) from e
    logger.debug("read %d bytes from %s", len(data), name)
    return as_message_bytes(data)
