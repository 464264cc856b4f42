"""Envelope header and page-name table reader.

An encoded index is base64 text wrapping this envelope::

    magic(5) length(4, big-endian) gzip_payload(length)

The inflated payload begins with the page-name table, which this module
parses; the cluster stream that follows is left for
:mod:`owl_fts.codec.cluster_fsm`.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
import logging
import zlib

from owl_fts.codec.byte_cursor import ByteCursor
from owl_fts.errors import (
    DecompressionFailure,
    InvalidEncoding,
    InvalidFormat,
    InvalidInputEncoding,
    UnexpectedEnd,
)


logger = logging.getLogger(__name__)

MAGIC = bytes((0x6F, 0x77, 0x6C, 0x00, 0x01))

NAME_TABLE_MARKER = 0x02
NAME_TERMINATOR = 0x00
NAME_TABLE_END = 0x03


@dataclass(frozen=True, slots=True)
class Envelope:
    """Page table plus a cursor positioned at the start of the cluster stream."""

    pages: tuple[str, ...]
    body: ByteCursor


def decode_base64(encoded: str) -> ByteCursor:
    """Decode the outer base64 text into a cursor over the raw envelope."""
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInputEncoding(f"Input is not valid base64: {exc}") from exc
    return ByteCursor(raw)


def check_magic(cursor: ByteCursor) -> None:
    """Consume and validate the magic/version prefix.

    The envelope must carry more than the prefix itself, so a buffer of
    ``len(MAGIC)`` bytes or fewer is rejected before any byte is compared.
    """
    if len(cursor) <= len(MAGIC):
        msg = f"Envelope too short for header: {len(cursor)} bytes"
        raise InvalidFormat(msg)
    for expected in MAGIC:
        actual = cursor.next_byte()
        if actual != expected:
            msg = f"Bad magic byte at offset {cursor.position - 1}: 0x{actual:02x} != 0x{expected:02x}"
            raise InvalidFormat(msg)


def read_compressed_payload(cursor: ByteCursor) -> ByteCursor:
    """Read the declared length and extract that many bytes as the compressed payload."""
    declared = cursor.read_u32()
    try:
        return cursor.extract_range(declared)
    except UnexpectedEnd as exc:
        msg = f"Declared payload length {declared} exceeds the {cursor.remaining()} bytes available"
        raise UnexpectedEnd(msg) from exc


def decompress_payload(payload: ByteCursor) -> ByteCursor:
    """Inflate the first gzip member of ``payload``; bytes after it are ignored."""
    raw = payload.to_bytes()
    if not raw:
        return ByteCursor()
    inflater = zlib.decompressobj(wbits=16 + zlib.MAX_WBITS)
    try:
        inflated = inflater.decompress(raw)
    except zlib.error as exc:
        raise DecompressionFailure(f"Compressed payload is corrupt: {exc}") from exc
    if not inflater.eof:
        raise DecompressionFailure("Compressed payload ends before the gzip stream is complete")
    if inflater.unused_data:
        logger.debug("Ignoring %d bytes after the gzip stream", len(inflater.unused_data))
    return ByteCursor(inflated)


def _decode_text(raw: bytes, what: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncoding(f"{what} is not valid UTF-8: {raw!r}") from exc


def read_page_table(cursor: ByteCursor) -> tuple[str, ...]:
    """Parse the page-name table, leaving ``cursor`` just past its end marker.

    Names keep their order of appearance; that position is the page ordinal
    postings refer to.
    """
    if not cursor.remaining() or cursor.next_byte() != NAME_TABLE_MARKER:
        raise InvalidFormat("Payload does not start with the page table marker")

    scratch = ByteCursor()
    pages: list[str] = []
    while True:
        if not cursor.remaining():
            msg = f"Page table not terminated after {len(pages)} names"
            raise UnexpectedEnd(msg)
        byte = cursor.next_byte()
        if byte == NAME_TERMINATOR:
            pages.append(_decode_text(scratch.to_bytes(), "Page name"))
            scratch.clear()
        elif byte == NAME_TABLE_END:
            break
        else:
            scratch.append_byte(byte)
    return tuple(pages)


def open_envelope(encoded: str) -> Envelope:
    """Run the header stages of the decode pipeline.

    Raises:
        InvalidInputEncoding: the text is not base64 (or a name is not UTF-8).
        InvalidFormat: bad magic or missing page table marker.
        UnexpectedEnd: truncated payload or unterminated page table.
        DecompressionFailure: the gzip stream is corrupt.
    """
    cursor = decode_base64(encoded)
    check_magic(cursor)
    compressed = read_compressed_payload(cursor)
    body = decompress_payload(compressed)
    pages = read_page_table(body)
    logger.debug(
        "Envelope opened: %d compressed bytes, %d inflated bytes, %d pages",
        len(compressed),
        len(body),
        len(pages),
    )
    return Envelope(pages=pages, body=body)
