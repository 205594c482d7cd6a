from __future__ import annotations

import enum
import struct
import zlib
from dataclasses import dataclass

from .constants import (
    HEADER_FORMAT,
    MAX_CHUNK_COUNT,
    MAX_CHUNK_SIZE,
    MAX_MESSAGE_ID,
    MAX_MESSAGE_LENGTH,
    MULTIPART_MESSAGE,
    VERSION,
)

HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


class PacketKind(enum.IntEnum):
    MULTIPART_MESSAGE = MULTIPART_MESSAGE


class PacketEncodeError(ValueError):
    pass


class PacketDecodeError(ValueError):
    pass


def crc32(data: bytes) -> int:
    return zlib.crc32(data) & 0xFFFFFFFF


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise PacketEncodeError(f"{name} out of range [{low}, {high}]: {value}")


@dataclass(frozen=True, slots=True)
class MultipartPacket:
    message_id: int
    total_length: int
    chunk_size: int
    chunk_count: int
    chunk_index: int
    payload: bytes = b""

    @property
    def is_last(self) -> bool:
        return self.chunk_index == self.chunk_count - 1

    def to_bytes(self) -> bytes:
        return encode_multipart(
            self.message_id,
            self.total_length,
            self.chunk_size,
            self.chunk_count,
            self.chunk_index,
            self.payload,
        )


def encode_multipart(
    message_id: int,
    total_length: int,
    chunk_size: int,
    chunk_count: int,
    chunk_index: int,
    data: bytes,
) -> bytes:
    """Frame one chunk of a message as a multipart packet.

    The header is fixed-width and big-endian; see ``HEADER_FORMAT``. Each packet
    carries everything needed to place its payload in the original message.
    """
    _check_range("message_id", message_id, 0, MAX_MESSAGE_ID)
    _check_range("total_length", total_length, 0, MAX_MESSAGE_LENGTH)
    _check_range("chunk_size", chunk_size, 1, MAX_CHUNK_SIZE)
    _check_range("chunk_count", chunk_count, 1, MAX_CHUNK_COUNT)
    _check_range("chunk_index", chunk_index, 0, chunk_count - 1)
    if len(data) > chunk_size:
        raise PacketEncodeError(f"chunk data too large: {len(data)} > {chunk_size}")

    header = struct.pack(
        HEADER_FORMAT,
        VERSION,
        int(PacketKind.MULTIPART_MESSAGE),
        chunk_count,
        chunk_index,
        chunk_size,
        message_id,
        total_length,
        crc32(data),
    )
    return header + bytes(data)


def decode_multipart(raw: bytes) -> MultipartPacket:
    if len(raw) < HEADER_SIZE:
        raise PacketDecodeError("datagram too small to be a valid packet")

    version, kind, count, index, chunk_size, message_id, length, checksum = struct.unpack(
        HEADER_FORMAT, raw[:HEADER_SIZE]
    )
    if version != VERSION:
        raise PacketDecodeError(f"version mismatch: expected {VERSION}, got {version}")
    if kind != PacketKind.MULTIPART_MESSAGE:
        raise PacketDecodeError(f"unknown packet type: {kind}")

    payload = raw[HEADER_SIZE:]
    if crc32(payload) != checksum:
        raise PacketDecodeError("checksum mismatch")
    if index >= count:
        raise PacketDecodeError(f"chunk index {index} not below chunk count {count}")
    if len(payload) > chunk_size:
        raise PacketDecodeError(f"payload larger than chunk size: {len(payload)} > {chunk_size}")

    return MultipartPacket(
        message_id=message_id,
        total_length=length,
        chunk_size=chunk_size,
        chunk_count=count,
        chunk_index=index,
        payload=payload,
    )
