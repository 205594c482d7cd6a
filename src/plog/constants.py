from __future__ import annotations

HEADER_FORMAT = "!BBHHHIIIxxxx"  # version, type, count, index, chunk_size, message_id, length, crc32
VERSION = 0

MULTIPART_MESSAGE = 1

MAX_CHUNK_COUNT = 0xFFFF
MAX_CHUNK_SIZE = 0xFFFF
MAX_MESSAGE_ID = 0xFFFFFFFF
MAX_MESSAGE_LENGTH = 0xFFFFFFFF

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 23456
DEFAULT_CHUNK_SIZE = 64000
