"""Wire protocol constants: packet kinds, revisions and compression settings."""

from __future__ import annotations

from enum import IntEnum

__all__ = [
    "DBMS_MIN_REVISION_WITH_SERVER_TIMEZONE",
    "DBMS_MIN_REVISION_WITH_QUOTA_KEY_IN_CLIENT_INFO",
    "COMPRESS_ENABLE",
    "COMPRESS_DISABLE",
    "STATE_COMPLETE",
    "CHECKSUM_SIZE",
    "COMPRESS_HEADER_SIZE",
    "HEADER_SIZE",
    "BLOCK_MAX_SIZE",
    "CompressionMethod",
    "ClientPacket",
    "ServerPacket",
]

DBMS_MIN_REVISION_WITH_SERVER_TIMEZONE = 54058
DBMS_MIN_REVISION_WITH_QUOTA_KEY_IN_CLIENT_INFO = 54060

COMPRESS_ENABLE = 1
COMPRESS_DISABLE = 0

STATE_COMPLETE = 2

# 128-bit CityHash checksum preceding every compressed frame.
CHECKSUM_SIZE = 16
# Method byte, compressed size (uint32) and uncompressed size (uint32).
COMPRESS_HEADER_SIZE = 1 + 4 + 4
HEADER_SIZE = CHECKSUM_SIZE + COMPRESS_HEADER_SIZE
BLOCK_MAX_SIZE = 1 << 10


class CompressionMethod(IntEnum):
    """Method byte of a compressed frame."""

    NONE = 0x02
    LZ4 = 0x82
    ZSTD = 0x90


class ClientPacket(IntEnum):
    """Packet kinds sent by the client."""

    HELLO = 0
    QUERY = 1
    DATA = 2
    CANCEL = 3
    PING = 4


class ServerPacket(IntEnum):
    """Packet kinds sent by the server."""

    HELLO = 0
    DATA = 1
    EXCEPTION = 2
    PROGRESS = 3
    PONG = 4
    END_OF_STREAM = 5
    PROFILE_INFO = 6
    TOTALS = 7
    EXTREMES = 8