"""
Record File Parsing

A record file lists the transactions a node recorded in one interval. The
state proof needs two things from it: the set of included transaction ids
and the SHA-384 hash of the file, which is what the nodes sign.

Layout (big endian):
    u32     version (5)
    48B     previous file hash
    u32     transaction count
    count * (u64 shard, u64 realm, u64 num, i64 seconds, u32 nanos)
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet

from .constants import (
    MAX_RECORD_TRANSACTIONS,
    NANOS_PER_SECOND,
    RECORD_FILE_FORMAT_V5,
    SHA384_LENGTH,
)
from .errors import (
    LengthOutOfBounds,
    MalformedRecordFile,
    TrailingData,
    UnsupportedRecordFileVersion,
)
from .hashing import sha384_digest
from .reader import BinaryCursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordFile:
    """Parsed record file."""
    version: int
    previous_hash: bytes
    transaction_ids: FrozenSet[str]
    hash: bytes

    def contains(self, transaction_id: str) -> bool:
        """Check inclusion of a normalized transaction id."""
        return transaction_id in self.transaction_ids


def transaction_key(shard: int, realm: int, num: int, seconds: int, nanos: int) -> str:
    """Render a transaction id as its underscore-joined lookup key."""
    return f"{shard}_{realm}_{num}_{seconds}_{nanos:09d}"


def parse_record_file(data: bytes) -> RecordFile:
    """
    Parse a record file.

    Raises:
        UnsupportedRecordFileVersion: version is not 5
        LengthOutOfBounds: transaction count above MAX_RECORD_TRANSACTIONS
        MalformedRecordFile: nanos out of range
        Truncated / TrailingData: size does not match the declared content
    """
    cursor = BinaryCursor(data)

    version = cursor.read_u32()
    if version != RECORD_FILE_FORMAT_V5:
        raise UnsupportedRecordFileVersion(f"record file version {version} is not supported")

    previous_hash = cursor.read_fixed(SHA384_LENGTH)

    count = cursor.read_u32()
    if count > MAX_RECORD_TRANSACTIONS:
        raise LengthOutOfBounds(
            f"record file declares {count} transactions, maximum is {MAX_RECORD_TRANSACTIONS}"
        )

    transaction_ids = set()
    for _ in range(count):
        shard = cursor.read_u64()
        realm = cursor.read_u64()
        num = cursor.read_u64()
        seconds = cursor.read_i64()
        nanos = cursor.read_u32()
        if nanos >= NANOS_PER_SECOND:
            raise MalformedRecordFile(f"transaction valid start nanos out of range: {nanos}")
        transaction_ids.add(transaction_key(shard, realm, num, seconds, nanos))

    if not cursor.exhausted:
        raise TrailingData(f"{cursor.remaining()} unread bytes after record file")

    record_file = RecordFile(
        version=version,
        previous_hash=previous_hash,
        transaction_ids=frozenset(transaction_ids),
        hash=sha384_digest(data),
    )
    logger.debug(
        "parsed record file v%d with %d transactions", version, len(record_file.transaction_ids)
    )
    return record_file
