"""
State Proof Hashing Helpers

Record files and signed hashes use SHA-384. Hashes are handled as raw
bytes internally and rendered as lowercase hexadecimal for display and
tallying.
"""

import hashlib
import re
from typing import Union

_TRANSACTION_ID_SEPARATORS = re.compile(r"[.@\-]")


def sha384_digest(data: Union[bytes, str]) -> bytes:
    """Compute SHA-384 and return the raw 48-byte digest."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha384(data).digest()


def normalize_transaction_id(transaction_id: str) -> str:
    """
    Convert an external transaction id to the underscore-joined lookup key.

    ``0.0.100@1614556800.123456789`` and ``0.0.100-1614556800-123456789``
    both become ``0_0_100_1614556800_123456789``.
    """
    return _TRANSACTION_ID_SEPARATORS.sub("_", transaction_id)
