"""
Signature File Decoding

Decodes the node signature files bundled in a state proof. Three layouts
exist on the wire:

- Legacy: a bare signature block (type tag, length, signature)
- V2: file hash, delimiter, signature
- V5: version tag, content hash, signature block, metadata hash,
  signature block

A V5 file is two legacy signature blocks bracketing two hash blocks, so the
V5 decoder is built on top of the legacy decoder.

Usage:
    from stateproof.signature_file import parse_signature_files

    artifacts = parse_signature_files({"0.0.3": raw_bytes})
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union

from .constants import (
    INT_SIZE,
    SHA384_LENGTH,
    SHA384_WITH_RSA_MAX_LENGTH,
    SHA384_WITH_RSA_TYPE,
    SIGNATURE_FILE_FORMAT_V2,
    SIGNATURE_FILE_FORMAT_V5,
    SIGNATURE_FILE_V2_MARKER,
    SIGNATURE_LENGTH_FIELD_SIZE,
)
from .errors import (
    FormatError,
    TrailingData,
    UnexpectedDelimiter,
    UnsupportedSignatureFileVersion,
    UnsupportedSignatureType,
)
from .reader import BinaryCursor

logger = logging.getLogger(__name__)


class FormatVersion(str, Enum):
    """Signature artifact wire format."""
    LEGACY = "LEGACY"
    V2 = "V2"
    V5 = "V5"


@dataclass(frozen=True)
class LegacySignature:
    """A bare signature block; its hash lives in the enclosing file."""
    signature: bytes

    @property
    def format_version(self) -> FormatVersion:
        return FormatVersion.LEGACY

    def to_dict(self) -> Dict[str, str]:
        return {
            "format_version": self.format_version.value,
            "signature": self.signature.hex(),
        }


@dataclass(frozen=True)
class V2SignatureFile:
    """Hash of a record file and the node's signature over it."""
    content_hash: bytes
    signature: bytes

    @property
    def format_version(self) -> FormatVersion:
        return FormatVersion.V2

    @property
    def metadata_hash(self) -> Optional[bytes]:
        return None

    @property
    def metadata_signature(self) -> Optional[bytes]:
        return None

    def to_dict(self) -> Dict[str, str]:
        return {
            "format_version": self.format_version.value,
            "content_hash": self.content_hash.hex(),
            "signature": self.signature.hex(),
        }


@dataclass(frozen=True)
class V5SignatureFile:
    """Content and metadata hashes, each with the node's signature."""
    content_hash: bytes
    signature: bytes
    metadata_hash: bytes
    metadata_signature: bytes

    @property
    def format_version(self) -> FormatVersion:
        return FormatVersion.V5

    def to_dict(self) -> Dict[str, str]:
        return {
            "format_version": self.format_version.value,
            "content_hash": self.content_hash.hex(),
            "signature": self.signature.hex(),
            "metadata_hash": self.metadata_hash.hex(),
            "metadata_signature": self.metadata_signature.hex(),
        }


SignatureArtifact = Union[LegacySignature, V2SignatureFile, V5SignatureFile]
SignatureFile = Union[V2SignatureFile, V5SignatureFile]


def _require_exhausted(cursor: BinaryCursor) -> None:
    if not cursor.exhausted:
        raise TrailingData(f"{cursor.remaining()} unread bytes after signature file")


def decode_legacy(
    cursor: BinaryCursor,
    max_length: int = SHA384_WITH_RSA_MAX_LENGTH
) -> Tuple[LegacySignature, int]:
    """
    Decode a legacy signature block.

    Layout: u32 type tag, u8 signature length, signature bytes.

    Returns:
        Tuple of (LegacySignature, bytes consumed)
    """
    sig_type = cursor.read_u32()
    if sig_type != SHA384_WITH_RSA_TYPE:
        raise UnsupportedSignatureType(f"signature type {sig_type} is not SHA-384 with RSA")

    length, signature = cursor.read_length_prefixed_block(
        SIGNATURE_LENGTH_FIELD_SIZE, max_length, include_field_size=True
    )
    return LegacySignature(signature=signature), length + INT_SIZE


def decode_v2(
    cursor: BinaryCursor,
    max_length: int = SHA384_WITH_RSA_MAX_LENGTH
) -> V2SignatureFile:
    """
    Decode a V2 signature file body (after its version byte).

    Layout: 48-byte hash, u8 marker, u8 signature length, signature bytes.
    The cursor must be exhausted afterwards.
    """
    content_hash = cursor.read_fixed(SHA384_LENGTH)

    marker = cursor.read_byte()
    if marker != SIGNATURE_FILE_V2_MARKER:
        raise UnexpectedDelimiter(
            f"expected delimiter {SIGNATURE_FILE_V2_MARKER}, found {marker}"
        )

    _, signature = cursor.read_length_prefixed_block(
        SIGNATURE_LENGTH_FIELD_SIZE, max_length, include_field_size=False
    )
    _require_exhausted(cursor)

    return V2SignatureFile(content_hash=content_hash, signature=signature)


def decode_v5(
    cursor: BinaryCursor,
    max_length: int = SHA384_WITH_RSA_MAX_LENGTH
) -> V5SignatureFile:
    """
    Decode a V5 signature file body (after its version byte).

    Layout: u32 version tag (ignored), 48-byte content hash, legacy block,
    48-byte metadata hash, legacy block. The cursor must be exhausted
    afterwards.
    """
    # object stream signature version
    cursor.read_fixed(INT_SIZE)

    content_hash = cursor.read_fixed(SHA384_LENGTH)
    content_sig, _ = decode_legacy(cursor, max_length)

    metadata_hash = cursor.read_fixed(SHA384_LENGTH)
    metadata_sig, _ = decode_legacy(cursor, max_length)

    _require_exhausted(cursor)

    return V5SignatureFile(
        content_hash=content_hash,
        signature=content_sig.signature,
        metadata_hash=metadata_hash,
        metadata_signature=metadata_sig.signature,
    )


def parse_signature_file(data: bytes) -> SignatureFile:
    """Decode one signature file, dispatching on its leading version byte."""
    if not data:
        raise UnsupportedSignatureFileVersion("empty signature file")

    cursor = BinaryCursor(data)
    version = cursor.read_byte()

    if version == SIGNATURE_FILE_FORMAT_V2:
        return decode_v2(cursor)
    if version == SIGNATURE_FILE_FORMAT_V5:
        return decode_v5(cursor)

    raise UnsupportedSignatureFileVersion(f"signature file version {version} is not supported")


def parse_signature_files(files: Mapping[str, bytes]) -> Dict[str, SignatureFile]:
    """
    Decode every signature file of a state proof.

    Args:
        files: Raw signature files keyed by node id

    Returns:
        Decoded signature files keyed by node id
    """
    artifacts: Dict[str, SignatureFile] = {}

    for node_id, data in files.items():
        try:
            artifacts[node_id] = parse_signature_file(data)
        except FormatError as e:
            if e.node_id is None:
                e.node_id = node_id
            raise

        logger.debug(
            "decoded signature file for node %s (%s)",
            node_id, artifacts[node_id].format_version.value
        )

    return artifacts
