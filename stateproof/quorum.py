"""
Quorum Verification

Checks every node's RSA signature over the hash it attested to, tallies the
attested hashes and decides whether one of them was signed by enough nodes.

Rules:
- Nodes are evaluated in sorted node-id order, so the outcome never
  depends on mapping iteration order.
- A node whose public key is unknown is skipped, not failed.
- A signature that does not verify against a known key fails the whole
  call; a forged attestation is never merely excluded.
- Only hashes attested by more than one node can win. Among those the
  strictly largest count wins; on equal counts the hash that reached the
  count first is kept.
- Consensus requires the winning count to be at least
  ``len(artifacts) // 3``.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from .errors import MalformedPublicKey, MetadataSignatureInvalid, SignatureInvalid
from .hashing import sha384_digest
from .logging_config import audit_log
from .signature_file import LegacySignature, SignatureArtifact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsensusResult:
    """Outcome of a quorum check."""
    hash: Optional[bytes]
    threshold: int
    tally: Dict[str, int] = field(default_factory=dict)

    @property
    def reached(self) -> bool:
        return self.hash is not None

    @classmethod
    def consensus(cls, hash: bytes, threshold: int, tally: Dict[str, int]) -> 'ConsensusResult':
        return cls(hash=hash, threshold=threshold, tally=tally)

    @classmethod
    def no_consensus(cls, threshold: int, tally: Dict[str, int]) -> 'ConsensusResult':
        return cls(hash=None, threshold=threshold, tally=tally)

    def to_dict(self) -> Dict[str, object]:
        return {
            "consensus": self.reached,
            "hash": self.hash.hex() if self.hash is not None else None,
            "threshold": self.threshold,
            "tally": dict(self.tally),
        }


def consensus_threshold(signature_file_count: int) -> int:
    """Number of agreeing nodes needed out of ``signature_file_count``."""
    return signature_file_count // 3


def load_public_key(public_key_hex: str, node_id: Optional[str] = None) -> rsa.RSAPublicKey:
    """
    Load a hex-encoded DER SubjectPublicKeyInfo RSA key.

    Raises:
        MalformedPublicKey: not hex, not DER, or not an RSA key
    """
    try:
        der = bytes.fromhex(public_key_hex)
        key = serialization.load_der_public_key(der)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise MalformedPublicKey(f"public key could not be loaded: {e}", node_id=node_id) from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise MalformedPublicKey(
            f"expected an RSA public key, got {type(key).__name__}", node_id=node_id
        )
    return key


def verify_signature(public_key: rsa.RSAPublicKey, hash: bytes, signature: bytes) -> bool:
    """Verify a SHA-384 with RSA (PKCS#1 v1.5) signature over ``hash``."""
    try:
        public_key.verify(
            signature,
            sha384_digest(hash),
            padding.PKCS1v15(),
            Prehashed(hashes.SHA384())
        )
        return True
    except InvalidSignature:
        return False


def verify_quorum(
    public_keys: Mapping[str, str],
    artifacts: Mapping[str, SignatureArtifact]
) -> ConsensusResult:
    """
    Verify node signatures and find the hash that reached quorum.

    Args:
        public_keys: Hex DER public keys keyed by node id
        artifacts: Decoded signature files keyed by node id

    Returns:
        ConsensusResult; ``reached`` is False when no hash made the threshold

    Raises:
        MalformedPublicKey: a known node's key cannot be loaded
        SignatureInvalid: a known node's content signature does not verify
        MetadataSignatureInvalid: a known node's metadata signature does not verify
    """
    tally: Dict[str, int] = {}
    consensus_hash: Optional[bytes] = None
    max_count = 0

    for node_id in sorted(artifacts):
        artifact = artifacts[node_id]

        public_key_hex = public_keys.get(node_id)
        if public_key_hex is None:
            audit_log.node_skipped(node_id, "no public key in address book")
            continue

        if isinstance(artifact, LegacySignature):
            raise SignatureInvalid("signature block carries no content hash", node_id=node_id)

        public_key = load_public_key(public_key_hex, node_id=node_id)

        if not verify_signature(public_key, artifact.content_hash, artifact.signature):
            raise SignatureInvalid(node_id=node_id)

        if artifact.metadata_hash is not None and not verify_signature(
            public_key, artifact.metadata_hash, artifact.metadata_signature
        ):
            raise MetadataSignatureInvalid(node_id=node_id)

        hex_hash = artifact.content_hash.hex()
        tally[hex_hash] = tally.get(hex_hash, 0) + 1

        count = tally[hex_hash]
        if count > 1 and count > max_count:
            max_count = count
            consensus_hash = artifact.content_hash

    threshold = consensus_threshold(len(artifacts))
    logger.debug(
        "quorum tally over %d signature files: %s (threshold %d)",
        len(artifacts), tally, threshold
    )

    if consensus_hash is not None and max_count >= threshold:
        return ConsensusResult.consensus(consensus_hash, threshold, tally)
    return ConsensusResult.no_consensus(threshold, tally)
