"""
State Proof Verifier

Version: 1.0.0
License: Apache 2.0

Verifies that a transaction was recorded by a distributed ledger network
and that more than a third of the network's nodes signed the hash of the
record file containing it.

A state proof bundles three kinds of files:
- address books: node ids and their RSA public keys
- signature files: each node's signature over the record file hash
- the record file: the transactions of one interval

Usage:
    from stateproof import verify, StateProofError

    try:
        verify("0.0.100@1614556800.123456789", payload)
    except StateProofError as e:
        print(e.code, e)
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Errors
from .errors import (
    StateProofError,
    FormatError,
    Truncated,
    LengthOutOfBounds,
    UnsupportedSignatureType,
    UnexpectedDelimiter,
    TrailingData,
    UnsupportedSignatureFileVersion,
    UnsupportedRecordFileVersion,
    MalformedRecordFile,
    MalformedAddressBook,
    MalformedPayload,
    CryptoError,
    MalformedPublicKey,
    SignatureInvalid,
    MetadataSignatureInvalid,
    VerificationError,
    TransactionNotFound,
    HashMismatch,
    NoConsensusReached,
)

# Decoding
from .reader import BinaryCursor
from .signature_file import (
    FormatVersion,
    LegacySignature,
    V2SignatureFile,
    V5SignatureFile,
    decode_legacy,
    decode_v2,
    decode_v5,
    parse_signature_file,
    parse_signature_files,
)
from .record_file import RecordFile, parse_record_file
from .address_book import parse_address_books
from .bundle import StateProofBundle, extract_bundle

# Hashing
from .hashing import sha384_digest, normalize_transaction_id

# Quorum
from .quorum import ConsensusResult, consensus_threshold, verify_quorum

# Verifier
from .verifier import StateProofVerifier, verify


__all__ = [
    "__version__",

    # Errors
    "StateProofError",
    "FormatError",
    "Truncated",
    "LengthOutOfBounds",
    "UnsupportedSignatureType",
    "UnexpectedDelimiter",
    "TrailingData",
    "UnsupportedSignatureFileVersion",
    "UnsupportedRecordFileVersion",
    "MalformedRecordFile",
    "MalformedAddressBook",
    "MalformedPayload",
    "CryptoError",
    "MalformedPublicKey",
    "SignatureInvalid",
    "MetadataSignatureInvalid",
    "VerificationError",
    "TransactionNotFound",
    "HashMismatch",
    "NoConsensusReached",

    # Decoding
    "BinaryCursor",
    "FormatVersion",
    "LegacySignature",
    "V2SignatureFile",
    "V5SignatureFile",
    "decode_legacy",
    "decode_v2",
    "decode_v5",
    "parse_signature_file",
    "parse_signature_files",
    "RecordFile",
    "parse_record_file",
    "parse_address_books",
    "StateProofBundle",
    "extract_bundle",

    # Hashing
    "sha384_digest",
    "normalize_transaction_id",

    # Quorum
    "ConsensusResult",
    "consensus_threshold",
    "verify_quorum",

    # Verifier
    "StateProofVerifier",
    "verify",
]
