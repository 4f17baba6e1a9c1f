"""
State Proof Error Taxonomy

Every failure surfaced by the verifier is a StateProofError carrying a
stable ``code``. Errors fall in three families:

- FormatError: the input bytes could not be decoded
- CryptoError: a key or signature did not check out
- VerificationError: the proof decoded and verified but does not hold

No error is recovered from inside the package; all of them reach the
caller of ``verify`` unchanged.
"""

from typing import Optional


class StateProofError(Exception):
    """Base class for all state proof failures."""

    code = "STATE_PROOF_ERROR"

    def __init__(self, message: Optional[str] = None, node_id: Optional[str] = None):
        self.message = message or self.__class__.__doc__.strip().rstrip(".")
        self.node_id = node_id
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.node_id:
            return f"{self.message} (node {self.node_id})"
        return self.message

    def to_dict(self) -> dict:
        d = {"error": self.code, "detail": self.message}
        if self.node_id:
            d["node_id"] = self.node_id
        return d


# =============================================================================
# FORMAT ERRORS
# =============================================================================

class FormatError(StateProofError, ValueError):
    """Input could not be decoded."""
    code = "FORMAT_ERROR"


class Truncated(FormatError):
    """Input ended before the expected number of bytes."""
    code = "TRUNCATED"


class LengthOutOfBounds(FormatError):
    """Declared length is outside the permitted range."""
    code = "LENGTH_OUT_OF_BOUNDS"


class UnsupportedSignatureType(FormatError):
    """Signature type tag is not SHA-384 with RSA."""
    code = "UNSUPPORTED_SIGNATURE_TYPE"


class UnexpectedDelimiter(FormatError):
    """Unexpected signature file type delimiter."""
    code = "UNEXPECTED_DELIMITER"


class TrailingData(FormatError):
    """Extra data after the end of the file."""
    code = "TRAILING_DATA"


class UnsupportedSignatureFileVersion(FormatError):
    """Signature file version is not supported."""
    code = "UNSUPPORTED_SIGNATURE_FILE_VERSION"


class UnsupportedRecordFileVersion(FormatError):
    """Record file version is not supported."""
    code = "UNSUPPORTED_RECORD_FILE_VERSION"


class MalformedRecordFile(FormatError):
    """Record file content is malformed."""
    code = "MALFORMED_RECORD_FILE"


class MalformedAddressBook(FormatError):
    """Address book could not be parsed."""
    code = "MALFORMED_ADDRESS_BOOK"


class MalformedPayload(FormatError):
    """State proof payload could not be parsed."""
    code = "MALFORMED_PAYLOAD"


# =============================================================================
# CRYPTOGRAPHIC ERRORS
# =============================================================================

class CryptoError(StateProofError):
    """Cryptographic check failed."""
    code = "CRYPTO_ERROR"


class MalformedPublicKey(CryptoError):
    """Public key is not a valid RSA key."""
    code = "MALFORMED_PUBLIC_KEY"


class SignatureInvalid(CryptoError):
    """Signature file signature verification failed."""
    code = "SIGNATURE_INVALID"


class MetadataSignatureInvalid(CryptoError):
    """Metadata signature verification failed."""
    code = "METADATA_SIGNATURE_INVALID"


# =============================================================================
# VERIFICATION ERRORS
# =============================================================================

class VerificationError(StateProofError):
    """State proof does not hold."""
    code = "VERIFICATION_ERROR"


class TransactionNotFound(VerificationError):
    """Transaction not found in record file."""
    code = "TRANSACTION_NOT_FOUND"


class HashMismatch(VerificationError):
    """Consensus hash does not match record file hash."""
    code = "HASH_MISMATCH"


class NoConsensusReached(HashMismatch):
    """No hash was signed by enough nodes to reach consensus."""
    code = "NO_CONSENSUS_REACHED"
