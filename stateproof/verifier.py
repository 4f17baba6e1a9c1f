"""
State Proof Verification

Answers one question: was this transaction recorded by the network, and did
enough nodes sign the hash of the record file that contains it?

Verification steps:
1. Normalize the transaction id
2. Extract the bundle and parse address books, signature files and the
   record file
3. Check the transaction is in the record file
4. Verify node signatures and find the hash that reached quorum
5. Check that hash is the record file's hash

Any failure raises a StateProofError; success returns True.

Usage:
    from stateproof import verify

    verify("0.0.100@1614556800.123456789", payload)
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from .address_book import parse_address_books
from .bundle import StateProofBundle, StateProofDocument, bundle_from_document, extract_bundle
from .errors import HashMismatch, NoConsensusReached, StateProofError, TransactionNotFound
from .hashing import normalize_transaction_id
from .logging_config import audit_log
from .quorum import ConsensusResult, verify_quorum
from .record_file import RecordFile, parse_record_file
from .signature_file import SignatureFile, parse_signature_files

logger = logging.getLogger(__name__)


class StateProofVerifier:
    """
    State proof verifier with pluggable parsers.

    The defaults handle the JSON bundle, JSON address books and binary
    record files of this package; callers holding other encodings can pass
    their own parsers as long as they return the same shapes.
    """

    def __init__(
        self,
        extract: Callable[[bytes], StateProofBundle] = extract_bundle,
        address_book_parser: Callable[[Sequence[bytes]], Dict[str, str]] = parse_address_books,
        signature_file_parser: Callable[[Mapping[str, bytes]], Dict[str, SignatureFile]] = parse_signature_files,
        record_file_parser: Callable[[bytes], RecordFile] = parse_record_file
    ):
        self.extract = extract
        self.address_book_parser = address_book_parser
        self.signature_file_parser = signature_file_parser
        self.record_file_parser = record_file_parser

    def verify(self, transaction_id: str, payload: bytes) -> bool:
        """
        Verify a state proof for ``transaction_id``.

        Args:
            transaction_id: External id, e.g. ``0.0.100@1614556800.123456789``
            payload: State proof bundle

        Returns:
            True when the proof holds

        Raises:
            StateProofError: the proof does not hold or could not be processed
        """
        return self._run(transaction_id, len(payload), lambda: self.extract(payload))

    def verify_document(self, transaction_id: str, document: Union[StateProofDocument, Dict[str, Any]]) -> bool:
        """Verify a payload that has already been parsed from JSON."""
        return self._run(transaction_id, None, lambda: bundle_from_document(document))

    def _run(
        self,
        transaction_id: str,
        payload_size: Optional[int],
        load_bundle: Callable[[], StateProofBundle]
    ) -> bool:
        audit_log.verification_request(transaction_id, payload_size)

        try:
            result = self.verify_bundle(normalize_transaction_id(transaction_id), load_bundle())
        except StateProofError as e:
            audit_log.verification_result(transaction_id, False, error_code=e.code)
            raise

        audit_log.verification_result(transaction_id, True, tally=result.tally)
        return True

    def verify_bundle(self, transaction_id: str, bundle: StateProofBundle) -> ConsensusResult:
        """
        Verify an already-extracted bundle.

        ``transaction_id`` must already be normalized. Returns the consensus
        result that matched the record file.
        """
        public_keys = self.address_book_parser(bundle.address_books)
        signature_files = self.signature_file_parser(bundle.signature_files)
        record_file = self.record_file_parser(bundle.record_file)

        if not record_file.contains(transaction_id):
            raise TransactionNotFound(f"transaction {transaction_id} not found in record file")

        result = verify_quorum(public_keys, signature_files)
        if not result.reached:
            raise NoConsensusReached(
                f"no hash reached {result.threshold} of {len(signature_files)} signature files"
            )

        if result.hash != record_file.hash:
            raise HashMismatch(
                f"consensus hash {result.hash.hex()} does not match "
                f"record file hash {record_file.hash.hex()}"
            )

        logger.info(
            "state proof for %s holds with %d of %d nodes",
            transaction_id, result.tally[result.hash.hex()], len(signature_files)
        )
        return result


def verify(transaction_id: str, payload: bytes, verifier: Optional[StateProofVerifier] = None) -> bool:
    """
    Convenience function to verify a state proof.

    Returns True or raises a StateProofError naming why the proof does not
    hold.
    """
    verifier = verifier or StateProofVerifier()
    return verifier.verify(transaction_id, payload)
