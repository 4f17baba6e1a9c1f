"""
End-to-end state proof verification tests.

Builds complete payloads (record file, address book, signed V5/V2 files)
and runs them through ``verify``.
"""

import unittest

from stateproof import (
    HashMismatch,
    MalformedPayload,
    MalformedPublicKey,
    NoConsensusReached,
    SignatureInvalid,
    StateProofBundle,
    StateProofVerifier,
    TransactionNotFound,
    TrailingData,
    normalize_transaction_id,
    sha384_digest,
    verify,
)
from tests.builders import (
    address_book,
    hash_of,
    make_nodes,
    record_file,
    state_proof_bundle,
    state_proof_payload,
)

TRANSACTION_ID = "0.0.100@1614556800.123456789"


class VerifierTestCase(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.nodes = make_nodes(4)
        cls.record = record_file([
            (0, 0, 100, 1614556800, 123456789),
            (0, 0, 7, 1614556799, 1),
        ])
        cls.record_hash = sha384_digest(cls.record)


class TestTransactionIdNormalization(unittest.TestCase):

    def test_separators_become_underscores(self):
        self.assertEqual(normalize_transaction_id(TRANSACTION_ID), "0_0_100_1614556800_123456789")
        self.assertEqual(
            normalize_transaction_id("0.0.100-1614556800-123456789"),
            "0_0_100_1614556800_123456789",
        )


class TestVerify(VerifierTestCase):

    def test_three_of_four_nodes_sign(self):
        payload = state_proof_payload(self.record, self.nodes, self.nodes[:3])
        self.assertTrue(verify(TRANSACTION_ID, payload))

    def test_dash_separated_transaction_id(self):
        payload = state_proof_payload(self.record, self.nodes, self.nodes[:3])
        self.assertTrue(verify("0.0.7-1614556799-000000001", payload))

    def test_v2_signature_files(self):
        files = {n.node_id: n.v2_artifact_file(self.record_hash) for n in self.nodes}
        payload = state_proof_bundle(self.record, self.nodes, files).to_payload()
        self.assertTrue(verify(TRANSACTION_ID, payload))

    def test_transaction_not_in_record_file(self):
        payload = state_proof_payload(self.record, self.nodes, self.nodes[:3])
        with self.assertRaises(TransactionNotFound):
            verify("0.0.100@1614556800.123456788", payload)

    def test_nodes_agree_on_a_different_hash(self):
        payload = state_proof_payload(
            self.record, self.nodes, self.nodes[:3], signed_hash=hash_of("another record")
        )
        with self.assertRaises(HashMismatch) as ctx:
            verify(TRANSACTION_ID, payload)
        self.assertNotIsInstance(ctx.exception, NoConsensusReached)

    def test_lone_signer_is_not_consensus(self):
        payload = state_proof_payload(self.record, self.nodes, self.nodes[:1])
        with self.assertRaises(NoConsensusReached):
            verify(TRANSACTION_ID, payload)

    def test_no_consensus_is_a_hash_mismatch(self):
        payload = state_proof_payload(self.record, self.nodes, self.nodes[:1])
        with self.assertRaises(HashMismatch):
            verify(TRANSACTION_ID, payload)

    def test_forged_signature_fails(self):
        files = {n.node_id: n.v5_artifact_file(self.record_hash) for n in self.nodes[:3]}
        # node 3 presents node 0's attestation as its own
        files[self.nodes[3].node_id] = files[self.nodes[0].node_id]
        payload = state_proof_bundle(self.record, self.nodes, files).to_payload()

        with self.assertRaises(SignatureInvalid):
            verify(TRANSACTION_ID, payload)

    def test_malformed_signature_file_fails(self):
        files = {n.node_id: n.v5_artifact_file(self.record_hash) for n in self.nodes[:3]}
        files[self.nodes[0].node_id] += b"\x00"
        payload = state_proof_bundle(self.record, self.nodes, files).to_payload()

        with self.assertRaises(TrailingData):
            verify(TRANSACTION_ID, payload)

    def test_signers_outside_address_book_are_ignored(self):
        payload = state_proof_payload(self.record, self.nodes[:2], self.nodes)
        self.assertTrue(verify(TRANSACTION_ID, payload))

    def test_malformed_public_key_in_address_book(self):
        keys = {n.node_id: n.public_key_hex for n in self.nodes}
        keys[self.nodes[0].node_id] = "3082deadbeef"
        bundle = StateProofBundle(
            record_file=self.record,
            address_books=[address_book(keys)],
            signature_files={n.node_id: n.v5_artifact_file(self.record_hash) for n in self.nodes[:3]},
        )

        with self.assertRaises(MalformedPublicKey) as ctx:
            verify(TRANSACTION_ID, bundle.to_payload())
        self.assertEqual(ctx.exception.node_id, self.nodes[0].node_id)

    def test_malformed_payload(self):
        with self.assertRaises(MalformedPayload):
            verify(TRANSACTION_ID, b"not a state proof")

    def test_audit_events(self):
        payload = state_proof_payload(self.record, self.nodes, self.nodes[:3])
        with self.assertLogs("stateproof.audit", level="INFO") as logs:
            verify(TRANSACTION_ID, payload)

        events = [line for line in logs.output if "VERIFICATION_" in line]
        self.assertEqual(len(events), 2)
        self.assertIn("VERIFICATION_RESULT", events[1])

    def test_verify_document(self):
        bundle = state_proof_bundle(
            self.record,
            self.nodes,
            {n.node_id: n.v5_artifact_file(self.record_hash) for n in self.nodes},
        )
        verifier = StateProofVerifier()
        self.assertTrue(verifier.verify_document(TRANSACTION_ID, bundle.to_document()))


class TestInjectedCollaborators(VerifierTestCase):

    def test_custom_record_file_parser(self):
        payload = state_proof_payload(self.record, self.nodes, self.nodes[:3])
        seen = []

        def record_parser(data):
            from stateproof import parse_record_file
            seen.append(len(data))
            return parse_record_file(data)

        verifier = StateProofVerifier(record_file_parser=record_parser)
        self.assertTrue(verify(TRANSACTION_ID, payload, verifier=verifier))
        self.assertEqual(seen, [len(self.record)])

    def test_verify_bundle_returns_consensus(self):
        files = {n.node_id: n.v5_artifact_file(self.record_hash) for n in self.nodes[:3]}
        bundle = state_proof_bundle(self.record, self.nodes, files)

        result = StateProofVerifier().verify_bundle("0_0_100_1614556800_123456789", bundle)

        self.assertEqual(result.hash, self.record_hash)
        self.assertEqual(result.tally, {self.record_hash.hex(): 3})
        self.assertEqual(result.threshold, 1)


if __name__ == "__main__":
    unittest.main()
