"""
State Proof Bundle

The payload handed to ``verify`` is a JSON document holding the files of a
state proof, each base64 encoded:

    {
        "record_file": "<base64>",
        "address_books": ["<base64>", ...],
        "signature_files": {"0.0.3": "<base64>", ...}
    }

This is the shape a mirror node returns for a transaction's state proof.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ValidationError

from . import config
from .errors import MalformedPayload


class StateProofDocument(BaseModel):
    """Wire shape of the payload, fields still base64 encoded."""
    record_file: str
    address_books: List[str]
    signature_files: Dict[str, str]


@dataclass(frozen=True)
class StateProofBundle:
    """Decoded files of a state proof."""
    record_file: bytes
    address_books: List[bytes]
    signature_files: Dict[str, bytes]

    def to_document(self) -> Dict[str, Any]:
        """Encode back to the JSON-ready payload shape."""
        return {
            "record_file": _b64e(self.record_file),
            "address_books": [_b64e(b) for b in self.address_books],
            "signature_files": {k: _b64e(v) for k, v in self.signature_files.items()},
        }

    def to_payload(self) -> bytes:
        return json.dumps(self.to_document(), sort_keys=True).encode('utf-8')


def _b64e(b: bytes) -> str:
    return base64.b64encode(b).decode('ascii')


def _b64d(s: str, field: str) -> bytes:
    try:
        return base64.b64decode(s.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise MalformedPayload(f"{field} is not valid base64") from e


def bundle_from_document(document: Union[StateProofDocument, Dict[str, Any]]) -> StateProofBundle:
    """Decode the base64 fields of an already-parsed payload document."""
    if not isinstance(document, StateProofDocument):
        try:
            document = StateProofDocument.model_validate(document)
        except ValidationError as e:
            raise MalformedPayload(f"state proof payload has an invalid shape: {e}") from e

    return StateProofBundle(
        record_file=_b64d(document.record_file, "record_file"),
        address_books=[
            _b64d(b, f"address_books[{i}]") for i, b in enumerate(document.address_books)
        ],
        signature_files={
            node_id: _b64d(s, f"signature_files[{node_id}]")
            for node_id, s in document.signature_files.items()
        },
    )


def extract_bundle(payload: bytes, max_bytes: Optional[int] = None) -> StateProofBundle:
    """
    Extract the files of a state proof from its payload.

    Args:
        payload: UTF-8 JSON payload
        max_bytes: Size limit (default: STATEPROOF_MAX_PAYLOAD_BYTES)

    Raises:
        MalformedPayload: payload too large, not JSON, wrong shape or bad base64
    """
    limit = config.MAX_PAYLOAD_BYTES if max_bytes is None else max_bytes
    if len(payload) > limit:
        raise MalformedPayload(f"payload of {len(payload)} bytes exceeds limit of {limit}")

    try:
        document = json.loads(payload)
    except ValueError as e:
        raise MalformedPayload(f"payload is not valid JSON: {e}") from e

    return bundle_from_document(document)
