"""
Address Book Parsing

An address book lists the network's nodes and their RSA public keys. A
state proof may carry several books (the genesis book followed by
updates); they are applied in order, later entries replacing earlier ones.

Each book is a UTF-8 JSON document:
    {"nodeAddress": [{"memo": "0.0.3", "RSA_PubKey": "<hex DER>"}]}
"""

import json
from typing import Dict, List, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedAddressBook


class NodeAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    memo: str = Field(min_length=1)
    rsa_pub_key: str = Field(alias="RSA_PubKey", min_length=1)


class NodeAddressBook(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    node_address: List[NodeAddress] = Field(alias="nodeAddress", default_factory=list)


def parse_address_book(data: bytes) -> NodeAddressBook:
    """Parse a single address book document."""
    try:
        return NodeAddressBook.model_validate(json.loads(data))
    except (ValueError, ValidationError) as e:
        raise MalformedAddressBook(f"address book could not be parsed: {e}") from e


def parse_address_books(address_books: Sequence[bytes]) -> Dict[str, str]:
    """
    Build the node id to public key mapping from a sequence of books.

    Returns:
        Dict of node id (the address memo) to hex-encoded DER public key
    """
    public_keys: Dict[str, str] = {}

    for data in address_books:
        book = parse_address_book(data)
        for node in book.node_address:
            public_keys[node.memo] = node.rsa_pub_key

    return public_keys
