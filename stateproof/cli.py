#!/usr/bin/env python3
"""
State Proof Command Line Interface

Usage:
    stateproof verify --transaction-id <id> --payload <file>
    stateproof inspect --signature-file <file>
    stateproof record --record-file <file>

Exit codes: 0 verified or decoded, 1 rejected, 2 usage or unreadable file.
"""

import argparse
import json
import sys
from pathlib import Path

from . import config
from .errors import StateProofError
from .logging_config import configure_logging, set_request_id


def read_bytes(path: str) -> bytes:
    """Read a file as bytes."""
    return Path(path).read_bytes()


def cmd_verify(args) -> int:
    """Verify a state proof payload for a transaction."""
    from .verifier import verify

    set_request_id()

    try:
        verify(args.transaction_id, read_bytes(args.payload))
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except StateProofError as e:
        print(f"✗ INVALID: {e.code}")
        print(str(e), file=sys.stderr)
        return 1

    print(f"✓ VERIFIED: {args.transaction_id}")
    return 0


def cmd_inspect(args) -> int:
    """Decode a signature file and print it as JSON."""
    from .signature_file import parse_signature_file

    try:
        artifact = parse_signature_file(read_bytes(args.signature_file))
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except StateProofError as e:
        print(f"✗ INVALID: {e.code}")
        print(str(e), file=sys.stderr)
        return 1

    print(json.dumps(artifact.to_dict(), indent=2))
    return 0


def cmd_record(args) -> int:
    """Parse a record file and print its hash and transactions."""
    from .record_file import parse_record_file

    try:
        record_file = parse_record_file(read_bytes(args.record_file))
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except StateProofError as e:
        print(f"✗ INVALID: {e.code}")
        print(str(e), file=sys.stderr)
        return 1

    print(json.dumps({
        "version": record_file.version,
        "hash": record_file.hash.hex(),
        "previous_hash": record_file.previous_hash.hex(),
        "transaction_ids": sorted(record_file.transaction_ids),
    }, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stateproof",
        description="State Proof Verifier CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stateproof verify -t 0.0.100@1614556800.123456789 -p stateproof.json
  stateproof inspect -s 0.0.3.rcd_sig
  stateproof record -r 2021-03-01T00_00_00Z.rcd
        """
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Log level")
    parser.add_argument("--plain-logs", action="store_true", help="Plain text instead of JSON logs")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # verify
    verify_parser = subparsers.add_parser("verify", help="Verify a state proof")
    verify_parser.add_argument("-t", "--transaction-id", required=True, help="Transaction id")
    verify_parser.add_argument("-p", "--payload", required=True, help="State proof payload JSON file")

    # inspect
    inspect_parser = subparsers.add_parser("inspect", help="Decode a signature file")
    inspect_parser.add_argument("-s", "--signature-file", required=True, help="Signature file")

    # record
    record_parser = subparsers.add_parser("record", help="Parse a record file")
    record_parser.add_argument("-r", "--record-file", required=True, help="Record file")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        level=config.effective_log_level(args.log_level),
        json_format=config.LOG_JSON and not args.plain_logs,
        log_file=config.LOG_FILE or None
    )

    if args.command == "verify":
        return cmd_verify(args)
    elif args.command == "inspect":
        return cmd_inspect(args)
    elif args.command == "record":
        return cmd_record(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
