"""Command-line interface for the ledger."""

import argparse
import json
import logging
import sys
import time

from eth_utils import decode_hex, is_hex

from tokenledger.core.address import Address
from tokenledger.core.config import LedgerConfig
from tokenledger.core.constants import DEFAULT_DEPLOYER, DEFAULT_INIT_CODE
from tokenledger.core.types import NewTransaction, TransactionKind
from tokenledger.errors import InvalidHex, LedgerError, NotFound
from tokenledger.storage import initialize

logger = logging.getLogger("tokenledger")


def _hex_bytes(text: str) -> bytes:
    if not is_hex(text):
        raise InvalidHex(text)
    try:
        return decode_hex(text)
    except ValueError as exc:
        raise InvalidHex(text) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Token transaction ledger")
    parser.add_argument("--db", default="ledger.db", help="SQLite database path")
    parser.add_argument(
        "--deployer",
        default="0x" + DEFAULT_DEPLOYER.hex(),
        help="Factory address used for contract derivation",
    )
    parser.add_argument(
        "--init-code",
        default="0x" + DEFAULT_INIT_CODE.hex(),
        help="Token contract init code (hex)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create the database tables")

    submit = sub.add_parser("submit", help="Record a signed transaction")
    submit.add_argument("--sender", required=True, help="Signer address")
    submit.add_argument(
        "--kind", required=True, choices=[k.name for k in TransactionKind]
    )
    submit.add_argument("--data", required=True, help="Signed transaction body (hex)")
    submit.add_argument("--timestamp", type=int, default=None)

    tx = sub.add_parser("tx", help="Look up a transaction by id")
    tx.add_argument("id", type=int)

    txs = sub.add_parser("txs", help="List transactions")
    txs.add_argument("--sender")
    txs.add_argument("--kind", choices=[k.name for k in TransactionKind])
    txs.add_argument("--after", type=int, help="Only timestamps strictly after this (needs --kind)")
    txs.add_argument("--between", type=int, nargs=2, metavar=("START", "END"))

    contract = sub.add_parser("contract", help="Look up a contract")
    group = contract.add_mutually_exclusive_group(required=True)
    group.add_argument("--id", type=int)
    group.add_argument("--address")
    group.add_argument("--tx", type=int)

    return parser


def run(args: argparse.Namespace) -> object:
    """Execute a parsed command and return its JSON-ready result."""
    config = LedgerConfig(
        deployer=Address.parse(args.deployer),
        init_code=_hex_bytes(args.init_code),
    )
    store = initialize("sqlite", args.db, config=config)
    try:
        if args.command == "init":
            return {"db": args.db, "deployer": config.deployer.to_hex()}

        if args.command == "submit":
            timestamp = args.timestamp if args.timestamp is not None else int(time.time())
            tx_id = store.insert_transaction(NewTransaction(
                sender=Address.parse(args.sender),
                kind=TransactionKind.parse(args.kind),
                data=_hex_bytes(args.data),
                timestamp=timestamp,
            ))
            result = {"id": tx_id, "contract": None}
            if args.kind == TransactionKind.CreateToken.name:
                result["contract"] = store.contract_by_transaction_id(tx_id).to_dict()
            return result

        if args.command == "tx":
            return store.transaction_by_id(args.id).to_dict()

        if args.command == "txs":
            if args.between:
                found = store.transactions_between(*args.between)
            elif args.after is not None:
                if not args.kind:
                    raise ValueError("--after requires --kind")
                found = store.transactions_by_kind_after(args.kind, args.after)
            elif args.kind and args.sender:
                found = store.transactions_by_kind_and_sender(args.kind, args.sender)
            elif args.kind:
                found = store.transactions_by_kind(args.kind)
            elif args.sender:
                found = store.transactions_by_sender(args.sender)
            else:
                raise ValueError("one of --sender, --kind or --between is required")
            return [t.to_dict() for t in found]

        if args.command == "contract":
            if args.id is not None:
                return store.contract_by_id(args.id).to_dict()
            if args.address is not None:
                return store.contract_by_address(args.address).to_dict()
            return store.contract_by_transaction_id(args.tx).to_dict()

        raise ValueError(f"Unknown command: {args.command}")
    finally:
        store.close()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        result = run(args)
    except NotFound as exc:
        print(json.dumps({"error": "NotFound", "message": str(exc)}))
        return 1
    except (LedgerError, ValueError) as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        print(json.dumps({"error": type(exc).__name__, "message": str(exc)}))
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
