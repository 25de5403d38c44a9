from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Sequence

from pydantic import BaseModel

from config import config
from db.db import init_db
from db.repositories import SqlOracleStore
from domain.errors import OracleError
from domain.reference import Identity
from domain.relay_ledger import StaleRelayPolicy
from services.reference_service import StdReferenceService

logger = logging.getLogger(__name__)


def build_service(database_url: str, *, stale_policy: StaleRelayPolicy) -> StdReferenceService:
    session = init_db(database_url)
    return StdReferenceService(SqlOracleStore(session), stale_policy=stale_policy)


def _split(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _split_ints(raw: str) -> list[int]:
    return [int(item) for item in _split(raw)]


def _split_pairs(raw: str) -> tuple[list[str], list[str]]:
    bases: list[str] = []
    quotes: list[str] = []
    for pair in _split(raw):
        base, sep, quote = pair.partition("/")
        if not sep or not base or not quote:
            raise ValueError(f"pair must look like BASE/QUOTE, got {pair!r}")
        bases.append(base.strip())
        quotes.append(quote.strip())
    return bases, quotes


def _emit(value: Any) -> None:
    if isinstance(value, BaseModel):
        value = value.model_dump()
    elif isinstance(value, list):
        value = [item.model_dump() if isinstance(item, BaseModel) else item for item in value]
    print(json.dumps(value))


def run(args: argparse.Namespace, service: StdReferenceService) -> None:
    caller = Identity(args.caller) if getattr(args, "caller", None) else None
    command = args.command

    if command == "instantiate":
        _emit(service.instantiate(caller))
    elif command == "transfer-ownership":
        _emit(service.transfer_ownership(caller, Identity(args.new_owner)))
    elif command == "add-relayers":
        service.add_relayers(caller, [Identity(r) for r in _split(args.relayers)])
    elif command == "remove-relayers":
        service.remove_relayers(caller, [Identity(r) for r in _split(args.relayers)])
    elif command in ("relay", "force-relay"):
        write = service.relay if command == "relay" else service.force_relay
        written = write(
            caller,
            _split(args.symbols),
            _split_ints(args.rates),
            resolve_time=args.resolve_time,
            request_id=args.request_id,
        )
        _emit(written)
    elif command == "config":
        _emit(service.get_config())
    elif command == "is-relayer":
        _emit(service.is_relayer(Identity(args.identity)))
    elif command == "get-ref":
        _emit(service.get_observation(args.symbol))
    elif command == "reference-data":
        _emit(service.get_reference_data(args.base, args.quote))
    elif command == "reference-data-bulk":
        bases, quotes = _split_pairs(args.pairs)
        _emit(service.get_reference_data_bulk(bases, quotes))
    else:
        raise ValueError(f"unknown command {command!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Standard reference price oracle.")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL of the oracle store")
    parser.add_argument(
        "--stale-policy",
        choices=[policy.value for policy in StaleRelayPolicy],
        default=None,
        help="What relay does with entries that are not newer than the stored one",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def with_caller(name: str, help_text: str) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--caller", required=True, help="Identity issuing the call")
        return sub

    with_caller("instantiate", "Create the config with the caller as owner")

    sub = with_caller("transfer-ownership", "Hand ownership to another identity")
    sub.add_argument("new_owner")

    for name in ("add-relayers", "remove-relayers"):
        sub = with_caller(name, f"{name.split('-')[0].capitalize()} comma-separated relayer identities")
        sub.add_argument("relayers")

    for name in ("relay", "force-relay"):
        sub = with_caller(name, "Store rates for symbols" if name == "relay" else "Overwrite rates unconditionally")
        sub.add_argument("--symbols", required=True, help="Comma-separated symbols, e.g. BTC,ETH")
        sub.add_argument("--rates", required=True, help="Comma-separated rates scaled by 1e9")
        sub.add_argument("--resolve-time", dest="resolve_time", type=int, required=True)
        sub.add_argument("--request-id", dest="request_id", type=int, required=True)

    subparsers.add_parser("config", help="Show the owner")

    sub = subparsers.add_parser("is-relayer", help="Check relayer membership")
    sub.add_argument("identity")

    sub = subparsers.add_parser("get-ref", help="Show the stored observation of a symbol")
    sub.add_argument("symbol")

    sub = subparsers.add_parser("reference-data", help="Cross rate of BASE in QUOTE")
    sub.add_argument("base")
    sub.add_argument("quote")

    sub = subparsers.add_parser("reference-data-bulk", help="Cross rates for several pairs")
    sub.add_argument("pairs", help="Comma-separated pairs, e.g. BTC/USD,ETH/BTC")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = config()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    database_url = args.database_url or settings.database_url
    stale_policy = StaleRelayPolicy(args.stale_policy) if args.stale_policy else settings.stale_relay_policy
    service = build_service(database_url, stale_policy=stale_policy)

    try:
        run(args, service)
    except (OracleError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        parser.exit(status=1, message=f"error: {exc}\n")


if __name__ == "__main__":
    main()
