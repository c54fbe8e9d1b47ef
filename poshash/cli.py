from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from poshash.config import HashSettings, parse_algorithm, parse_seed
from poshash.core.hashing import compute, to_signed64
from poshash.core.position import Snapshot

_LOGGER = logging.getLogger(__name__)


def _format_hash(h: int, signed: bool) -> str:
    return str(to_signed64(h)) if signed else f"{h:#018x}"


def _settings(args: argparse.Namespace) -> HashSettings:
    settings = HashSettings.from_env()
    if args.seed is not None:
        settings.seed = args.seed
    if args.rng is not None:
        settings.algorithm = args.rng
    return settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="poshash", description="Zobrist position hashing.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--seed", type=parse_seed, default=None, help="Table seed (default: 24 or $POSHASH_SEED).")
    common.add_argument(
        "--rng",
        type=parse_algorithm,
        default=None,
        help="Random algorithm: lcg48 or mt19937 (default: lcg48 or $POSHASH_RNG).",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_hash = sub.add_parser("hash", parents=[common], help="Hash a FEN position.")
    p_hash.add_argument("fen", nargs="+", help="FEN string (quoted or as separate fields).")
    p_hash.add_argument("--signed", action="store_true", help="Print as a signed 64-bit decimal.")

    p_start = sub.add_parser("startpos", parents=[common], help="Hash the standard starting position.")
    p_start.add_argument("--signed", action="store_true", help="Print as a signed 64-bit decimal.")

    p_table = sub.add_parser("table", parents=[common], help="Dump table entries in generation order.")
    p_table.add_argument("--limit", type=int, default=None, help="Print at most this many entries.")

    return parser


def _cmd_hash(args: argparse.Namespace, out: TextIO) -> int:
    table = _settings(args).table()
    position = Snapshot.from_fen(" ".join(args.fen))
    out.write(_format_hash(compute(position, table), args.signed) + "\n")
    return 0


def _cmd_startpos(args: argparse.Namespace, out: TextIO) -> int:
    table = _settings(args).table()
    out.write(_format_hash(compute(Snapshot.startpos(), table), args.signed) + "\n")
    return 0


def _cmd_table(args: argparse.Namespace, out: TextIO) -> int:
    table = _settings(args).table()
    for n, (feature, value) in enumerate(table):
        if args.limit is not None and n >= args.limit:
            break
        index = ",".join(str(i) for i in feature.index)
        out.write(f"{feature.category.name.lower()} {index} {value:#018x}\n")
    return 0


_COMMANDS = {
    "hash": _cmd_hash,
    "startpos": _cmd_startpos,
    "table": _cmd_table,
}


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    out = out or sys.stdout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return _COMMANDS[args.command](args, out)
    except ValueError as exc:
        _LOGGER.debug("command %s failed", args.command, exc_info=True)
        sys.stderr.write(f"error: {exc}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
