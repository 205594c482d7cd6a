from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterator

from .client import Client
from .constants import DEFAULT_CHUNK_SIZE, DEFAULT_HOST, DEFAULT_PORT, MAX_CHUNK_SIZE

log = logging.getLogger(__name__)


def _int_between(low: int, high: int):
    def parse(value: str) -> int:
        try:
            n = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
        if not low <= n <= high:
            raise argparse.ArgumentTypeError(f"must be between {low} and {high}, got {n}")
        return n

    return parse


def iter_messages(args: argparse.Namespace) -> Iterator[bytes]:
    if args.file:
        with open(args.file, "rb") as f:
            yield f.read()
    elif args.messages:
        for m in args.messages:
            yield m.encode("utf-8")
    else:
        for line in sys.stdin.buffer:
            yield line.rstrip(b"\r\n")


def cmd_send(args: argparse.Namespace) -> int:
    ids: list[int] = []
    with Client(args.host, args.port, args.chunk_size) as client:
        for message in iter_messages(args):
            try:
                ids.append(client.send(message))
            except OSError as e:
                log.error("send to %s:%d failed: %s", args.host, args.port, e)
                return 1

    log.info("sent %d message(s) to %s:%d", len(ids), args.host, args.port)
    payload = {"role": "sender", "message_ids": ids}
    print(json.dumps(payload, indent=2) if args.json else payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="plog", description="Fire-and-forget chunked messages over UDP.")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    sub = p.add_subparsers(dest="cmd", required=True)

    send = sub.add_parser("send", help="send messages from arguments, a file, or stdin lines")
    send.add_argument("--host", default=DEFAULT_HOST)
    send.add_argument("--port", type=_int_between(0, 0xFFFF), default=DEFAULT_PORT)
    send.add_argument("--chunk-size", type=_int_between(1, MAX_CHUNK_SIZE), default=DEFAULT_CHUNK_SIZE)
    send.add_argument("--file", help="send the whole file as one message")
    send.add_argument("--json", action="store_true")
    send.add_argument("messages", nargs="*", metavar="MESSAGE")
    send.set_defaults(func=cmd_send)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    if args.file and args.messages:
        p.error("--file and MESSAGE arguments are mutually exclusive")
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
