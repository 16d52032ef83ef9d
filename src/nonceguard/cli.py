from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .nonce import generate_nonce
from .rewriter import add_nonce
from .webapp import create_app


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="nonceguard")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--entry-points", default=None)

    sub.add_parser("nonce")

    rewrite = sub.add_parser("rewrite")
    rewrite.add_argument("url")
    rewrite.add_argument("nonce")

    args = parser.parse_args(argv)

    if args.command == "serve":
        config = {}
        if args.entry_points is not None:
            config["CSRF_ENTRY_POINTS"] = args.entry_points
        create_app(config).run(host=args.host, port=args.port)
        return

    if args.command == "nonce":
        print(generate_nonce())
        return

    if args.command == "rewrite":
        print(add_nonce(args.url, args.nonce))
        return

    parser.print_help()


if __name__ == "__main__":
    main()
