# policypulse/__main__.py
"""
Entry point for running PolicyPulse as a module:

    python -m policypulse list [--q TEXT] [--category NAME]
    python -m policypulse stats
    python -m policypulse create --address 0x.. --category Education --content "..." [--title ".."]
    python -m policypulse vote --address 0x.. ID (--up | --down)
    python -m policypulse serve [--host 127.0.0.1] [--port 8000]

Env toggles:
  POLICYPULSE_BACKEND=memory|json|http
  POLICYPULSE_DATA_PATH=./policypulse_store.json
  POLICYPULSE_API_URL=http://127.0.0.1:8545
  POLICYPULSE_SEAL_KEY=...   -> AES-GCM key when encoder.kind is "aesgcm"
"""

from __future__ import annotations

import argparse
import json
import os
import sys

from .config import configure_logging, get_bind_host, get_bind_port, load_config
from .errors import PolicyPulseError
from .runtime.models import ALL_CATEGORIES, CATEGORIES, ProposalDraft
from .runtime.projector import approval_ratio
from .service import build_service
from .signer import Signer


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="policypulse",
        description="Anonymous policy proposals and votes over a key-value backend",
    )
    p.add_argument("--config-dir", default=os.getcwd(), help="Directory holding policypulse_config.yaml")
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="List proposals, newest first")
    ls.add_argument("--q", default="", help="Case-insensitive search in content")
    ls.add_argument("--category", default=ALL_CATEGORIES, choices=[ALL_CATEGORIES] + CATEGORIES)

    sub.add_parser("stats", help="Show aggregate statistics")

    cr = sub.add_parser("create", help="Submit a new proposal")
    cr.add_argument("--address", required=True, help="Wallet address used as author")
    cr.add_argument("--category", required=True, choices=CATEGORIES)
    cr.add_argument("--content", required=True)
    cr.add_argument("--title", default="")

    vt = sub.add_parser("vote", help="Vote on a proposal")
    vt.add_argument("--address", required=True, help="Wallet address casting the vote")
    vt.add_argument("id")
    direction = vt.add_mutually_exclusive_group(required=True)
    direction.add_argument("--up", dest="up", action="store_true")
    direction.add_argument("--down", dest="up", action="store_false")

    sv = sub.add_parser("serve", help="Run the HTTP API")
    sv.add_argument("--host", default=None)
    sv.add_argument("--port", type=int, default=None)
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    cfg = load_config(args.config_dir)
    configure_logging(cfg)

    if args.cmd == "serve":
        import uvicorn

        from .app import create_app

        uvicorn.run(
            create_app(cfg),
            host=args.host or get_bind_host(cfg),
            port=args.port or get_bind_port(cfg),
        )
        return 0

    svc = build_service(cfg)
    try:
        if args.cmd == "list":
            svc.refresh()
            rows = svc.view(args.q, args.category)
            for r in rows:
                print(
                    f"[{r.id}] {r.category} by {r.author} - "
                    f"{r.upvotes} up / {r.downvotes} down ({approval_ratio(r):.0%})"
                )
            if not rows:
                print("No proposals.")

        elif args.cmd == "stats":
            svc.refresh()
            print(json.dumps(svc.summary().model_dump(), indent=2))

        elif args.cmd == "create":
            draft = ProposalDraft(title=args.title, category=args.category, content=args.content)
            pid = svc.submit(draft, Signer(address=args.address))
            print(svc.status.current().message)
            print(pid)

        elif args.cmd == "vote":
            rec = svc.cast_vote(args.id, args.up, Signer(address=args.address))
            print(svc.status.current().message)
            print(f"{rec.upvotes} up / {rec.downvotes} down")

    except PolicyPulseError as e:
        status = svc.status.current()
        print(status.message if status.visible else str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
