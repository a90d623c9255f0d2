#!/usr/bin/env python3
"""
Board Snapshot Script

Signs in to Supabase and prints the deal board in stage order, optionally
limited to one stage tab.

Credentials come from --email/--password or the BOARD_EMAIL/BOARD_PASSWORD
environment variables (a .env file at the project root is read too).

Usage:
    python show_board.py
    python show_board.py --stage "Partner Call"
    python show_board.py --email partner@example.com --password ...
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.deal import Deal
from repositories.client import log_level
from services.board_context import BoardContext
from services.filter_view import ALL_STAGES


def format_deal(deal: Deal) -> str:
    updated = deal.last_updated.strftime("%Y-%m-%d %H:%M") if deal.last_updated else "-"
    return (
        f"{str(deal.id):>6}  {deal.stage:<14}  {deal.company:<28}  "
        f"{deal.sourcer or '-':<8}  {deal.partner or '-':<8}  {updated}"
    )


def show(context: BoardContext, args: argparse.Namespace) -> int:
    """Sign in if needed and print the board. Returns the process exit code."""

    session = context.start()

    if not session.is_signed_in:
        if not args.email or not args.password:
            print("[ERROR] Not signed in. Pass --email/--password or set BOARD_EMAIL/BOARD_PASSWORD.")
            return 1
        result = context.sign_in(args.email, args.password)
        if not result.success:
            print(f"[ERROR] Sign-in failed: {result.error}")
            return 1

    if context.last_load is None or not context.last_load.success:
        error = context.last_load.error if context.last_load else "no load attempted"
        print(f"[ERROR] Failed to load deals: {error}")
        return 1

    if args.stage != ALL_STAGES and args.stage not in context.registry:
        print(f"[WARNING] '{args.stage}' is not a known stage")

    deals = context.board.view(args.stage)
    print(f"{'ID':>6}  {'Stage':<14}  {'Company':<28}  {'Sourcer':<8}  {'Partner':<8}  Last updated")
    for deal in deals:
        print(format_deal(deal))
    print(f"\n{len(deals)} deal(s) shown ({args.stage})")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print the deal board")
    parser.add_argument("--stage", default=ALL_STAGES, help="Stage tab to show (default: All)")
    parser.add_argument("--email", default=os.getenv("BOARD_EMAIL"))
    parser.add_argument("--password", default=os.getenv("BOARD_PASSWORD"))
    args = parser.parse_args(argv)

    logging.basicConfig(level=log_level(), format="%(levelname)s %(name)s: %(message)s")

    context = BoardContext.from_supabase()
    try:
        return show(context, args)
    finally:
        context.close()


if __name__ == "__main__":
    sys.exit(main())
