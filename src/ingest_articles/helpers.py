"""Helper functions for the news-manage CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_common_args
from common.credentials import CREDENTIAL_KEYS


def parse_manage_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for managing feeds, keywords and credentials.'''

    parser = argparse.ArgumentParser(description="Manage feeds, keywords and credentials.")
    add_common_args(parser)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show feeds, keywords, articles and notifications.")

    add_feed = sub.add_parser("add-feed")
    add_feed.add_argument("name")
    add_feed.add_argument("url")

    remove_feed = sub.add_parser("remove-feed")
    remove_feed.add_argument("url")

    add_keyword = sub.add_parser("add-keyword")
    add_keyword.add_argument("text")

    remove_keyword = sub.add_parser("remove-keyword")
    remove_keyword.add_argument("id")

    toggle_keyword = sub.add_parser("toggle-keyword")
    toggle_keyword.add_argument("id")

    set_credential = sub.add_parser("set-credential")
    set_credential.add_argument("name", choices=CREDENTIAL_KEYS)
    set_credential.add_argument("value")

    return parser.parse_args(argv)


def format_status_line(label: str, status: str, detail: str = "") -> str:
    line = f"  [{status}] {label}"
    return f"{line} - {detail}" if detail else line
