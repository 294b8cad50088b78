"""
Command-line client for the Shortlink service.

Usage:
    shortlink-client shorten <url>
    shortlink-client list
    shortlink-client edit <id> [--url URL] [--code CODE]
    shortlink-client delete <id> [--local-only]
    shortlink-client sync
    shortlink-client check
    shortlink-client clear
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from shortlink.client.api_client import ShortenerClient
from shortlink.client.config import client_settings
from shortlink.client.exceptions import ClientError
from shortlink.client.history import URLHistory
from shortlink.client.local_storage import LocalStorage, SavedURL, SavedURLStorage


def _record(saved: SavedURL) -> Dict[str, Any]:
    return saved.model_dump(mode="json", by_alias=True)


def _print_result(payload: Dict[str, Any]) -> int:
    print(json.dumps({"success": True, **payload}, indent=2))
    return 0


def _print_error(message: str) -> int:
    print(json.dumps({"success": False, "error": message}, indent=2))
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlink-client",
        description="Shorten URLs and manage your local history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL (scheme defaults to https)
  %(prog)s shorten example.com/some/long/path

  # Give a saved URL a custom short code
  %(prog)s edit 0b6f... --code mylink

  # Push the local history to a freshly restarted server
  %(prog)s sync
        """
    )

    parser.add_argument(
        "--server",
        default=client_settings.SERVER_URL,
        help=f"Server base URL (default: {client_settings.SERVER_URL})"
    )
    parser.add_argument(
        "--storage",
        default=str(client_settings.STORAGE_PATH),
        help=f"Local storage file (default: {client_settings.STORAGE_PATH})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL and save it")
    shorten_parser.add_argument("url", help="URL to shorten")

    subparsers.add_parser("list", help="List saved URLs")

    edit_parser = subparsers.add_parser("edit", help="Change a saved URL or its short code")
    edit_parser.add_argument("id", help="Id of the saved URL")
    edit_parser.add_argument("--url", help="New original URL")
    edit_parser.add_argument("--code", help="New short code")

    delete_parser = subparsers.add_parser("delete", help="Delete a saved URL")
    delete_parser.add_argument("id", help="Id of the saved URL")
    delete_parser.add_argument(
        "--local-only",
        action="store_true",
        help="Keep the short code on the server"
    )

    subparsers.add_parser("sync", help="Push saved URLs to the server")
    subparsers.add_parser("check", help="Report saved URLs the server no longer knows")
    subparsers.add_parser("clear", help="Delete the whole local history")

    return parser


def run(args: argparse.Namespace, history: URLHistory) -> int:
    if args.command == "shorten":
        saved = history.shorten(args.url)
        return _print_result({"url": _record(saved)})

    if args.command == "list":
        urls = history.list()
        return _print_result({"count": len(urls), "urls": [_record(u) for u in urls]})

    if args.command == "edit":
        if not args.url and not args.code:
            return _print_error("Nothing to change: pass --url or --code")
        saved = history.edit(args.id, original_url=args.url, short_code=args.code)
        return _print_result({"url": _record(saved)})

    if args.command == "delete":
        if not history.delete(args.id, remote=not args.local_only):
            return _print_error(f"No saved URL with id '{args.id}'")
        return _print_result({"deleted": args.id})

    if args.command == "sync":
        return _print_result({"pushed": history.sync()})

    if args.command == "check":
        drifted = history.check()
        return _print_result({"count": len(drifted), "urls": [_record(u) for u in drifted]})

    if args.command == "clear":
        history.clear()
        return _print_result({})

    return _print_error(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None, client: Optional[ShortenerClient] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    storage = SavedURLStorage(LocalStorage(args.storage))
    api_client = client or ShortenerClient(base_url=args.server)

    try:
        return run(args, URLHistory(storage, api_client))
    except ClientError as e:
        return _print_error(str(e))
    finally:
        api_client.close()


if __name__ == "__main__":
    sys.exit(main())
