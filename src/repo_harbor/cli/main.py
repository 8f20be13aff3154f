"""CLI entry point: serve the HTTP API or inspect working copies locally."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from repo_harbor.lib.config import Config
from repo_harbor.lib.errors import RepoHarborError
from repo_harbor.lib.identifier import identifier_of
from repo_harbor.lib.tree import build_tree


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``repo-harbor`` command."""
    parser = argparse.ArgumentParser(
        prog="repo-harbor",
        description="Local repository checkouts over HTTP.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP server.")
    serve.add_argument("--host", default=None, help="Interface to bind.")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on.")
    serve.add_argument(
        "--storage-root",
        default=None,
        help="Directory holding cloned repositories (default: cwd).",
    )
    serve.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Enable debug logging.",
    )

    tree = subparsers.add_parser(
        "tree", help="Print the file tree of a working copy."
    )
    tree.add_argument("path", help="Path to a repository checkout.")
    tree.add_argument(
        "--id",
        dest="repository_id",
        default=None,
        help="Repository id used in file addresses (default: directory name).",
    )

    ident = subparsers.add_parser("id", help="Print the identifier of a clone URL.")
    ident.add_argument("url", help="Repository clone URL.")
    return parser


def _serve(args: argparse.Namespace) -> None:
    import uvicorn

    config = Config.from_env(
        overrides={
            "host": args.host,
            "port": args.port,
            "storage_root": args.storage_root,
            "verbose": args.verbose,
        }
    )
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Serving repositories from %s on %s:%d",
        config.storage_root,
        config.host,
        config.port,
    )
    from repo_harbor.server.app import app, get_config

    app.dependency_overrides[get_config] = lambda: config
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="debug" if config.verbose else "info",
    )


def _print_tree(path: str, repository_id: str | None) -> None:
    root = Path(path).expanduser()
    try:
        node = build_tree(root, repository_id or root.resolve().name)
    except RepoHarborError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"{root}/")
    for line in node.iter_lines(depth=1):
        print(line)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        try:
            _serve(args)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "tree":
        _print_tree(args.path, args.repository_id)
    else:
        print(identifier_of(args.url))


if __name__ == "__main__":
    main()
