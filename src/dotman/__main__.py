"""Entry point: python -m dotman"""

from __future__ import annotations

import argparse
import sys

from dotman import __version__
from dotman.errors import DotmanError
from dotman.infrastructure.config import load_config
from dotman.infrastructure.logger import logger
from dotman.workspace import Workspace


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dotman", description="Manage dotfiles in a single workspace")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Print the list of mappings (default)")
    sub.add_parser("mappings", help="Alias of status")
    sub.add_parser("restore", help="Not implemented")

    link = sub.add_parser("link", help="Move a file into the workspace and link it back")
    link.add_argument("source")
    link.add_argument("dest", help="Path relative to the workspace root")

    unlink = sub.add_parser("unlink", help="Move a linked file back to its original location")
    unlink.add_argument("source")

    where = sub.add_parser("where", help="Print where a managed file lives in the workspace")
    where.add_argument("source")

    git = sub.add_parser("git", help="Run git inside the workspace")
    git.add_argument("args", nargs=argparse.REMAINDER)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse ``argv``, handing everything after ``git`` to git untouched.

    argparse would treat a leading ``--no-pager`` or ``-C`` as its own option.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    if argv and argv[0] == "git":
        return argparse.Namespace(command="git", args=argv[1:])
    return build_parser().parse_args(argv)


def _dispatch(workspace: Workspace, args: argparse.Namespace) -> int:
    command = args.command or "status"

    if command in ("status", "mappings"):
        workspace.status()
        return 0
    if command == "link":
        result = workspace.link(args.source, args.dest)
        if result.success:
            print("Linked!")
        return 0 if result.success else 1
    if command == "unlink":
        result = workspace.unlink(args.source)
        if result.success:
            print("Unlinked!")
        return 0 if result.success else 1
    if command == "where":
        return 0 if workspace.where(args.source) is not None else 1
    if command == "git":
        outcome = workspace.git(args.args)
        if outcome.exit_code is not None:
            return outcome.exit_code
        return 1
    if command == "restore":
        try:
            workspace.restore()
        except NotImplementedError as err:
            logger.error("Command failed", command=command, error=str(err))
            return 1
        return 0

    raise ValueError(f"Unknown subcommand: {command}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config()
        with Workspace.session(config) as workspace:
            return _dispatch(workspace, args)
    except (DotmanError, OSError) as err:
        logger.critical("Fatal error", error_type=type(err).__name__, error=str(err))
        return 2


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
