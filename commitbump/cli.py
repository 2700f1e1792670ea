import argparse
import logging
import sys

from dotenv import load_dotenv

from .classify import classify
from .config import Settings
from .errors import BumpError, GitError
from .runner import run

logger = logging.getLogger("commitbump")


def _setup_logging() -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commitbump", description="Bump the manifest version from the latest commit message."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_run = sub.add_parser("run", help="classify the latest commit and update the manifest")
    p_run.add_argument(
        "--manifest", help="manifest path (default: COMMITBUMP_MANIFEST or pubspec.yaml)"
    )
    p_run.add_argument("--message", help="commit message to use instead of `git log -1`")
    p_run.add_argument("--dry-run", action="store_true", help="compute the bump, write nothing")
    p_run.add_argument("--no-commit", action="store_true", help="write the manifest but do not commit")
    p_run.add_argument("--no-push", action="store_true", help="commit but do not push")

    p_cls = sub.add_parser("classify", help="print the bump decision for a commit message")
    p_cls.add_argument("message")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    if args.command == "classify":
        print(classify(args.message).value)
        return 0

    _setup_logging()
    settings = Settings.from_env()
    if args.manifest:
        settings.manifest_path = args.manifest
    if args.no_commit:
        settings.commit = False
    if args.no_push:
        settings.push = False
    try:
        result = run(settings, message=args.message, dry_run=args.dry_run)
    except (BumpError, GitError, OSError) as e:
        logger.error("%s: %s", type(e).__name__, e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(result.summary())
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
