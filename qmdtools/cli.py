"""CLI entrypoints for qmdtools commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, QmdToolsConfig, load_config
from .frontmatter import FrontMatterError, export_frontmatter
from .git.status import GitNotFoundError, StatusReporter, render_status
from .logging import configure_logging, get_logger
from .r_packages import PackageRequirementDetector

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qmdtools",
        description="Utilities for Quarto documentation workspaces.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--root",
        default=".",
        help="Workspace root used to resolve relative paths (defaults to current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser(
        "detect-r-packages",
        help="Write the R packages the documents need to R.pkgs.",
    )
    _add_verbose_option(detect_parser, suppress_default=True)
    detect_parser.add_argument(
        "documents",
        nargs="*",
        help="Documents to scan (defaults to every tracked .qmd file).",
    )

    export_parser = subparsers.add_parser(
        "export-frontmatter",
        help="Extract YAML front matter from a .qmd document.",
    )
    _add_verbose_option(export_parser, suppress_default=True)
    export_parser.add_argument(
        "document",
        nargs="?",
        default=None,
        help="Document to read (defaults to the first .qmd file in the root).",
    )
    export_parser.add_argument(
        "--output",
        default=None,
        help="File name written under the root (default: metadata_qmd.yaml).",
    )
    export_parser.add_argument(
        "--validate",
        action="store_true",
        help="Fail when the front matter is not valid YAML.",
    )

    status_parser = subparsers.add_parser(
        "status",
        help="Show git status per matching top-level directory.",
    )
    _add_verbose_option(status_parser, suppress_default=True)
    status_parser.add_argument(
        "--pattern",
        default=None,
        help="Glob for directory names to report on (default: IPBES_*).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for qmdtools commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    root = Path(args.root).expanduser().resolve()
    if not root.is_dir():
        parser.exit(1, f"Workspace root is not a directory: {args.root}\n")

    try:
        config = load_config(root)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "detect-r-packages":
        _run_detect(parser, config, args.documents)
    elif args.command == "export-frontmatter":
        _run_export(parser, config, args)
    elif args.command == "status":
        _run_status(parser, config, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_detect(
    parser: argparse.ArgumentParser, config: QmdToolsConfig, documents: list[str]
) -> None:
    detector = PackageRequirementDetector(config.r_packages)
    try:
        result = detector.run(config.root, documents or None)
    except OSError as exc:
        parser.exit(
            1,
            f"qmdtools detect-r-packages failed: {exc}\nRun with --verbose for more details.\n",
        )
    rel_path = _relativize(result.output, config.root)
    if result.written:
        print(f"Wrote {rel_path} ({len(result.packages)} packages)")
    else:
        logger.info("No R usage detected (%s); removed %s", result.state, rel_path)


def _run_export(
    parser: argparse.ArgumentParser, config: QmdToolsConfig, args: argparse.Namespace
) -> None:
    output_name = args.output or config.frontmatter.output
    try:
        exported = export_frontmatter(
            config.root,
            args.document,
            output_name=output_name,
            validate=bool(args.validate),
        )
    except FileNotFoundError as exc:
        parser.exit(1, f"ERROR: {exc}\n")
    except FrontMatterError as exc:
        parser.exit(2, f"ERROR: {exc}\n")
    except OSError as exc:
        parser.exit(
            1,
            f"qmdtools export-frontmatter failed: {exc}\nRun with --verbose for more details.\n",
        )
    source = _relativize(exported.source, config.root)
    print(f"Wrote {_relativize(exported.output, config.root)} (from {source})")


def _run_status(
    parser: argparse.ArgumentParser, config: QmdToolsConfig, args: argparse.Namespace
) -> None:
    pattern = args.pattern or config.status.pattern
    try:
        statuses = StatusReporter().collect(config.root, pattern)
    except GitNotFoundError as exc:
        parser.exit(127, f"ERROR: {exc}\n")
    sys.stdout.write(render_status(statuses, pattern))


def _relativize(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
