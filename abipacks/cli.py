"""CLI entrypoints for abipacks commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .manifests import ManifestError
from .orchestrator import Orchestrator


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


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or .abipacks.yml file (defaults to current directory).",
    )
    parser.add_argument(
        "--contracts-dir",
        default=None,
        help="Directory of contract manifests, relative to the project directory.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abipacks",
        description="Build hardware-wallet ABI packs from block-explorer contract ABIs.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Fetch ABIs for every manifest and write packs plus index.json.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for pack files, relative to the project directory.",
    )
    build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Assemble packs without writing any files.",
    )
    build_parser.add_argument(
        "--skip-empty",
        action="store_true",
        help="Do not emit packs that ended up with zero definitions.",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List the contract manifests that a build would process.",
    )
    _add_verbose_option(list_parser, suppress_default=True)
    _add_path_argument(list_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for abipacks commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "build":
        try:
            outcome = orchestrator.run_build(
                args.path,
                contracts_dir=args.contracts_dir,
                output_dir=args.output_dir,
                dry_run=bool(getattr(args, "dry_run", False)),
                emit_empty_packs=False if args.skip_empty else None,
            )
        except (ConfigError, ManifestError, FileNotFoundError) as exc:
            parser.exit(1, f"abipacks build failed: {exc}\n")
        total_defs = sum(len(pack.defs) for pack in outcome.packs)
        if outcome.dry_run:
            print(f"{len(outcome.packs)} packs with {total_defs} defs (dry-run)")
            for entry in outcome.index:
                print(f"  {entry.fname}")
        else:
            print(f"Wrote {len(outcome.packs)} packs with {total_defs} defs")
    elif args.command == "list":
        try:
            manifests = orchestrator.run_list(args.path, contracts_dir=args.contracts_dir)
        except (ConfigError, ManifestError, FileNotFoundError) as exc:
            parser.exit(1, f"abipacks list failed: {exc}\n")
        for manifest in manifests:
            networks = sorted({tagged.network for tagged in manifest.addresses})
            print(
                f"{manifest.name} v{manifest.version}: "
                f"{len(manifest.addresses)} addresses on {', '.join(networks) or 'no networks'}"
            )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
