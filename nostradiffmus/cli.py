"""CLI entrypoints for nostradiffmus commands."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from .config import TONES, resolve_config
from .errors import NostradiffmusError
from .git.hooks import HOOK_TYPES, install_hook, uninstall_hook
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator
from .output.report import PredictionReport, render_text

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


def _add_hook_type_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "kind",
        nargs="?",
        choices=HOOK_TYPES,
        default="pre-commit",
        help="Hook to manage (defaults to pre-commit).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nostradiffmus",
        description="Predict likely bug categories from your git diff.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    predict_parser = subparsers.add_parser(
        "predict",
        help="Analyze staged changes or a commit and predict the likely bug category.",
    )
    _add_verbose_option(predict_parser, suppress_default=True)
    predict_parser.add_argument(
        "--staged",
        action="store_true",
        help=(
            "Analyze staged changes. This is already the default; the flag exists so hook "
            "scripts can be explicit. --commit takes precedence when both are given."
        ),
    )
    predict_parser.add_argument(
        "--commit",
        help="Analyze a specific commit via git show.",
    )
    predict_parser.add_argument(
        "--tone",
        choices=TONES,
        default=None,
        help="Prophecy tone (defaults to the configured tone, then tragic).",
    )
    predict_parser.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON.",
    )
    predict_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress prophecy text and print only category + advice.",
    )
    predict_parser.add_argument(
        "--no-advisory",
        action="store_true",
        help="Skip the optional Copilot/local model advisory note.",
    )

    install_parser = subparsers.add_parser(
        "install-hook",
        help="Install a git hook that runs nostradiffmus automatically.",
    )
    _add_verbose_option(install_parser, suppress_default=True)
    _add_hook_type_argument(install_parser)

    uninstall_parser = subparsers.add_parser(
        "uninstall-hook",
        help="Remove a git hook previously installed by nostradiffmus.",
    )
    _add_verbose_option(uninstall_parser, suppress_default=True)
    _add_hook_type_argument(uninstall_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP prediction service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for nostradiffmus commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        if args.command == "predict":
            _run_predict(args)
        elif args.command == "install-hook":
            print(install_hook(args.kind).message)
        elif args.command == "uninstall-hook":
            print(uninstall_hook(args.kind).message)
        elif args.command == "serve":
            from .service import run_service

            run_service(host=args.host, port=args.port)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except NostradiffmusError as exc:
        parser.exit(1, f"nostradiffmus: {exc}\n")


def _run_predict(args: argparse.Namespace) -> None:
    config = resolve_config(Path.cwd())
    if args.no_advisory:
        config = replace(config, use_advisory=False)

    commit = args.commit or None
    if args.staged and commit:
        logger.debug("--commit %s overrides --staged", commit)
    outcome = Orchestrator(config).run(commit)

    if args.json:
        print(PredictionReport.from_outcome(outcome).to_json())
        return

    tone = args.tone or config.tone
    quiet = bool(args.quiet) or config.quiet
    print(render_text(outcome, tone=tone, quiet=quiet))


if __name__ == "__main__":
    main(sys.argv[1:])
