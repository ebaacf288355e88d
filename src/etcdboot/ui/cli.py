# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from etcdboot.adapters.environment import render_exports, write_exports
from etcdboot.app import bootstrap_node
from etcdboot.config import ConfigurationError, configure_logging
from etcdboot.domain.errors import BootstrapError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decide whether this node creates or joins an etcd cluster",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Also write the export lines to this file",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Load settings from this dotenv file before bootstrapping",
    )
    parser.add_argument(
        "--topology",
        choices=("aws", "static"),
        help="Topology provider (defaults to ETCDBOOT_TOPOLOGY or aws)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details to stderr",
    )
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    if parsed_args.verbose:
        configure_logging(level=logging.DEBUG, force=True)
    if parsed_args.env_file is not None:
        if not parsed_args.env_file.is_file():
            log.error("Env file %s does not exist", parsed_args.env_file)
            sys.exit(2)
        load_dotenv(parsed_args.env_file, override=True)
    if parsed_args.topology is not None:
        os.environ["ETCDBOOT_TOPOLOGY"] = parsed_args.topology

    try:
        outcome = bootstrap_node()
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except BootstrapError as exc:
        log.error("Bootstrap aborted, do not start etcd: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during bootstrap")
        sys.exit(1)

    lines = render_exports(outcome.environment)
    for line in lines:
        print(line)
    if parsed_args.output is not None:
        write_exports(lines, parsed_args.output)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(130)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
