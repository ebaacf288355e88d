"""Shared logging helpers for etcdboot."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Log records go to stderr so that stdout only carries the emitted etcd
    environment. Pass ``force=True`` to reconfigure during tests or when the
    CLI raises the verbosity.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
