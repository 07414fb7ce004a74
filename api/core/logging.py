"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging

from . import config


def configure_logging(*, level: str | None = None, force: bool = False) -> None:
    """
    Initialise the root logger once.

    Messages follow the `event_name key=value ...` convention so they stay
    grep-friendly in container logs.
    """
    logging.basicConfig(
        level=(level or config.log_level()),
        format=f"%(asctime)s %(levelname)s {config.service_name()} [%(name)s] %(message)s",
        force=force,
    )
