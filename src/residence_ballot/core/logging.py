"""Logging setup shared by the API process and the management CLI."""

from __future__ import annotations

import logging

from residence_ballot.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once per process."""
    global _configured
    if _configured:
        return
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
    _configured = True
