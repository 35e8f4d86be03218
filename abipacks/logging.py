"""Logger hierarchy for abipacks.

Components log under ``abipacks.<component>``; work done against one explorer
logs under ``abipacks.<component>.<network>`` so console lines carry the
network they concern, e.g. ``[abipacks:polygon] ERROR Failed to fetch ...``.
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "abipacks"


class ConsoleFormatter(logging.Formatter):
    """Prefix lines with ``[abipacks]`` or ``[abipacks:<network>]``."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        return f"[{_tag(record.name)}] {super().format(record)}"


def _tag(logger_name: str) -> str:
    parts = logger_name.split(".")
    if len(parts) >= 3 and parts[0] == ROOT_LOGGER:
        return f"{ROOT_LOGGER}:{parts[2]}"
    return ROOT_LOGGER


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def get_network_logger(component: str, network: str) -> logging.Logger:
    """Logger for ``component`` work against the explorer of ``network``."""
    return get_logger(f"{component}.{network}")


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter())
    logger.addHandler(console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(sink)

    return logger


__all__ = ["ConsoleFormatter", "configure_logging", "get_logger", "get_network_logger"]
