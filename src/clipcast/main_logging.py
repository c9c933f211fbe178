"""Logging configuration for the clipcast CLI."""
import logging


def configure_logging(verbose: bool) -> None:
    """Configure the root logger once for clipcast and uvicorn.

    Args:
        verbose: If True, log at DEBUG level; otherwise WARNING level.

    Warnings such as dropped subscribers are always printed to stderr.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
