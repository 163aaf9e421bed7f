import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the API and the command line tool.

    Args:
        level: Level name as configured via `LOG_LEVEL`.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Capture EmptySelectionWarning and friends in the same stream.
    logging.captureWarnings(True)
