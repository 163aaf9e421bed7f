from typing import Optional


class StormHunterError(Exception):
    """
    Base class for every error raised by the storm search.
    """


class ConfigurationError(StormHunterError):
    """
    Invalid run parameters (radius, delta, missing input paths).

    Raised before any shard is read.
    """


class DataFormatError(StormHunterError):
    """
    A shard or catalog line could not be parsed.

    The error is fatal for the run: skipping the line would silently
    change the wind speed statistics.
    """

    def __init__(self, source: str, line_number: Optional[int], message: str):
        self.source = source
        self.line_number = line_number
        self.message = message
        location = source if line_number is None else f"{source}:{line_number}"
        super().__init__(f"{location}: {message}")


class UndefinedStatisticsError(StormHunterError, ValueError):
    """
    Sample standard deviation requested with fewer than two samples.
    """


class EmptySelectionWarning(UserWarning):
    """
    No station lies within the search radius.

    Usually a configuration or data-availability problem rather than a
    genuine "no storms" result.
    """
