"""Exception hierarchy shared by the API client, models and terminal UI."""

from __future__ import annotations


class FoursError(Exception):
    """Base class for every error raised by fours."""


class FetchError(FoursError):
    """The API could not be reached or answered with an HTTP error."""


class FormatError(FoursError):
    """A payload arrived but does not have the expected shape."""


class NotFound(FoursError, LookupError):
    """A subject search or lookup matched nothing."""


class TerminalError(FoursError):
    """Exclusive terminal control could not be acquired or released."""


class RenderError(FoursError):
    """Post markup could not be turned into text."""
