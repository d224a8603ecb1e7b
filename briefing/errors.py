class BriefingError(Exception):
    """Base class for every fatal error of a briefing run."""


class ArgumentError(BriefingError):
    pass


class AdapterError(BriefingError):
    """An upstream call failed: bad status, bad shape or no result."""

    def __init__(self, adapter: str, message: str | None = None):
        self.adapter = adapter
        super().__init__(message or f"{adapter} failed")


class WriteError(BriefingError):
    pass
