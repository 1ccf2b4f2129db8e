"""Exceptions raised while scraping and generating the schema."""


class SchemaScrapeError(Exception):
    """Base class for all schema generation errors."""


class FetchError(SchemaScrapeError):
    """Raised when a page cannot be fetched, after the single retry."""

    def __init__(self, url: str, cause: Exception | None = None):
        self.url = url
        self.cause = cause
        message = f"Failed to fetch {url}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ParseError(SchemaScrapeError):
    """Raised when a documentation page lacks a mandatory structural anchor."""


class PreviousSchemaUnavailable(SchemaScrapeError):
    """Raised when the previous run's schema cannot be loaded or is malformed.

    Never fatal: reconciliation degrades to placeholders for the run.
    """


class ConfigError(SchemaScrapeError):
    """Raised when a configuration table cannot be read or has the wrong shape."""
