from __future__ import annotations


class HarTidyError(Exception):
    """Base class for every failure of the tidy-data pipeline."""


class MissingFileError(HarTidyError, FileNotFoundError):
    """A required input file is absent."""


class MalformedDataError(HarTidyError, ValueError):
    """Row/column counts disagree or a value cannot be parsed."""


class SchemaMismatchError(HarTidyError, ValueError):
    """Column sets of two tables (or a table and its schema) diverge."""


class EmptyGroupError(HarTidyError, LookupError):
    """An (activity, subject) group that was asked for has no observations."""
