"""Exception types raised by cssgrade."""


class CssGradeError(Exception):
    """Base class for cssgrade errors."""


class CatalogError(CssGradeError):
    """A grading catalog is malformed or references unknown data."""


class ConfigError(CssGradeError):
    """Grader configuration could not be loaded."""
