from __future__ import annotations


class FlankcompError(Exception):
    """Base class for every fatal error raised by a flankcomp run."""


class ConfigurationError(FlankcompError, ValueError):
    """A required argument is missing or an option value is invalid."""


class DependencyError(FlankcompError, RuntimeError):
    """A required external program or library could not be found."""


class InputError(FlankcompError, ValueError):
    """An input file is missing, empty or malformed."""


class ConstraintViolation(FlankcompError, ValueError):
    """The requested run exceeds a hard limit (e.g. logo window size)."""


class CollaboratorFailure(FlankcompError, RuntimeError):
    """Sequence fetching or rendering failed."""
