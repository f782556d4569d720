"""Exception types raised by buildstamp."""


class BuildstampError(Exception):
    """Base class for all buildstamp errors."""


class ExecutionError(BuildstampError):
    """The external git command could not be used."""


class SetupError(ExecutionError):
    """The git executable was not found on the search path."""


class QueryError(ExecutionError):
    """A git query could not be launched.

    A query that launches and exits non-zero is not an error; only a failure
    to start the process ends up here.
    """


class EncodingDefect(BuildstampError, AssertionError):
    """A commit digest has the wrong shape.

    Git always reports a fixed-length hex hash, so this signals a logic error
    rather than a condition callers are expected to recover from.
    """
