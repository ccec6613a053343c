"""Custom exceptions.

These are raised between pipeline stages and converted into
:class:`~npk_blend.models.Result` failures by
:func:`npk_blend.core.calculate_mix`; none of them escape it.
"""

from npk_blend.models import ErrorKind


class BlendError(Exception):
    """Base class for failures of a blend calculation."""

    kind: ErrorKind = ErrorKind.SOLVER_FAULT


class InvalidParametersError(BlendError, ValueError):
    """Total weight or dosing increment is not positive."""

    kind = ErrorKind.INVALID_PARAMETERS


class NoCandidatesError(BlendError):
    """No ingredient is left to blend."""

    kind = ErrorKind.NO_CANDIDATES


class SolverFaultError(BlendError):
    """The solver backend failed or is unavailable."""

    kind = ErrorKind.SOLVER_FAULT


class UnknownSolverError(BlendError, KeyError):
    """A solver backend name could not be resolved."""

    kind = ErrorKind.SOLVER_FAULT

    def __str__(self):
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""
