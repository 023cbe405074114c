class TableauError(Exception):
    """Base class for errors raised while building or synthesising Clifford tableaux."""


class DependentStabilizersError(TableauError, ValueError):
    """The stabilizer rows of a tableau are not mutually independent."""


class UnsupportedOperationError(TableauError, NotImplementedError):
    """A gate kind that cannot be applied to a Clifford tableau."""


class UnknownQubitError(TableauError, KeyError):
    """A qubit label that is not part of the tableau or circuit it was used with."""

    def __str__(self):
        # KeyError quotes its argument, which garbles the message
        return str(self.args[0]) if self.args else ""
