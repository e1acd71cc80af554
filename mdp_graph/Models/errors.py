"""Exceptions raised while building or querying a Markov decision process.

Construction failures:
- InvalidArgumentError: a required value (name, collection, reward) is absent or malformed
- StructuralMismatchError: a mapping's domain differs from the declared states/actions
- DanglingReferenceError: a mapping refers to a state/action that was never declared
- ProbabilityMassError: cumulative probabilities are not increasing or do not end at 1.0

Query failures:
- UnknownStateError / UnknownActionError: the argument is not a member of the MDP
"""


class MDPError(ValueError):
    """Base class for all errors raised by mdp_graph."""


class InvalidArgumentError(MDPError):
    pass


class StructuralMismatchError(MDPError):
    pass


class DanglingReferenceError(MDPError):
    pass


class ProbabilityMassError(MDPError):
    pass


class UnknownIdentityError(MDPError, KeyError):
    """A query argument is not part of the MDP."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class UnknownStateError(UnknownIdentityError):
    pass


class UnknownActionError(UnknownIdentityError):
    pass
