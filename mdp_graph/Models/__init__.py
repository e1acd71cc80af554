"""Core data structures: identities, outcome tables, and the MDP itself."""

from .errors import (
    MDPError,
    InvalidArgumentError,
    StructuralMismatchError,
    DanglingReferenceError,
    ProbabilityMassError,
    UnknownIdentityError,
    UnknownStateError,
    UnknownActionError,
)
from .identity import Identity, Kind, state, action
from .outcome_table import Outcome, OutcomeTable
from .mdp import MarkovDecisionProcess, TransitionModel
from .builder import MDPBuilder

__all__ = [
    'MDPError', 'InvalidArgumentError', 'StructuralMismatchError',
    'DanglingReferenceError', 'ProbabilityMassError',
    'UnknownIdentityError', 'UnknownStateError', 'UnknownActionError',
    'Identity', 'Kind', 'state', 'action',
    'Outcome', 'OutcomeTable',
    'MarkovDecisionProcess', 'TransitionModel',
    'MDPBuilder',
]
