"""
Finite Markov Decision Process graphs

A small library for building validated, immutable MDPs whose actions
carry a cumulative-probability outcome table, and for querying them in
both directions.

Modules:
- Models: Core data structures (Identity, OutcomeTable, MarkovDecisionProcess, MDPBuilder)
- CaseStudies: Example models
- config: Validation settings
"""

from . import Models
from . import CaseStudies
from .config import ValidationConfig, DEFAULT_CONFIG
from .Models import (
    Identity,
    Kind,
    state,
    action,
    Outcome,
    OutcomeTable,
    MarkovDecisionProcess,
    TransitionModel,
    MDPBuilder,
)

__all__ = [
    'Models', 'CaseStudies',
    'ValidationConfig', 'DEFAULT_CONFIG',
    'Identity', 'Kind', 'state', 'action',
    'Outcome', 'OutcomeTable',
    'MarkovDecisionProcess', 'TransitionModel', 'MDPBuilder',
]
__version__ = '0.1.0'
