"""Example MDPs."""

from .toy import build_toy_mdp, toy_identities

__all__ = ['build_toy_mdp', 'toy_identities']
