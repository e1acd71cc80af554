"""Named identities for the states and actions of an MDP."""

from dataclasses import dataclass
from enum import Enum

from .errors import InvalidArgumentError


class Kind(Enum):
    STATE = "State"
    ACTION = "Action"


@dataclass(frozen=True)
class Identity:
    """
    An immutable, named node of the decision graph.

    kind : whether this identity is a state or an action
    name : non-empty label

    Equality and hashing use (kind, name), so a state and an action that
    share a name are different identities.
    """
    kind: Kind
    name: str

    def __post_init__(self):
        if not isinstance(self.kind, Kind):
            raise InvalidArgumentError(f"kind must be a Kind, got {self.kind!r}")
        if not isinstance(self.name, str) or not self.name:
            raise InvalidArgumentError(
                f"{self.kind.value} name must be a non-empty string, got {self.name!r}"
            )

    @classmethod
    def state(cls, name: str) -> "Identity":
        return cls(Kind.STATE, name)

    @classmethod
    def action(cls, name: str) -> "Identity":
        return cls(Kind.ACTION, name)

    @property
    def is_state(self) -> bool:
        return self.kind is Kind.STATE

    @property
    def is_action(self) -> bool:
        return self.kind is Kind.ACTION

    def __repr__(self) -> str:
        return f"{self.kind.value}({self.name})"

    __str__ = __repr__


def state(name: str) -> Identity:
    """Shorthand for Identity.state(name)."""
    return Identity.state(name)


def action(name: str) -> Identity:
    """Shorthand for Identity.action(name)."""
    return Identity.action(name)
