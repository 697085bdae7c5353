"""
Canonical workflow types (``sponsor_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects describing a document lifecycle: its states, the
transitions on its typical path and the states nothing may leave.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* ``initial_state`` and every ``terminal_states`` entry are members of ``states``.
* Transitions reference only states in ``states``.
* Terminal states have no outgoing transitions.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Transition:
    """A transition on the workflow's typical path."""
    from_state: str
    to_state: str
    action: str


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a document lifecycle.

    ``transitions`` describe the typical path. Whether a caller may jump
    between non-terminal states off that path is the owning service's
    decision; leaving a terminal state never is.
    """
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        known = set(self.states)
        if self.initial_state not in known:
            raise ValueError(f"initial_state {self.initial_state!r} not in states")
        for state in self.terminal_states:
            if state not in known:
                raise ValueError(f"terminal state {state!r} not in states")
        for t in self.transitions:
            if t.from_state not in known or t.to_state not in known:
                raise ValueError(
                    f"transition {t.from_state!r} -> {t.to_state!r} references unknown state"
                )
            if t.from_state in self.terminal_states:
                raise ValueError(f"terminal state {t.from_state!r} has outgoing transition")

    def is_terminal(self, state: str) -> bool:
        return state in self.terminal_states

    def is_typical(self, from_state: str, to_state: str) -> bool:
        """True if the move is one of the declared transitions."""
        return any(
            t.from_state == from_state and t.to_state == to_state
            for t in self.transitions
        )
