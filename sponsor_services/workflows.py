"""
Proposal Workflow.

State machine for the sponsorship proposal lifecycle.  The declared
transitions are the typical path; ``accepted`` and ``rejected`` are the
only hard stops.
"""

from sponsor_kernel.domain.deals import ProposalStatus
from sponsor_kernel.domain.workflow import Transition, Workflow
from sponsor_kernel.logging_config import get_logger

logger = get_logger("services.workflows")

_PENDING = ProposalStatus.PENDING.value
_REVIEWING = ProposalStatus.REVIEWING.value
_NEGOTIATING = ProposalStatus.NEGOTIATING.value
_ACCEPTED = ProposalStatus.ACCEPTED.value
_REJECTED = ProposalStatus.REJECTED.value


PROPOSAL_WORKFLOW = Workflow(
    name="sponsorship_proposal",
    description="Sponsor proposal from submission to decision",
    initial_state=_PENDING,
    states=(_PENDING, _REVIEWING, _NEGOTIATING, _ACCEPTED, _REJECTED),
    transitions=(
        Transition(_PENDING, _REVIEWING, action="start_review"),
        Transition(_PENDING, _NEGOTIATING, action="open_negotiation"),
        Transition(_REVIEWING, _NEGOTIATING, action="open_negotiation"),
        Transition(_PENDING, _ACCEPTED, action="accept"),
        Transition(_PENDING, _REJECTED, action="reject"),
        Transition(_REVIEWING, _ACCEPTED, action="accept"),
        Transition(_REVIEWING, _REJECTED, action="reject"),
        Transition(_NEGOTIATING, _ACCEPTED, action="accept"),
        Transition(_NEGOTIATING, _REJECTED, action="reject"),
    ),
    terminal_states=(_ACCEPTED, _REJECTED),
)

# Statuses from which opening a negotiation moves the proposal forward.
NEGOTIATION_OPENS_FROM = frozenset({ProposalStatus.PENDING, ProposalStatus.REVIEWING})

logger.info(
    "proposal_workflow_registered",
    extra={
        "workflow_name": PROPOSAL_WORKFLOW.name,
        "state_count": len(PROPOSAL_WORKFLOW.states),
        "transition_count": len(PROPOSAL_WORKFLOW.transitions),
        "terminal_states": list(PROPOSAL_WORKFLOW.terminal_states),
    },
)
