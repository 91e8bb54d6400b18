"""Level gate: whether a level can currently be acted upon."""

from __future__ import annotations

from collections.abc import Sequence

from hse_approvals.domain.entities import ApprovalState, FlowDefinition, FlowLevel, LevelState
from hse_approvals.domain.enums import ApprovalOrder


def level_state_key(number: int) -> str:
    return f"level{number}"


def is_level_actionable(
    level_number: int,
    approval_order: ApprovalOrder,
    prior_level_states: Sequence[LevelState | None],
) -> bool:
    """Parallel levels are always open. A sequential level N opens once every
    level 1..N-1 has isCompleted set; level 1 is always open.

    prior_level_states is indexed from level 1 (None where nothing has been
    recorded). Levels missing from the sequence count as not completed, so a
    gap in a flow's numbering keeps the later levels locked.
    """
    if approval_order == ApprovalOrder.PARALLEL or level_number <= 1:
        return True
    if len(prior_level_states) < level_number - 1:
        return False
    return all(
        state is not None and state.is_completed
        for state in prior_level_states[: level_number - 1]
    )


def level_gate_open(
    definition: FlowDefinition, level: FlowLevel, state: ApprovalState
) -> bool:
    """is_level_actionable for a level of a loaded definition."""
    return is_level_actionable(
        level.number,
        definition.approval_order,
        [state.for_level(level_state_key(n)) for n in range(1, level.number)],
    )
