"""Conversation stage ordering and derived progress.

Flow:
  gathering_info ──┐
                   ├─→ generating_document → document_ready
  document_analysis┘

Both entry stages share rank 0; stages never move backward.
"""

from askapril.core.errors import StageTransitionError
from askapril.core.schemas_copilot import Conversation, Stage

STAGE_RANK: dict[Stage, int] = {
    Stage.GATHERING_INFO: 0,
    Stage.DOCUMENT_ANALYSIS: 0,
    Stage.GENERATING_DOCUMENT: 1,
    Stage.DOCUMENT_READY: 2,
}

STAGE_PROGRESS: dict[Stage, int] = {
    Stage.GATHERING_INFO: 25,
    Stage.GENERATING_DOCUMENT: 75,
    Stage.DOCUMENT_READY: 100,
}

STAGE_TIME_REMAINING: dict[Stage, str] = {
    Stage.GATHERING_INFO: "5-10 minutes",
    Stage.GENERATING_DOCUMENT: "2-3 minutes",
}


def advance_stage(conversation: Conversation, target: Stage) -> None:
    """Move a conversation strictly forward.

    Raises StageTransitionError for backward or same-rank moves.
    """
    current = conversation.stage
    if STAGE_RANK[target] <= STAGE_RANK[current]:
        raise StageTransitionError(
            f"Cannot move conversation from {current.value} to {target.value}",
            conversation_id=conversation.id,
        )
    conversation.stage = target


def progress_for(stage: Stage) -> int:
    return STAGE_PROGRESS.get(stage, 0)


def time_remaining_for(stage: Stage) -> str:
    return STAGE_TIME_REMAINING.get(stage, "0 minutes")
