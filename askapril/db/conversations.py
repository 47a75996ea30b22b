"""Supabase-backed conversation store."""

from datetime import datetime, timezone  # noqa: UP035

from askapril.core.conversation_store import ConversationStore
from askapril.core.errors import PersistenceError
from askapril.core.logging import get_logger
from askapril.core.schemas_copilot import Conversation
from askapril.db.supabase_client import get_supabase

logger = get_logger(__name__)

TABLE = "copilot_conversations"


def _utc_now_iso() -> str:
    """Get current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()  # noqa: UP017


class SupabaseConversationStore(ConversationStore):
    """Stores each conversation as a JSON payload row keyed by id."""

    def get(self, conversation_id: str) -> Conversation | None:
        supabase = get_supabase()

        try:
            response = (
                supabase.table(TABLE)
                .select("payload")
                .eq("id", conversation_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            logger.error(
                f"Failed to get conversation: {e}",
                extra={"conversation_id": conversation_id},
            )
            raise PersistenceError(str(e)) from e

        if not response or not response.data:
            return None
        return Conversation.model_validate(response.data["payload"])

    def set(self, conversation: Conversation) -> None:
        supabase = get_supabase()

        try:
            supabase.table(TABLE).upsert(
                {
                    "id": conversation.id,
                    "document_type": conversation.document_type,
                    "stage": conversation.stage.value,
                    "payload": conversation.model_dump(mode="json"),
                    "updated_at": _utc_now_iso(),
                },
                on_conflict="id",
            ).execute()
        except Exception as e:
            logger.error(
                f"Failed to save conversation: {e}",
                extra={"conversation_id": conversation.id},
            )
            raise PersistenceError(str(e)) from e

    def delete(self, conversation_id: str) -> None:
        supabase = get_supabase()

        try:
            supabase.table(TABLE).delete().eq("id", conversation_id).execute()
        except Exception as e:
            logger.error(
                f"Failed to delete conversation: {e}",
                extra={"conversation_id": conversation_id},
            )
            raise PersistenceError(str(e)) from e
