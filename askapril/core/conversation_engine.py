"""Stage machine driving the co-pilot document wizard.

Each public method is one read-modify-write of a single conversation through
the injected store. Document synthesis is never run inline: reaching
``generating_document`` enqueues a job that the synthesis worker completes
after a fixed delay.
"""

import logging
import re
from datetime import datetime, timezone  # noqa: UP035
from functools import lru_cache
from typing import Any, Callable
from uuid import uuid4

from askapril.core import question_catalog as catalog
from askapril.core.config import get_settings
from askapril.core.conversation_store import ConversationStore, create_conversation_store
from askapril.core.document_analysis import (
    analyze_existing_document,
    generate_improvement_suggestions,
)
from askapril.core.errors import (
    ConversationNotFoundError,
    DocumentNotReadyError,
    EmptyDocumentError,
    UnknownDocumentTypeError,
    UnsupportedFormatError,
)
from askapril.core.logging import get_logger, log_with_context
from askapril.core.schemas_copilot import (
    ContinueConversationResponse,
    Conversation,
    ConversationStatusResponse,
    DocumentDownload,
    DownloadFormat,
    Message,
    OriginalDocument,
    Question,
    Stage,
    StartConversationResponse,
    UploadAnalysisResponse,
)
from askapril.core.stage_progression import advance_stage, progress_for, time_remaining_for
from askapril.core.synthesis_queue import SynthesisQueue, SynthesisWorker

logger = get_logger(__name__)

MSG_BASIC_INFO = "Before I can tailor your document, I need a few basics about your business."
MSG_FOLLOW_UP = (
    "Great! I have some follow-up questions to make sure your document is perfectly "
    "tailored to your business."
)
MSG_GENERATING = (
    "Perfect! I have all the information I need. Let me create your document now. "
    "This will take about 2-3 minutes..."
)
MSG_IMPROVING = (
    "Perfect! I'll now create an improved version of your document based on my analysis "
    "and your input. This will take about 2-3 minutes..."
)
MSG_STILL_GENERATING = "I'm still working on your document. It will be ready in a moment..."
MSG_READY = (
    "Your document is ready! You can download it below, and I'm here if you need any "
    "adjustments."
)
MSG_STATUS_READY = "Your document is ready for download!"

FORMAT_ALIASES = {"html": DownloadFormat.HTML, "text": DownloadFormat.TEXT, "txt": DownloadFormat.TEXT}
FORMAT_FILES = {
    DownloadFormat.HTML: (".html", "text/html"),
    DownloadFormat.TEXT: (".txt", "text/plain"),
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)  # noqa: UP017


def download_filename(title: str, extension: str) -> str:
    """Document title with whitespace runs replaced by underscores."""
    return re.sub(r"\s+", "_", title) + extension


class ConversationEngine:
    """Runs co-pilot conversations against a store and a synthesis queue."""

    def __init__(
        self,
        store: ConversationStore,
        queue: SynthesisQueue,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.queue = queue
        self._clock = clock

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _load(self, conversation_id: str) -> Conversation:
        conversation = self.store.get(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    def _append_message(self, conversation: Conversation, role: str, content: str) -> None:
        conversation.messages.append(Message(role=role, content=content, timestamp=self._clock()))

    def _merge_answers(self, conversation: Conversation, answers: dict[str, Any]) -> None:
        allowed = catalog.field_ids(conversation.document_type)
        for key, value in answers.items():
            if key not in allowed:
                logger.debug(
                    f"Ignoring answer for unknown field {key}",
                    extra={"conversation_id": conversation.id},
                )
                continue
            conversation.collected_info[key] = "" if value is None else str(value)

    def _start_generation(self, conversation: Conversation) -> None:
        advance_stage(conversation, Stage.GENERATING_DOCUMENT)
        self.queue.enqueue(conversation.id)

    def missing_information(self, conversation: Conversation) -> tuple[str, list[Question]]:
        """Decide what to ask next in ``gathering_info``.

        Returns ("basic", questions) while any basic field is blank,
        otherwise ("follow_up", questions) with at most the regulatory and
        existing-policies questions, each asked until its key is present.
        """
        collected = conversation.collected_info

        missing_basic = [
            q for q in catalog.BASIC_QUESTIONS if not (collected.get(q.id) or "").strip()
        ]
        if missing_basic:
            return "basic", missing_basic

        follow_ups: list[Question] = []
        industry = catalog.get_industry(collected.get("industry"))
        if industry and catalog.REGULATIONS_FIELD_ID not in collected:
            follow_ups.append(catalog.regulations_question(industry))
        if catalog.EXISTING_POLICIES_FIELD_ID not in collected:
            follow_ups.append(catalog.EXISTING_POLICIES_QUESTION)
        return "follow_up", follow_ups

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------

    def start(
        self,
        document_type: str | None,
        business_info: dict[str, Any] | None = None,
    ) -> StartConversationResponse:
        """
        Open a new conversation in ``gathering_info``.

        Args:
            document_type: Catalog document type
            business_info: Optional answers known up front

        Returns:
            StartConversationResponse with greeting and first question batch

        Raises:
            UnknownDocumentTypeError: If the type is not in the catalog
        """
        if not catalog.is_known_document_type(document_type):
            raise UnknownDocumentTypeError(
                "Invalid document type",
                availableTypes=catalog.available_document_types(),
            )

        template = catalog.get_template(document_type)
        now = self._clock()
        conversation = Conversation(
            id=uuid4().hex,
            document_type=document_type,
            stage=Stage.GATHERING_INFO,
            business_info=dict(business_info or {}),
            created_at=now,
            updated_at=now,
        )
        self._merge_answers(conversation, business_info or {})

        greeting = (
            f"Hi! I'm April, and I'm excited to help you create a professional "
            f"{template.name.lower()}. This usually takes about {template.time_estimate}, "
            "and I'll guide you through each step."
        )
        self._append_message(conversation, "assistant", greeting)
        self.store.set(conversation)

        logger.info(
            f"Started {document_type} conversation",
            extra={"conversation_id": conversation.id},
        )

        return StartConversationResponse(
            conversation_id=conversation.id,
            message=greeting,
            questions=catalog.initial_questions(document_type),
            estimated_time=template.time_estimate,
        )

    def start_from_upload(
        self,
        raw_text: str,
        filename: str,
        document_type: str | None = None,
        improvement_goals: str | None = None,
    ) -> UploadAnalysisResponse:
        """
        Open a conversation in ``document_analysis`` for an uploaded document.

        Args:
            raw_text: Decoded document text
            filename: Original filename
            document_type: Optional catalog type (enables handbook checks)
            improvement_goals: What the user wants improved

        Returns:
            UploadAnalysisResponse with analysis and suggestions

        Raises:
            EmptyDocumentError: If the text is empty
        """
        if not raw_text or not raw_text.strip():
            raise EmptyDocumentError("Could not read uploaded file")

        document_type = document_type or catalog.UPLOAD_DOCUMENT_TYPE
        analysis = analyze_existing_document(raw_text, document_type)

        now = self._clock()
        conversation = Conversation(
            id=uuid4().hex,
            document_type=document_type,
            stage=Stage.DOCUMENT_ANALYSIS,
            original_document=OriginalDocument(filename=filename, content=raw_text, analysis=analysis),
            collected_info={catalog.IMPROVEMENT_GOALS_FIELD_ID: improvement_goals or ""},
            created_at=now,
            updated_at=now,
        )

        message = f"I've analyzed your {filename}. Here's what I found:"
        self._append_message(conversation, "assistant", message)
        self.store.set(conversation)

        logger.info(
            f"Analyzed upload {filename}: {len(analysis.strengths)} strengths, "
            f"{len(analysis.gaps)} gaps",
            extra={"conversation_id": conversation.id},
        )

        return UploadAnalysisResponse(
            conversation_id=conversation.id,
            message=message,
            analysis=analysis,
            suggestions=generate_improvement_suggestions(analysis),
        )

    def continue_conversation(
        self,
        conversation_id: str,
        answers: dict[str, Any] | None = None,
        message: str | None = None,
    ) -> ContinueConversationResponse:
        """
        Take one conversational turn.

        Args:
            conversation_id: Conversation id
            answers: Answers keyed by question id (merged, last write wins)
            message: Free-text user message

        Returns:
            ContinueConversationResponse for the next step

        Raises:
            ConversationNotFoundError: If the id is unknown
        """
        conversation = self._load(conversation_id)

        if answers:
            self._merge_answers(conversation, answers)
        if message:
            self._append_message(conversation, "user", message)

        stage = conversation.stage

        if stage == Stage.DOCUMENT_ANALYSIS:
            self._start_generation(conversation)
            response = ContinueConversationResponse(
                message=MSG_IMPROVING, next_step="document_generation", status="generating"
            )

        elif stage == Stage.GATHERING_INFO:
            kind, questions = self.missing_information(conversation)
            if questions:
                response = ContinueConversationResponse(
                    message=MSG_BASIC_INFO if kind == "basic" else MSG_FOLLOW_UP,
                    questions=questions,
                    next_step="answer_questions",
                )
            else:
                self._start_generation(conversation)
                response = ContinueConversationResponse(
                    message=MSG_GENERATING, next_step="document_generation", status="generating"
                )

        elif stage == Stage.GENERATING_DOCUMENT:
            response = ContinueConversationResponse(
                message=MSG_STILL_GENERATING, next_step="document_generation", status="generating"
            )

        else:
            response = ContinueConversationResponse(
                message=MSG_READY,
                document=conversation.generated_document,
                next_step="review_and_download",
                status="ready",
            )

        self._append_message(conversation, "assistant", response.message)
        conversation.updated_at = self._clock()
        self.store.set(conversation)

        if conversation.stage != stage:
            log_with_context(
                logger,
                logging.INFO,
                "Conversation advanced",
                conversation_id=conversation_id,
                from_stage=stage.value,
                to_stage=conversation.stage.value,
            )

        return response

    def status(self, conversation_id: str) -> ConversationStatusResponse:
        """
        Report stage, progress and time remaining.

        Raises:
            ConversationNotFoundError: If the id is unknown
        """
        conversation = self._load(conversation_id)
        stage = conversation.stage

        response = ConversationStatusResponse(
            status=stage,
            progress=progress_for(stage),
            estimated_time_remaining=time_remaining_for(stage),
        )
        if stage == Stage.DOCUMENT_READY:
            response.document = conversation.generated_document
            response.message = MSG_STATUS_READY
        return response

    def download(self, conversation_id: str, format: str = "html") -> DocumentDownload:
        """
        Render the generated document for download.

        Args:
            conversation_id: Conversation id
            format: "html", "text" or "txt"

        Returns:
            DocumentDownload with bytes, filename and media type

        Raises:
            ConversationNotFoundError: If the id is unknown
            DocumentNotReadyError: If no document is attached yet
            UnsupportedFormatError: If the format is not html or text
        """
        conversation = self._load(conversation_id)
        document = conversation.generated_document
        if document is None:
            raise DocumentNotReadyError(conversation_id)

        download_format = FORMAT_ALIASES.get((format or "").lower())
        if download_format is None:
            raise UnsupportedFormatError("Unsupported format", supportedFormats=["html", "txt"])

        extension, media_type = FORMAT_FILES[download_format]
        content = (
            document.html_content if download_format == DownloadFormat.HTML else document.text_content
        )
        return DocumentDownload(
            content=content.encode("utf-8"),
            filename=download_filename(document.title, extension),
            media_type=media_type,
        )


@lru_cache(maxsize=1)
def get_conversation_engine() -> ConversationEngine:
    """Get the process-wide engine wired from settings (cached singleton)."""
    settings = get_settings()
    return ConversationEngine(
        store=create_conversation_store(settings.CONVERSATION_STORE),
        queue=SynthesisQueue(delay_seconds=settings.SYNTHESIS_DELAY_SECONDS),
    )


@lru_cache(maxsize=1)
def get_synthesis_worker() -> SynthesisWorker:
    """Get the worker consuming the engine's synthesis queue (cached singleton)."""
    engine = get_conversation_engine()
    return SynthesisWorker(
        queue=engine.queue,
        store=engine.store,
        poll_interval=get_settings().SYNTHESIS_POLL_INTERVAL,
    )
