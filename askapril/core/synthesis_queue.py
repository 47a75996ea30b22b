"""Deferred document synthesis.

``SynthesisQueue`` holds one pending job per conversation id; enqueueing an id
that is already in flight is a no-op. ``SynthesisWorker`` polls for jobs whose
delay has elapsed, runs the synthesizer and writes the result back through the
conversation store.
"""

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable
from uuid import uuid4

from askapril.core.conversation_store import ConversationStore
from askapril.core.document_synthesizer import synthesize
from askapril.core.logging import get_logger
from askapril.core.schemas_copilot import Stage
from askapril.core.stage_progression import advance_stage

logger = get_logger(__name__)

# Configuration
DEFAULT_DELAY_SECONDS = 3.0
DEFAULT_POLL_INTERVAL = 0.5  # seconds


@dataclass
class SynthesisJob:
    conversation_id: str
    due_at: float


class SynthesisQueue:
    """Pending synthesis jobs keyed by conversation id."""

    def __init__(
        self,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.delay_seconds = delay_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._pending: dict[str, SynthesisJob] = {}
        self._in_flight: set[str] = set()

    def enqueue(self, conversation_id: str) -> bool:
        """Schedule synthesis; returns False if a job for this id is already in flight."""
        with self._lock:
            if conversation_id in self._in_flight:
                logger.debug(
                    "Synthesis already in flight, skipping enqueue",
                    extra={"conversation_id": conversation_id},
                )
                return False
            self._in_flight.add(conversation_id)
            self._pending[conversation_id] = SynthesisJob(
                conversation_id=conversation_id,
                due_at=self._clock() + self.delay_seconds,
            )

        logger.info(
            f"Queued synthesis (delay {self.delay_seconds}s)",
            extra={"conversation_id": conversation_id},
        )
        return True

    def claim_due(self) -> list[SynthesisJob]:
        """Remove and return jobs whose delay has elapsed (they stay in flight)."""
        now = self._clock()
        with self._lock:
            due = [job for job in self._pending.values() if job.due_at <= now]
            for job in due:
                del self._pending[job.conversation_id]
        return sorted(due, key=lambda job: job.due_at)

    def release(self, conversation_id: str) -> None:
        with self._lock:
            self._in_flight.discard(conversation_id)

    def is_in_flight(self, conversation_id: str) -> bool:
        with self._lock:
            return conversation_id in self._in_flight

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


class SynthesisWorker:
    """Background consumer of the synthesis queue."""

    def __init__(
        self,
        queue: SynthesisQueue,
        store: ConversationStore,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.queue = queue
        self.store = store
        self.poll_interval = poll_interval
        self._running = False
        self._processed_count = 0
        self._error_count = 0
        self._start_time: float | None = None

    @property
    def stats(self) -> dict[str, Any]:
        """Get worker statistics."""
        uptime = time.time() - self._start_time if self._start_time else 0
        return {
            "running": self._running,
            "pending": len(self.queue),
            "processed_count": self._processed_count,
            "error_count": self._error_count,
            "uptime_seconds": round(uptime, 1),
        }

    async def process_one(self, job: SynthesisJob) -> dict[str, Any]:
        """Synthesize one conversation's document and store it.

        Args:
            job: Claimed synthesis job

        Returns:
            Processing result dict
        """
        conversation_id = job.conversation_id
        run_id = str(uuid4())

        try:
            conversation = self.store.get(conversation_id)
            if conversation is None:
                self._error_count += 1
                logger.warning(
                    "Conversation vanished before synthesis",
                    extra={"conversation_id": conversation_id, "run_id": run_id},
                )
                return {"success": False, "conversation_id": conversation_id, "error": "not found"}

            if conversation.stage != Stage.GENERATING_DOCUMENT:
                logger.info(
                    f"Skipping synthesis for conversation in stage {conversation.stage.value}",
                    extra={"conversation_id": conversation_id, "run_id": run_id},
                )
                return {"success": False, "conversation_id": conversation_id, "error": "wrong stage"}

            document = synthesize(conversation)
            conversation.generated_document = document
            advance_stage(conversation, Stage.DOCUMENT_READY)
            conversation.updated_at = document.created_at
            self.store.set(conversation)

            self._processed_count += 1
            logger.info(
                f"Document generated: {document.title}",
                extra={"conversation_id": conversation_id, "run_id": run_id},
            )
            return {"success": True, "conversation_id": conversation_id, "title": document.title}

        except Exception as e:
            self._error_count += 1
            logger.exception(
                f"Synthesis failed: {e}",
                extra={"conversation_id": conversation_id, "run_id": run_id},
            )
            return {"success": False, "conversation_id": conversation_id, "error": str(e)}

        finally:
            self.queue.release(conversation_id)

    async def process_batch(self) -> list[dict[str, Any]]:
        """Process every job whose delay has elapsed."""
        results = []
        for job in self.queue.claim_due():
            results.append(await self.process_one(job))
        return results

    async def run_forever(self) -> None:
        """Poll the queue until stop() is called."""
        self._running = True
        self._start_time = time.time()

        logger.info(f"Starting synthesis worker (poll_interval={self.poll_interval}s)")

        while self._running:
            try:
                results = await self.process_batch()
                if results:
                    logger.info(
                        f"Processed {len(results)} synthesis jobs "
                        f"(total: {self._processed_count}, errors: {self._error_count})"
                    )
            except Exception as e:
                logger.exception(f"Error in synthesis loop: {e}")
            await asyncio.sleep(self.poll_interval)

        logger.info("Synthesis worker stopped")

    def stop(self) -> None:
        """Stop the worker gracefully."""
        logger.info("Stopping synthesis worker...")
        self._running = False
