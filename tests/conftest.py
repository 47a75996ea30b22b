"""Pytest configuration and fixtures."""

import os

import pytest

from askapril.core.conversation_engine import ConversationEngine
from askapril.core.conversation_store import InMemoryConversationStore
from askapril.core.synthesis_queue import SynthesisQueue, SynthesisWorker


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["APRIL_ENV"] = "test"
    os.environ["CONVERSATION_STORE"] = "memory"


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def queue():
    # Zero delay so jobs are due as soon as they are queued
    return SynthesisQueue(delay_seconds=0)


@pytest.fixture
def engine(store, queue):
    return ConversationEngine(store=store, queue=queue)


@pytest.fixture
def worker(store, queue):
    return SynthesisWorker(queue=queue, store=store, poll_interval=0.01)


BASIC_ANSWERS = {
    "business_name": "Acme Diner",
    "industry": "restaurant",
    "team_size": "16-50",
}

FOLLOW_UP_ANSWERS = {
    "specific_regulations": "Food handler cards",
    "existing_policies": "",
}


@pytest.fixture
def basic_answers():
    return dict(BASIC_ANSWERS)


@pytest.fixture
def full_answers():
    return {**BASIC_ANSWERS, **FOLLOW_UP_ANSWERS}
