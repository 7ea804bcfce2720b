"""Test configuration and fixtures."""
import asyncio
from types import SimpleNamespace

import pytest

from energy_wise.api.chat_session_api import SessionRegistry
from energy_wise.client import ChatClientController
from energy_wise.config import RelayConfig
from energy_wise.llm_base_client import LlmClient
from energy_wise.messages import LlmAIMessage

DEFAULT_REPLY = "Switch off appliances at the wall instead of leaving them on standby."


class FakeLlmClient(LlmClient):
    """Provider stand-in that records every call and answers from a script.

    Script entries: a str is returned as the reply, an exception is raised,
    anything else is returned as non-string content.
    """

    def __init__(self, replies=None, delay: float = 0.0):
        super().__init__(model="fake-model")
        self.replies = list(replies or [])
        self.delay = delay
        self.calls = []

    def _respond(self):
        reply = self.replies.pop(0) if self.replies else DEFAULT_REPLY
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, str):
            return LlmAIMessage(content=reply)
        return SimpleNamespace(content=reply)

    def invoke(self, messages):
        self.calls.append(list(messages))
        return self._respond()

    async def ainvoke(self, messages):
        self.calls.append(list(messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        return self._respond()


class RecordingView(ChatClientController):
    """Client view that records what the hooks were asked to do."""

    def __init__(self, **kwargs):
        self.sent = []
        self.scrolls = 0
        self.focus_count = 0
        self.statuses = []
        self.attempts = []
        kwargs.setdefault("send", self.sent.append)
        kwargs.setdefault("reply_delay", 0.01)
        super().__init__(**kwargs)

    def on_reconnect_attempt(self, attempt: int) -> None:
        self.attempts.append(attempt)
        super().on_reconnect_attempt(attempt)

    def _on_state_changed(self) -> None:
        if not self.statuses or self.statuses[-1] != self.status:
            self.statuses.append(self.status)

    def _scroll_to_latest(self) -> None:
        self.scrolls += 1

    def _focus_input(self) -> None:
        self.focus_count += 1


@pytest.fixture(autouse=True)
def reset_registry():
    """Give every test a fresh connection registry."""
    SessionRegistry._instance = None
    yield
    SessionRegistry._instance = None


@pytest.fixture
def fake_client():
    return FakeLlmClient()


@pytest.fixture
def relay_config():
    return RelayConfig(google_api_key="test-key", system_prompt="You are a test assistant.")
