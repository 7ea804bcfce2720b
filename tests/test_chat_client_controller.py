"""Tests for the client-side chat state machine."""
import asyncio

import pytest

from energy_wise.client import ConnectionStatus
from energy_wise.client.chat_client_controller import (
    CONNECT_ERROR_NOTICE,
    DISCONNECT_NOTICE,
    INVALID_REPLY_NOTICE,
    STATUS_HINTS,
    WELCOME_MESSAGE,
)
from energy_wise.llm_base_models import Role
from .conftest import RecordingView


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def connected_view(view):
    view.on_connect()
    return view


class TestInitialState:

    def test_starts_connecting_with_welcome(self, view):
        assert view.status == ConnectionStatus.CONNECTING
        assert len(view.messages) == 1
        assert view.messages[0].role == Role.ASSISTANT
        assert view.messages[0].content == WELCOME_MESSAGE
        assert not view.is_typing
        assert not view.input_enabled

    def test_welcome_can_be_disabled(self):
        assert RecordingView(welcome_message=None).messages == []

    @pytest.mark.parametrize("status", list(ConnectionStatus))
    def test_status_hint(self, view, status):
        view.status = status
        assert view.status_hint == STATUS_HINTS[status]


class TestSubmit:
    """Sending user text."""

    def test_submit_while_connected(self, connected_view):
        before = len(connected_view.messages)
        assert connected_view.submit("How can I save electricity?")

        assert connected_view.sent == ["How can I save electricity?"]
        assert len(connected_view.messages) == before + 1
        assert connected_view.messages[-1].role == Role.USER
        assert connected_view.messages[-1].content == "How can I save electricity?"
        assert connected_view.input_text == ""

    def test_submit_uses_input_buffer(self, connected_view):
        connected_view.set_input("hello")
        assert connected_view.submit()
        assert connected_view.sent == ["hello"]
        assert connected_view.input_text == ""

    def test_text_is_sent_untrimmed(self, connected_view):
        connected_view.submit("  spaced  ")
        assert connected_view.sent == ["  spaced  "]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_is_ignored(self, connected_view, text):
        before = len(connected_view.messages)
        assert not connected_view.submit(text)
        assert connected_view.sent == []
        assert len(connected_view.messages) == before

    @pytest.mark.parametrize("status", [
        ConnectionStatus.CONNECTING, ConnectionStatus.DISCONNECTED, ConnectionStatus.ERROR,
    ])
    def test_not_connected_is_ignored(self, view, status):
        view.status = status
        view.set_input("hello")
        before = len(view.messages)

        assert not view.submit()
        assert view.sent == []
        assert len(view.messages) == before
        assert view.input_text == "hello"

    def test_without_channel(self):
        view = RecordingView(send=None)
        view.on_connect()
        assert not view.submit("hello")


class TestReplies:
    """Replies show the typing indicator first and appear after the delay."""

    @pytest.mark.asyncio
    async def test_reply_is_delayed_and_cleaned(self, connected_view):
        before = len(connected_view.messages)
        connected_view.on_reply("**Tip:** use **LED** bulbs")

        assert connected_view.is_typing
        assert len(connected_view.messages) == before
        assert connected_view.pending_replies == 1

        await asyncio.sleep(0.05)
        assert not connected_view.is_typing
        assert connected_view.pending_replies == 0
        assert connected_view.messages[-1].role == Role.ASSISTANT
        assert connected_view.messages[-1].content == "Tip: use LED bulbs"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, 42, {"text": "hi"}])
    async def test_non_string_reply(self, connected_view, payload):
        connected_view.on_reply(payload)
        await asyncio.sleep(0.05)

        assert connected_view.messages[-1].role == Role.SYSTEM
        assert connected_view.messages[-1].content == INVALID_REPLY_NOTICE
        assert not any(
            m.role == Role.ASSISTANT and m.content != WELCOME_MESSAGE
            for m in connected_view.messages
        )
        assert not connected_view.is_typing

    @pytest.mark.asyncio
    async def test_close_drops_pending_replies(self, connected_view):
        before = len(connected_view.messages)
        connected_view.on_reply("too late")
        connected_view.close()
        await asyncio.sleep(0.05)

        assert len(connected_view.messages) == before
        assert connected_view.pending_replies == 0
        assert not connected_view.is_typing

    @pytest.mark.asyncio
    async def test_full_exchange(self, connected_view):
        connected_view.submit("How can I save electricity?")
        connected_view.on_reply("Try **LED** lighting.")
        await asyncio.sleep(0.05)

        assert [(m.role, m.content) for m in connected_view.messages[1:]] == [
            (Role.USER, "How can I save electricity?"),
            (Role.ASSISTANT, "Try LED lighting."),
        ]


class TestConnectionEvents:

    def test_connect(self, view):
        view.on_connect()
        assert view.status == ConnectionStatus.CONNECTED
        assert view.input_enabled
        assert view.focus_count == 1

    def test_connect_twice_focuses_once(self, view):
        view.on_connect()
        view.on_connect()
        assert view.focus_count == 1

    def test_disconnect(self, connected_view):
        before = len(connected_view.messages)
        connected_view.on_disconnect("transport close")

        assert connected_view.status == ConnectionStatus.DISCONNECTED
        assert not connected_view.input_enabled
        assert len(connected_view.messages) == before + 1
        assert connected_view.messages[-1].role == Role.SYSTEM
        assert connected_view.messages[-1].content == DISCONNECT_NOTICE

    def test_connect_error(self, view):
        before = len(view.messages)
        view.on_connect_error(OSError("connection refused"))

        assert view.status == ConnectionStatus.ERROR
        assert not view.input_enabled
        assert len(view.messages) == before + 1
        assert view.messages[-1].content == CONNECT_ERROR_NOTICE

    def test_reconnect_attempt(self, view):
        view.on_connect_error()
        view.on_reconnect_attempt(1)
        assert view.status == ConnectionStatus.CONNECTING
        assert view.attempts == [1]

    def test_reconnect_refocuses(self, connected_view):
        connected_view.on_disconnect()
        connected_view.on_reconnect_attempt(1)
        connected_view.on_connect()
        assert connected_view.focus_count == 2
        assert connected_view.statuses == [
            ConnectionStatus.CONNECTED,
            ConnectionStatus.DISCONNECTED,
            ConnectionStatus.CONNECTING,
            ConnectionStatus.CONNECTED,
        ]

    def test_scroll_after_every_entry(self, connected_view):
        scrolls = connected_view.scrolls
        connected_view.submit("one")
        connected_view.on_disconnect()
        assert connected_view.scrolls == scrolls + 2
