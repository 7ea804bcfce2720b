"""Per-connection conversation relay between a client and the LLM provider."""
import asyncio
import logging
from typing import Any, List, Optional, Union
from uuid import uuid4

from .llm_base_client import LlmClient, ProviderResponseError
from .llm_base_models import ChatHistory, ChatMessage, Role
from .messages import LlmAIMessage, LlmHumanMessage, LlmSystemMessage

logger = logging.getLogger(__name__)

EMPTY_MESSAGE_REPLY = "Sorry, I received an empty message."
PROVIDER_ERROR_REPLY = "Sorry, I encountered an error while processing your request. Please try again later."


class ConversationSession:
    """Conversation state of a single connection.

    The history is seeded with exactly one system message and only grows.
    Turns are serialized: a second message sent while the provider is still
    answering the first waits for it, so user and assistant messages always
    alternate in arrival order.
    """

    def __init__(
        self,
        client: LlmClient,
        system_prompt: str,
        session_id: Optional[str] = None,
    ):
        """Initialize the session.

        Args:
            client: Provider client shared by all sessions
            system_prompt: Instruction the history is seeded with
            session_id: Connection identifier used in log lines
        """
        self.client = client
        self.session_id = session_id or str(uuid4())
        self.history = ChatHistory()
        self.history.add_message(ChatMessage(role=Role.SYSTEM, content=system_prompt))
        self._turn_lock = asyncio.Lock()

    @property
    def system_prompt(self) -> str:
        return self.history.messages[0].content

    @property
    def is_busy(self) -> bool:
        """True while a turn is waiting on the provider."""
        return self._turn_lock.locked()

    def add_message(self, role: Union[Role, str], content: str) -> None:
        """Append a message to the history."""
        if isinstance(role, str):
            role = Role(role)
        self.history.add_message(ChatMessage(role=role, content=content))

    def get_history(self) -> ChatHistory:
        return self.history

    def _prepare_messages(self) -> List[Union[LlmSystemMessage, LlmHumanMessage, LlmAIMessage]]:
        """Convert the history to provider messages."""
        messages = []
        for msg in self.history.messages:
            if msg.role == Role.SYSTEM:
                messages.append(LlmSystemMessage(content=msg.content))
            elif msg.role == Role.USER:
                messages.append(LlmHumanMessage(content=msg.content))
            elif msg.role == Role.ASSISTANT:
                messages.append(LlmAIMessage(content=msg.content))
        return messages

    @staticmethod
    def is_valid_user_text(text: Any) -> bool:
        return isinstance(text, str) and text.strip() != ""

    async def handle_user_message(self, text: Any) -> str:
        """Run one turn and return the text to send back to the client.

        Never raises for provider problems: invalid input yields
        EMPTY_MESSAGE_REPLY without touching the history, a failed provider
        call yields PROVIDER_ERROR_REPLY and leaves the user message in place.
        """
        if not self.is_valid_user_text(text):
            logger.warning(f"[RELAY] [{self.session_id}] Rejected empty or non-text message")
            return EMPTY_MESSAGE_REPLY

        async with self._turn_lock:
            logger.info(f"[RELAY] [{self.session_id}] User: {text}")
            self.add_message(Role.USER, text)

            try:
                reply = await self._generate()
            except Exception as e:
                logger.error(
                    f"[RELAY] [{self.session_id}] Error processing message: {type(e).__name__}: {e}",
                    exc_info=True,
                )
                return PROVIDER_ERROR_REPLY

            logger.info(f"[RELAY] [{self.session_id}] AI: {reply}")
            self.add_message(Role.ASSISTANT, reply)
            return reply

    async def _generate(self) -> str:
        response = await self.client.ainvoke(self._prepare_messages())
        content = getattr(response, "content", None)
        if not isinstance(content, str):
            raise ProviderResponseError(
                f"Invalid response format from AI model: {type(content).__name__}"
            )
        return content
