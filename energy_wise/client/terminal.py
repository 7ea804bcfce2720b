"""Terminal chat client: talk to a running relay from the console.

Usage::

    poetry run energy-wise-chat

Environment variables:
    ENERGY_WISE_URL: WebSocket URL of the relay (default: ws://localhost:3001/ws)
"""

import asyncio
import logging
import os
import sys
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from energy_wise.llm_base_models import Role
from .chat_client_controller import ChatClientController, ConnectionStatus
from .connection import DEFAULT_URL, ChannelConnection

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    ConnectionStatus.CONNECTED: "green",
    ConnectionStatus.CONNECTING: "yellow",
    ConnectionStatus.DISCONNECTED: "bright_black",
    ConnectionStatus.ERROR: "red",
}

QUIT_COMMANDS = {"/quit", "/exit"}


class TerminalChatView(ChatClientController):
    """Renders the client state on a rich console.

    The console is append-only, so "scrolling" means printing the entries
    that have not been printed yet.
    """

    def __init__(self, console: Optional[Console] = None, **kwargs):
        super().__init__(**kwargs)
        self.console = console or Console()
        self._rendered = 0
        self._shown_status: Optional[ConnectionStatus] = None
        self._shown_typing = False

    def _on_state_changed(self) -> None:
        if self.status != self._shown_status:
            self._shown_status = self.status
            style = STATUS_STYLES[self.status]
            self.console.print(
                Text.assemble(("● ", style), (self.status.value.capitalize(), "bold"), f"  {self.status_hint}")
            )
        if self.is_typing and not self._shown_typing:
            self.console.print(Text("Energy-Wise is typing...", style="dim italic"))
        self._shown_typing = self.is_typing

    def _scroll_to_latest(self) -> None:
        for msg in self.messages[self._rendered:]:
            self._render_message(msg)
        self._rendered = len(self.messages)

    def _focus_input(self) -> None:
        self.console.print(Text("Type your message and press Enter (/quit to leave).", style="dim"))

    def _render_message(self, msg) -> None:
        if msg.role == Role.SYSTEM:
            self.console.print(Text(msg.content, style="dim"), justify="center")
        elif msg.role == Role.USER:
            self.console.print(Text.assemble(("You: ", "bold green"), msg.content))
        else:
            self.console.print(Panel(Markdown(msg.content), title="Energy-Wise", border_style="green"))


async def run_terminal(url: str = DEFAULT_URL, console: Optional[Console] = None) -> None:
    """Run the terminal client until EOF, /quit or the transport gives up."""
    view = TerminalChatView(console=console)
    view._scroll_to_latest()
    view._on_state_changed()

    connection = ChannelConnection(view, url)
    transport = asyncio.create_task(connection.run())

    def _on_transport_done(_task: asyncio.Task) -> None:
        if not connection.closing:
            view.console.print(Text("No more reconnection attempts. Press Enter to exit.", style="red"))

    transport.add_done_callback(_on_transport_done)

    try:
        while not transport.done():
            line = await asyncio.to_thread(sys.stdin.readline)
            if line == "":
                break
            text = line.rstrip("\n")
            if text.strip() in QUIT_COMMANDS:
                break
            view.set_input(text)
            if not view.submit() and not view.input_enabled:
                view.console.print(Text(view.status_hint, style="yellow"))
    finally:
        view.close()
        await connection.close()
        transport.cancel()


def main():
    """Load .env and start the terminal client."""
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv(usecwd=True))

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    url = os.environ.get("ENERGY_WISE_URL", DEFAULT_URL)
    try:
        asyncio.run(run_terminal(url))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
