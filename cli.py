# Role: Local developer CLI to chat with the assistant without the web UI.
# Useful for trying the persona and seeing gateway diagnostics in the terminal.

from __future__ import annotations

import asyncio

import backend.config
backend.config.load_env()

from backend.core.chat_view import ChatView, ScrollTracker
from backend.core.widget import ChatWidget
from backend.utils.logging import setup_logging


def _print_entries(view: ChatView, start: int) -> None:
    for bubble in view.bubbles[start:]:
        who = "You" if bubble.role == "user" else "Assistant"
        print(f"\n{who}: {bubble.text}")


async def _chat_loop() -> None:
    # 1) Open the widget (creates the conversation with its greeting)
    # 2) Route user input -> store.send -> print the reply
    # Key line: one event loop for the whole session, so the Gemini client is never reused across loops.
    widget = ChatWidget()
    store = widget.open()
    tracker = ScrollTracker()
    _print_entries(tracker.render(store.snapshot()), 0)

    while True:
        try:
            user_message = await asyncio.to_thread(input, "\nYou: ")
        except EOFError:
            print("\nBye!")
            return

        cmd = user_message.strip().lower()

        if cmd in {"/exit", "exit", "quit", "/quit"}:
            print("Bye!")
            return

        if cmd in {"/new", "new"}:
            widget.reset()
            store = widget.open()
            tracker = ScrollTracker()
            _print_entries(tracker.render(store.snapshot()), 0)
            continue

        seen = tracker.rendered_length or 0
        if await store.send(user_message) is None:
            continue

        # The user line is already on screen; only echo the reply.
        _print_entries(tracker.render(store.snapshot()), seen + 1)


def main() -> None:
    setup_logging(backend.config.settings().log_level)
    print("MOKSH Agri-Assistant CLI")
    print("Commands: /new (new conversation), /exit")
    print("-" * 50)
    try:
        asyncio.run(_chat_loop())
    except KeyboardInterrupt:
        print("\nBye!")


if __name__ == "__main__":
    main()
