"""Per-application WebSocket subscriber queues and record broadcasting.

Each application built by ``create_app`` owns its own subscriber list, so
records decoded by one application are only delivered to its own clients.
All functions must be called from the event loop serving that application.
"""

import asyncio

__all__ = ["Subscribers", "add_subscriber", "broadcast_message", "remove_subscriber"]

Subscribers = list[asyncio.Queue[str]]


def add_subscriber(subscribers: Subscribers, queue: asyncio.Queue[str]) -> None:
    subscribers.append(queue)


def remove_subscriber(subscribers: Subscribers, queue: asyncio.Queue[str]) -> None:
    subscribers.remove(queue)


def _enqueue_message(queue: asyncio.Queue[str], message: str) -> None:
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(message)


def broadcast_message(message: str, subscribers: Subscribers) -> None:
    """Put *message* on every subscriber queue, dropping the oldest if full."""
    for queue in list(subscribers):
        _enqueue_message(queue, message)
