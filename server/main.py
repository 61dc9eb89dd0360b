"""FastAPI development server around the Enfora frame decoder.

Start with::

    ENFORA_DEVICES=012345678901234 uvicorn server.main:app --port 8000

Endpoints:
    POST /frames         decode one hex-encoded frame; 200 with the record
                         as JSON, or 204 when the frame was discarded
    GET  /devices/{imei} last known fix of a device
    WS   /ws             stream of every decoded record as JSON

Frames posted with the same ``remote`` share a connection binding, so an
acknowledgement posted after a telemetry frame resolves to that device.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import (
    FastAPI,
    HTTPException,
    Request,
    Response,
    WebSocket,
    WebSocketDisconnect,
)
from pydantic import BaseModel

from enfora import DeviceRegistry, EnforaDecoder, Position
from server.broadcaster import add_subscriber, broadcast_message, remove_subscriber
from server.formatters import format_last_fix, format_record_message
from server.settings import Settings

__all__ = ["app", "create_app"]

logger = logging.getLogger(__name__)

_CLOSE_GOING_AWAY = 1001


class FrameIn(BaseModel):
    """A delimited frame as received by a transport listener."""

    payload: str
    remote: str = ""


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _send_messages_until_disconnect(
    queue: asyncio.Queue[str],
    websocket: WebSocket,
    timeout: float,
) -> None:
    try:
        while True:
            message = await asyncio.wait_for(queue.get(), timeout=timeout)
            await websocket.send_text(message)
    except TimeoutError:
        await websocket.close(code=_CLOSE_GOING_AWAY)
    except WebSocketDisconnect:
        pass


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its own device registry and decoder."""
    settings = settings if settings is not None else Settings.from_env()

    @asynccontextmanager
    async def _lifespan(_application: FastAPI) -> AsyncIterator[None]:
        _setup_logging(settings.log_level)
        logger.info(
            "Decoder ready with %d known devices (auto register: %s)",
            len(settings.devices),
            settings.auto_register,
        )
        yield

    application = FastAPI(lifespan=_lifespan)
    registry = DeviceRegistry(settings.devices, auto_register=settings.auto_register)
    application.state.settings = settings
    application.state.registry = registry
    application.state.decoder = EnforaDecoder(registry, registry)
    application.state.subscribers = []

    @application.post("/frames")
    async def post_frame(frame: FrameIn, request: Request) -> Response:
        """Decode one frame and broadcast the resulting record."""
        try:
            buf = bytes.fromhex(frame.payload)
        except ValueError as e:
            raise HTTPException(status_code=422, detail="payload is not valid hex") from e

        state = request.app.state
        record = state.decoder.decode(buf, frame.remote)
        if record is None:
            return Response(status_code=204)

        if isinstance(record, Position):
            state.registry.remember(record)

        message = format_record_message(record)
        broadcast_message(message, state.subscribers)
        return Response(
            content=message,
            media_type="application/json",
        )

    @application.get("/devices/{imei}")
    async def get_device(imei: str, request: Request) -> dict:
        """Return the last known fix of a device."""
        registry: DeviceRegistry = request.app.state.registry
        if imei not in registry:
            raise HTTPException(status_code=404, detail="unknown device")
        return format_last_fix(imei, registry.last_fix(imei))

    @application.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        """Stream decoded records to a connected WebSocket client.

        Each client gets its own bounded queue. The oldest message is dropped
        when the queue is full so slow clients do not stall decoding. The
        connection closes with code 1001 if no record arrives within the
        configured timeout.
        """
        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=settings.queue_size)
        subscribers = websocket.app.state.subscribers
        add_subscriber(subscribers, queue)
        try:
            await websocket.accept()
            await _send_messages_until_disconnect(
                queue, websocket, settings.websocket_timeout
            )
        finally:
            remove_subscriber(subscribers, queue)

    return application


app = create_app()
