"""
Publications API Endpoints.

Login-gated read views over whole collections.

REST returns a publication's snapshot. The WebSocket variant streams it:

    {"msg": "added", "collection": ..., "id": ..., "fields": {...}}   one per document
    {"msg": "ready", "publication": ...}                             snapshot complete
    {"msg": "added" | "changed" | "removed", ...}                     live deltas

until the client disconnects. A subscriber that falls too far behind is
closed with code 1013 and should resubscribe.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from notehub.backend.core.config import get_app_config
from notehub.backend.core.dependencies import CurrentUser, DbSession, SessionFactory, authenticate_token
from notehub.backend.core.exceptions import ApplicationError
from notehub.backend.core.logging import get_logger
from notehub.backend.events.hub import Subscription, get_publication_hub
from notehub.backend.events.schemas import DocumentChange
from notehub.backend.models.user import User
from notehub.backend.schemas.base import ApiResponse
from notehub.backend.services.publication import PUBLICATIONS, PublicationService, can_read, get_publication

router = APIRouter()
logger = get_logger(__name__)


def _document_id(document: dict[str, Any]) -> str:
    return str(document.get("id") or document.get("note_id"))


def _delta_message(change: DocumentChange) -> dict[str, Any]:
    message: dict[str, Any] = {
        "msg": change.operation,
        "collection": change.collection,
        "id": change.document_id,
    }
    if change.fields is not None:
        message["fields"] = change.fields
    return message


@router.get(
    "",
    response_model=ApiResponse[list[str]],
    summary="List publications",
)
async def list_publications(user: CurrentUser) -> ApiResponse[list[str]]:
    return ApiResponse(data=sorted(PUBLICATIONS))


@router.get(
    "/{name}",
    response_model=ApiResponse[list[dict[str, Any]]],
    summary="Publication snapshot",
    description="Every document of the publication. Admin publications are empty for non-admins.",
)
async def get_snapshot(
    name: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[list[dict[str, Any]]]:
    service = PublicationService(db)
    return ApiResponse(data=await service.snapshot(name, user))


async def _open(
    session_factory: SessionFactory,
    name: str,
    token: str | None,
) -> tuple[User, list[dict[str, Any]]]:
    async with session_factory() as session:
        user = await authenticate_token(session, token)
        documents = await PublicationService(session).snapshot(name, user)
    return user, documents


async def _forward(websocket: WebSocket, subscription: Subscription, visible: bool) -> None:
    while (change := await subscription.get()) is not None:
        if visible:
            await websocket.send_json(_delta_message(change))
    await websocket.close(
        code=status.WS_1013_TRY_AGAIN_LATER,
        reason="Subscriber fell behind, resubscribe",
    )


async def _until_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/{name}/live")
async def live_publication(
    websocket: WebSocket,
    name: str,
    session_factory: SessionFactory,
    token: str | None = Query(default=None),
) -> None:
    """Stream a publication's snapshot followed by its live deltas."""
    if not get_app_config().features.publications_live_enabled:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Live publications disabled")
        return

    try:
        publication = get_publication(name)
    except ApplicationError as exc:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=exc.message)
        return

    hub = get_publication_hub()
    # Subscribe before the snapshot so no committed change falls in between
    subscription = hub.subscribe(publication.collection)
    try:
        try:
            user, documents = await _open(session_factory, name, token)
        except ApplicationError as exc:
            logger.warning(
                "Live publication refused",
                extra={"publication": name, "error_code": exc.code},
            )
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=exc.message)
            return

        await websocket.accept()
        for document in documents:
            await websocket.send_json({
                "msg": "added",
                "collection": publication.collection,
                "id": _document_id(document),
                "fields": document,
            })
        await websocket.send_json({"msg": "ready", "publication": name})
        logger.info(
            "Live publication opened",
            extra={"publication": name, "username": user.username, "documents": len(documents)},
        )

        forward = asyncio.create_task(_forward(websocket, subscription, can_read(publication, user)))
        listen = asyncio.create_task(_until_disconnect(websocket))
        done, pending = await asyncio.wait({forward, listen}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                if not isinstance(task.exception(), WebSocketDisconnect):
                    raise task.exception()

        if subscription.overflowed:
            logger.warning("Live publication closed after overflow", extra={"publication": name})
    finally:
        hub.unsubscribe(subscription)
        logger.debug("Live publication ended", extra={"publication": name})
