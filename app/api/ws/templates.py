import asyncio
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from app.core.auth import get_store
from app.core.security import extract_token_from_header
from app.domains.documents.accessors import Listener
from app.domains.documents.errors import DocumentStoreError
from app.domains.documents.store import DocumentStore
from app.domains.identity.services import IdentityService
from app.domains.identity.session import SessionHolder
from app.domains.templates.schemas import EmailTemplateResponse
from app.domains.templates.services import EmailTemplateService

logger = logging.getLogger(__name__)

router = APIRouter()


def templates_message(service: EmailTemplateService, listener: Listener) -> dict:
    """Снимок состояния подписки в виде сообщения для клиента"""
    templates = None
    if listener.data is not None:
        templates = [
            EmailTemplateResponse.model_validate(template).model_dump(mode="json")
            for template in service.to_templates(listener.data)
        ]
    return {
        "type": "templates",
        "status": listener.status.value,
        "templates": templates,
        "error": listener.error.to_dict() if listener.error else None,
    }


@router.websocket("/templates/ws")
async def templates_websocket(
    websocket: WebSocket,
    token: Optional[str] = None,
    store: DocumentStore = Depends(get_store)
):
    """WebSocket со списком шаблонов, обновляемым при каждом изменении"""
    token = token or extract_token_from_header(websocket.headers.get("authorization"))
    identity = IdentityService.identity_from_token(token)
    if identity is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    logger.info(f"Templates WebSocket accepted for user {identity.id}")

    service = EmailTemplateService(store, SessionHolder(identity))
    outbox: asyncio.Queue = asyncio.Queue()

    def on_change(listener) -> None:
        # Промежуточное состояние pending клиенту не отправляем
        if listener.data is not None or listener.error is not None:
            outbox.put_nowait(templates_message(service, listener))

    async def pump() -> None:
        while True:
            message = await outbox.get()
            await websocket.send_text(json.dumps(message))

    listener = service.listener(on_change=on_change)
    sender = asyncio.create_task(pump())
    try:
        async with listener:
            try:
                await listener.listen(service.listing_target())
            except DocumentStoreError as e:
                await outbox.put({"type": "error", "error": e.info.to_dict()})

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    logger.warning(f"Ignoring malformed message from user {identity.id}")
                    continue

                if isinstance(message, dict) and message.get("type") == "ping":
                    await outbox.put({"type": "pong"})

    except WebSocketDisconnect:
        logger.info(f"Templates WebSocket closed for user {identity.id}")

    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        raise

    finally:
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error(f"Templates WebSocket sender failed for user {identity.id}: {e}")
