import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from sqlmodel import Session, select

from trimflow.core.security import OWNER_ROLES, decode_access_token
from trimflow.database import get_session
from trimflow.live.broadcaster import broadcaster
from trimflow.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])


def _owner_for_channel(session: Session, barbershop_id: str, token: Optional[str]) -> Optional[User]:
    """Dono da barbearia do path, ou None se o token não dá acesso ao canal."""
    if not token:
        return None
    try:
        claims = decode_access_token(token)
    except HTTPException:
        return None

    user = session.exec(select(User).where(User.email == claims["sub"])).first()
    if user is None or user.role not in OWNER_ROLES or user.barbershop_id != barbershop_id:
        return None
    return user


# =========================
# CANAL AO VIVO (DONO)
# ws://.../ws/appointments/{barbershop_id}?token=<jwt>
# =========================
@router.websocket("/ws/appointments/{barbershop_id}")
async def appointment_updates(
    websocket: WebSocket,
    barbershop_id: str,
    token: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """Empurra cada agendamento criado/alterado da barbearia como JSON."""
    owner = _owner_for_channel(session, barbershop_id, token)
    # a conexão fica aberta por muito tempo; não segura a sessão do banco
    session.close()

    if owner is None:
        logger.warning(f"Rejected live channel for barbershop {barbershop_id}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def on_update(appointment):
        # publish roda na thread da rota sync
        loop.call_soon_threadsafe(queue.put_nowait, appointment.model_dump(mode="json"))

    unsubscribe = broadcaster.subscribe(barbershop_id, on_update)
    await websocket.accept()
    logger.info(f"Live channel opened for barbershop {barbershop_id} by user {owner.id}")

    try:
        while True:
            payload = await queue.get()
            await websocket.send_json(payload)
    except WebSocketDisconnect:
        logger.info(f"Live channel closed for barbershop {barbershop_id}")
    finally:
        unsubscribe()
