import json
import logging
from typing import Callable, Union

from pydantic import ValidationError

from trimflow.models.appointment import AppointmentRead

logger = logging.getLogger(__name__)


class LiveUpdateAdapter:
    """Converte mensagens do canal ao vivo em AppointmentRead e repassa ao handler.

    Best-effort: payload inválido é registrado no log e descartado.
    """

    def __init__(self, handler: Callable[[AppointmentRead], None]):
        self.handler = handler

    def __call__(self, message: Union[str, bytes, dict, AppointmentRead]) -> None:
        self.handle(message)

    def handle(self, message: Union[str, bytes, dict, AppointmentRead]) -> None:
        if isinstance(message, AppointmentRead):
            self.handler(message)
            return

        try:
            payload = json.loads(message) if isinstance(message, (str, bytes)) else message
            appointment = AppointmentRead.model_validate(payload)
        except (ValueError, ValidationError) as e:
            logger.warning(f"Dropping malformed live update: {e}")
            return

        self.handler(appointment)
