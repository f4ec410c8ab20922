import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[object], None]


class AppointmentBroadcaster:
    """Canal de atualizações ao vivo por barbearia (publish/subscribe em memória).

    ``subscribe`` devolve a função que cancela a inscrição. Um listener com erro
    é registrado no log e não impede os outros de receber a atualização.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, barbershop_id: str, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners[barbershop_id].append(listener)
        logger.debug(f"Live subscriber added for barbershop {barbershop_id}")

        def unsubscribe():
            with self._lock:
                listeners = self._listeners.get(barbershop_id, [])
                if listener in listeners:
                    listeners.remove(listener)
                if not listeners:
                    self._listeners.pop(barbershop_id, None)
            logger.debug(f"Live subscriber removed for barbershop {barbershop_id}")

        return unsubscribe

    def publish(self, barbershop_id: str, appointment) -> None:
        with self._lock:
            listeners = list(self._listeners.get(barbershop_id, []))

        for listener in listeners:
            try:
                listener(appointment)
            except Exception as e:
                logger.warning(f"Live update listener failed for barbershop {barbershop_id}: {e}")

    def subscriber_count(self, barbershop_id: str) -> int:
        with self._lock:
            return len(self._listeners.get(barbershop_id, []))


broadcaster = AppointmentBroadcaster()
