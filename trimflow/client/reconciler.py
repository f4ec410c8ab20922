"""In-memory appointment collection kept in sync with server snapshots and live updates."""

import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class AppointmentReconciler:
    """
    Holds the appointments shown by one calendar screen.

    ``apply_server_snapshot`` replaces everything (initial load, filter change,
    reload after an owner action). ``apply_live_update`` upserts one pushed
    appointment by id: replaced in place when known, appended otherwise.

    The selected appointment (detail panel) is always the canonical object of
    the collection, so a live update for it is visible immediately.

    Updates carrying an ``updated_at`` older than the held copy are dropped;
    equal timestamps are applied, so re-delivery of the same payload is a no-op.
    """

    def __init__(self, appointments: Optional[Iterable] = None):
        self._items: List = []
        self._index = {}
        self._selected_id: Optional[str] = None
        self._selected = None
        if appointments is not None:
            self.apply_server_snapshot(appointments)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def appointments(self) -> List:
        return list(self._items)

    @property
    def selected(self):
        return self._selected

    def get(self, appointment_id: str):
        position = self._index.get(appointment_id)
        return self._items[position] if position is not None else None

    def select(self, appointment_id: str):
        appointment = self.get(appointment_id)
        if appointment is None:
            raise KeyError(appointment_id)
        self._selected_id = appointment_id
        self._selected = appointment
        return appointment

    def clear_selection(self) -> None:
        self._selected_id = None
        self._selected = None

    def apply_server_snapshot(self, appointments: Iterable) -> None:
        items: List = []
        index = {}
        for appointment in appointments:
            # ids repetidos numa página: fica a última versão
            if appointment.id in index:
                items[index[appointment.id]] = appointment
                continue
            index[appointment.id] = len(items)
            items.append(appointment)

        self._items = items
        self._index = index

        if self._selected_id is not None:
            self._selected = self.get(self._selected_id)
            if self._selected is None:
                self._selected_id = None

        logger.debug(f"Snapshot applied with {len(items)} appointments")

    def discard(self, appointment_id: str) -> bool:
        """Remove um agendamento pelo id. Retorna False se ele não estava na coleção."""
        position = self._index.pop(appointment_id, None)
        if position is None:
            return False

        del self._items[position]
        self._index = {appt.id: i for i, appt in enumerate(self._items)}

        if self._selected_id == appointment_id:
            self.clear_selection()
        return True

    def apply_live_update(self, appointment) -> bool:
        """Upsert by id. Returns False when the update was stale and ignored."""
        position = self._index.get(appointment.id)

        if position is None:
            self._index[appointment.id] = len(self._items)
            self._items.append(appointment)
        else:
            current = self._items[position]
            if _is_older(appointment, current):
                logger.info(f"Ignoring stale live update for appointment {appointment.id}")
                return False
            self._items[position] = appointment

        if self._selected_id == appointment.id:
            self._selected = appointment
        return True


def _is_older(incoming, current) -> bool:
    incoming_version = getattr(incoming, "updated_at", None)
    current_version = getattr(current, "updated_at", None)
    if incoming_version is None or current_version is None:
        return False
    return incoming_version < current_version
