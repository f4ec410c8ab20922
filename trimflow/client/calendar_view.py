"""Dashboard calendar screen: data loading, filters, owner actions and live updates."""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from trimflow.client.api import ApiError
from trimflow.client.live import LiveUpdateAdapter
from trimflow.client.reconciler import AppointmentReconciler
from trimflow.config import CALENDAR_PAGE_SIZE
from trimflow.core.context import SessionContext
from trimflow.core.logger import ContextLogger
from trimflow.models.appointment import AppointmentFilters, AppointmentStatus, AppointmentUpdate
from trimflow.scheduling.grid import CalendarDay, build_month_grid, build_week_grid, grid_range, week_dates
from trimflow.scheduling.hours import DaySchedule, daily_schedule
from trimflow.scheduling.status import allowed_transitions

MONTH = "month"
WEEK = "week"


def _shift_month(reference: date, months: int) -> date:
    index = reference.year * 12 + (reference.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


class CalendarController:
    """
    State behind the dashboard calendar.

    ``mount`` loads supporting data and appointments for the visible range and
    subscribes to the live channel; ``unmount`` releases the subscription. After
    unmount, late responses and pushed updates are dropped.

    Owner actions go through the API and then reload the visible range instead
    of patching local state.
    """

    def __init__(
        self,
        api,
        session: SessionContext,
        channel=None,
        today: Optional[date] = None,
        view: str = MONTH,
    ):
        if view not in (MONTH, WEEK):
            raise ValueError(f"Unknown calendar view: {view}")

        self.api = api
        self.session = session
        self.channel = channel
        self.translator = session.translator()
        self.today = today or date.today()
        self.view = view
        self.reference = self.today

        self.barber_filter: Optional[str] = None
        self.status_filter: Optional[AppointmentStatus] = None

        self.barbers: List = []
        self.services: List = []
        self.business_hours: List = []
        self.reconciler = AppointmentReconciler()

        self.error: Optional[str] = None
        self.mounted = False
        self._unsubscribe = None
        self.log = ContextLogger(logging.getLogger(__name__), barbershop=session.barbershop_id)

    # =========================
    # CICLO DE VIDA
    # =========================

    def mount(self) -> None:
        self.mounted = True
        self.load()
        if self.channel is not None and self._unsubscribe is None:
            self._unsubscribe = self.channel.subscribe(
                self.session.barbershop_id, LiveUpdateAdapter(self._on_live_update)
            )

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.mounted = False

    def load(self) -> None:
        shop_id = self.session.barbershop_id
        self.barbers = self._read("barbers", lambda: self.api.list_barbers(shop_id))
        self.services = self._read("services", lambda: self.api.list_services(shop_id))
        self.business_hours = self._read("business hours", lambda: self.api.list_business_hours(shop_id))
        self.reload()

    def _read(self, what: str, call) -> List:
        try:
            return call()
        except ApiError as e:
            self.log.error(f"Failed to load {what}: {e.message}")
            return []

    # =========================
    # DADOS VISÍVEIS
    # =========================

    @property
    def visible_range(self) -> Tuple[date, date]:
        if self.view == WEEK:
            days = week_dates(self.reference)
            return days[0], days[-1]
        return grid_range(self.reference)

    def reload(self) -> None:
        start, end = self.visible_range
        filters = AppointmentFilters(
            start_date=start,
            end_date=end,
            barber_id=self.barber_filter,
            status=self.status_filter,
            size=CALENDAR_PAGE_SIZE,
        )
        try:
            page = self.api.list_appointments(self.session.barbershop_id, filters)
        except ApiError as e:
            self.log.error(f"Failed to load appointments: {e.message}")
            if self.mounted:
                self.reconciler.apply_server_snapshot([])
            return

        # resposta que chegou depois de sair da tela
        if not self.mounted:
            return
        self.reconciler.apply_server_snapshot(page.content)

    @property
    def appointments(self) -> List:
        return self.reconciler.appointments

    @property
    def selected(self):
        return self.reconciler.selected

    def grid(self) -> List[CalendarDay]:
        if self.view == WEEK:
            return build_week_grid(self.reference, self.reconciler.appointments, self.today)
        return build_month_grid(self.reference, self.reconciler.appointments, self.today)

    def schedule_for(self, day: date) -> DaySchedule:
        return daily_schedule(day, self.business_hours)

    # =========================
    # NAVEGAÇÃO / FILTROS
    # =========================

    def next(self) -> None:
        self._move(1)

    def previous(self) -> None:
        self._move(-1)

    def _move(self, direction: int) -> None:
        if self.view == WEEK:
            self.reference = self.reference + timedelta(days=7 * direction)
        else:
            self.reference = _shift_month(self.reference, direction)
        self.reload()

    def go_to_today(self) -> None:
        self.reference = self.today
        self.reload()

    def set_barber_filter(self, barber_id: Optional[str]) -> None:
        self.barber_filter = barber_id
        self.reload()

    def set_status_filter(self, status: Optional[AppointmentStatus]) -> None:
        self.status_filter = status
        self.reload()

    # =========================
    # AÇÕES DO DONO
    # =========================

    def select(self, appointment_id: str):
        return self.reconciler.select(appointment_id)

    def close_details(self) -> None:
        self.reconciler.clear_selection()

    def available_actions(self, appointment_id: str) -> Tuple[AppointmentStatus, ...]:
        appointment = self.reconciler.get(appointment_id)
        if appointment is None:
            return ()
        return allowed_transitions(appointment.status)

    def change_status(self, appointment_id: str, status: AppointmentStatus) -> bool:
        return self._write(
            lambda: self.api.update_appointment(
                self.session.barbershop_id, appointment_id, AppointmentUpdate(status=status)
            )
        )

    def reschedule(self, appointment_id: str, new_date_time: datetime) -> bool:
        return self._write(
            lambda: self.api.update_appointment(
                self.session.barbershop_id,
                appointment_id,
                AppointmentUpdate(appointment_date_time=new_date_time),
            )
        )

    def cancel(self, appointment_id: str) -> bool:
        ok = self._write(
            lambda: self.api.cancel_appointment(self.session.barbershop_id, appointment_id),
            reload=False,
        )
        if ok:
            # cancelado não tem mais ações no painel de detalhes
            self.reconciler.clear_selection()
            self.reload()
        return ok

    def _write(self, call, reload: bool = True) -> bool:
        self.error = None
        try:
            call()
        except ApiError as e:
            self.error = e.detail or self.translator("common.error")
            self.log.warning(f"Write failed: {self.error}")
            return False
        if reload:
            self.reload()
        return True

    # =========================
    # CANAL AO VIVO
    # =========================

    def matches_view(self, appointment) -> bool:
        """Mesmo critério da consulta do reload: intervalo visível, barbeiro e status."""
        start, end = self.visible_range
        if not start <= appointment.appointment_date_time.date() <= end:
            return False
        if self.barber_filter is not None and appointment.barber_id != self.barber_filter:
            return False
        if self.status_filter is not None and appointment.status != self.status_filter:
            return False
        return True

    def _on_live_update(self, appointment) -> None:
        if not self.mounted:
            return

        if not self.matches_view(appointment):
            # saiu do filtro (ex.: confirmado numa visão só de pendentes)
            if self.reconciler.discard(appointment.id):
                self.log.debug(f"Appointment {appointment.id} left the current view")
            return

        self.reconciler.apply_live_update(appointment)
