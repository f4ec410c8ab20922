"""Public booking wizard: service -> barber -> date/time -> customer details -> confirmation."""

import logging
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Dict, List, Optional, Tuple

from trimflow.client.api import ApiError
from trimflow.config import BOOKING_WINDOW_DAYS
from trimflow.core.context import Translator
from trimflow.models.appointment import AppointmentCreate

logger = logging.getLogger(__name__)


class WizardStep(str, Enum):
    SELECT_SERVICE = "SELECT_SERVICE"
    SELECT_BARBER = "SELECT_BARBER"
    SELECT_DATE_TIME = "SELECT_DATE_TIME"
    CUSTOMER_DETAILS = "CUSTOMER_DETAILS"
    CONFIRMATION = "CONFIRMATION"


class WizardError(Exception):
    pass


_ALL_STEPS = (
    WizardStep.SELECT_SERVICE,
    WizardStep.SELECT_BARBER,
    WizardStep.SELECT_DATE_TIME,
    WizardStep.CUSTOMER_DETAILS,
)


def step_sequence(has_preselected_barber: bool) -> Tuple[WizardStep, ...]:
    """Passos numerados do wizard; com barbeiro pré-selecionado a escolha de barbeiro some."""
    if has_preselected_barber:
        return tuple(s for s in _ALL_STEPS if s != WizardStep.SELECT_BARBER)
    return _ALL_STEPS


def transition_table(has_preselected_barber: bool) -> Dict[WizardStep, Tuple[Optional[WizardStep], Optional[WizardStep]]]:
    """step -> (anterior, próximo). CONFIRMATION só é alcançado por submit()."""
    steps = step_sequence(has_preselected_barber)
    table = {}
    for i, step in enumerate(steps):
        previous = steps[i - 1] if i > 0 else None
        following = steps[i + 1] if i + 1 < len(steps) else None
        table[step] = (previous, following)
    return table


_TRANSITIONS = {
    False: transition_table(False),
    True: transition_table(True),
}


def slot_time(slot: str) -> str:
    """'2025-03-10T09:30:00' -> '09:30'"""
    return datetime.fromisoformat(slot).strftime("%H:%M")


class BookingWizard:
    """
    Drives one booking session against the API.

    The wizard never computes availability: after a date is chosen it asks the
    backend for the bookable start instants and only offers their HH:MM part.
    Read failures are logged and leave the affected list empty; a failed
    submission keeps every selection and exposes the message in ``error``.
    """

    def __init__(
        self,
        api,
        barbershop_id: str,
        preselected_barber_id: Optional[str] = None,
        translator: Optional[Translator] = None,
        today: Optional[date] = None,
        booking_window_days: int = BOOKING_WINDOW_DAYS,
    ):
        self.api = api
        self.barbershop_id = barbershop_id
        self.preselected_barber_id = preselected_barber_id
        self.translator = translator or Translator()
        self.today = today or date.today()
        self.booking_window_days = booking_window_days

        self.barbershop = None
        self.services: List = []
        self.barbers: List = []
        self.available_slots: List[str] = []

        self.step = WizardStep.SELECT_SERVICE

        self.service = None
        self.barber = None
        self.date: Optional[date] = None
        self.time: Optional[str] = None
        self.customer_name = ""
        self.customer_email = ""
        self.customer_phone = ""
        self.notes = ""

        self.error: Optional[str] = None
        self.appointment = None

    # =========================
    # CONFIGURAÇÃO DE PASSOS
    # =========================

    @property
    def has_preselected_barber(self) -> bool:
        return self.preselected_barber_id is not None

    @property
    def steps(self) -> Tuple[WizardStep, ...]:
        return step_sequence(self.has_preselected_barber)

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def step_number(self) -> int:
        """Número exibido (1-based). Na confirmação mostra o último passo."""
        if self.step == WizardStep.CONFIRMATION:
            return self.total_steps
        return self.steps.index(self.step) + 1

    def next_step(self) -> WizardStep:
        following = _TRANSITIONS[self.has_preselected_barber][self.step][1] if self.step in self.steps else None
        if following is not None:
            self.step = following
        return self.step

    def previous_step(self) -> WizardStep:
        previous = _TRANSITIONS[self.has_preselected_barber][self.step][0] if self.step in self.steps else None
        if previous is not None:
            self.step = previous
        return self.step

    # =========================
    # CARGA INICIAL
    # =========================

    def load(self) -> None:
        try:
            self.barbershop = self.api.get_barbershop(self.barbershop_id)
        except ApiError as e:
            logger.error(f"Failed to load barbershop {self.barbershop_id}: {e.message}")

        try:
            self.services = self.api.list_services(self.barbershop_id, active_only=True)
        except ApiError as e:
            logger.error(f"Failed to load services: {e.message}")
            self.services = []

        try:
            self.barbers = self.api.list_barbers(self.barbershop_id, active_only=True)
        except ApiError as e:
            logger.error(f"Failed to load barbers: {e.message}")
            self.barbers = []

        if self.has_preselected_barber:
            self.barber = next((b for b in self.barbers if b.id == self.preselected_barber_id), None)
            if self.barber is None:
                logger.warning(f"Pre-selected barber {self.preselected_barber_id} not found among active barbers")
                self.error = self.translator("booking.barberUnavailable")

    # =========================
    # SELEÇÕES
    # =========================

    def select_service(self, service) -> WizardStep:
        self._require_step(WizardStep.SELECT_SERVICE)
        self.service = service
        if self.date is not None:
            self.time = None
            self._load_slots()
        return self.next_step()

    def select_barber(self, barber) -> WizardStep:
        if self.has_preselected_barber:
            raise WizardError("Barbeiro já definido pelo link de reserva")
        self._require_step(WizardStep.SELECT_BARBER)
        self.barber = barber
        if self.date is not None:
            self.time = None
            self._load_slots()
        return self.next_step()

    def bookable_dates(self) -> List[date]:
        return [self.today + timedelta(days=i) for i in range(self.booking_window_days)]

    def select_date(self, day: date) -> None:
        self._require_step(WizardStep.SELECT_DATE_TIME)
        self.date = day
        # trocar a data (mesmo para a mesma) invalida o horário
        self.time = None
        self._load_slots()

    @property
    def time_options(self) -> List[str]:
        return [slot_time(slot) for slot in self.available_slots]

    def select_time(self, value: str) -> WizardStep:
        self._require_step(WizardStep.SELECT_DATE_TIME)
        if value not in self.time_options:
            raise WizardError(f"Horário {value} indisponível")
        self.time = value
        return self.next_step()

    def set_customer_details(self, name: str, email: str, phone: str = "", notes: str = "") -> None:
        self.customer_name = name
        self.customer_email = email
        self.customer_phone = phone
        self.notes = notes

    def _load_slots(self) -> None:
        self.available_slots = []
        if self.date is None or self.service is None or self.barber is None:
            return
        try:
            self.available_slots = self.api.get_available_slots(
                self.barber.id, self.date, self.service.duration_minutes
            )
        except ApiError as e:
            logger.error(f"Failed to load slots: {e.message}")
            self.available_slots = []

    def _require_step(self, step: WizardStep) -> None:
        if self.step != step:
            raise WizardError(f"Ação inválida no passo {self.step.value}")

    # =========================
    # ENVIO
    # =========================

    @property
    def appointment_date_time(self) -> Optional[datetime]:
        if self.date is None or self.time is None:
            return None
        return datetime.combine(self.date, time.fromisoformat(self.time))

    @property
    def can_submit(self) -> bool:
        return (
            self.step == WizardStep.CUSTOMER_DETAILS
            and self.service is not None
            and self.barber is not None
            and self.appointment_date_time is not None
            and bool(self.customer_name.strip())
            and bool(self.customer_email.strip())
        )

    def submit(self):
        """Cria o agendamento. Retorna o agendamento criado ou None (bloqueado ou falhou)."""
        if not self.can_submit:
            return None

        payload = AppointmentCreate(
            barber_id=self.barber.id,
            service_id=self.service.id,
            appointment_date_time=self.appointment_date_time,
            customer_name=self.customer_name.strip(),
            customer_email=self.customer_email.strip(),
            customer_phone=self.customer_phone.strip() or None,
            notes=self.notes.strip() or None,
        )

        self.error = None
        try:
            self.appointment = self.api.create_appointment(self.barbershop_id, payload)
        except ApiError as e:
            self.error = e.detail or self.translator("booking.error")
            logger.warning(f"Booking failed for barbershop {self.barbershop_id}: {self.error}")
            return None

        self.step = WizardStep.CONFIRMATION
        logger.info(f"Booking {self.appointment.id} created for barbershop {self.barbershop_id}")
        return self.appointment
