from typing import Dict, Tuple

from trimflow.models.appointment import AppointmentStatus


TERMINAL_STATUSES = frozenset(
    {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW}
)

# pending -> confirmed | completed | no_show | cancelled
# confirmed -> completed | no_show | cancelled
# completed / cancelled / no_show: fim
_TRANSITIONS: Dict[AppointmentStatus, Tuple[AppointmentStatus, ...]] = {
    AppointmentStatus.PENDING: (
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    ),
    AppointmentStatus.CONFIRMED: (
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    ),
    AppointmentStatus.COMPLETED: (),
    AppointmentStatus.CANCELLED: (),
    AppointmentStatus.NO_SHOW: (),
}


def allowed_transitions(status: AppointmentStatus) -> Tuple[AppointmentStatus, ...]:
    return _TRANSITIONS[AppointmentStatus(status)]


def can_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    return AppointmentStatus(new) in allowed_transitions(current)


def is_terminal(status: AppointmentStatus) -> bool:
    return AppointmentStatus(status) in TERMINAL_STATUSES
