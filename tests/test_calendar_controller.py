"""Tests for the dashboard calendar controller."""

from datetime import date, datetime

import pytest

from trimflow.client.api import ApiError
from trimflow.client.calendar_view import CalendarController
from trimflow.core.context import SessionContext
from trimflow.live.broadcaster import AppointmentBroadcaster
from trimflow.models.appointment import AppointmentStatus
from trimflow.models.business_hours import BusinessHoursRead, DayOfWeek

TODAY = date(2025, 3, 13)


@pytest.fixture
def channel():
    return AppointmentBroadcaster()


@pytest.fixture
def session():
    return SessionContext(barbershop_id="S1", user_id="U1", access_token="token")


@pytest.fixture
def seeded_api(fake_api, make_appointment):
    fake_api.appointments = [
        make_appointment("a1", datetime(2025, 3, 10, 9, 0)),
        make_appointment("a2", datetime(2025, 3, 13, 14, 0), status=AppointmentStatus.CONFIRMED),
    ]
    fake_api.business_hours = [
        BusinessHoursRead(
            barbershop_id="S1",
            day_of_week=DayOfWeek.MONDAY,
            is_open=True,
            open_time="09:00:00",
            close_time="18:00:00",
        )
    ]
    return fake_api


@pytest.fixture
def controller(seeded_api, session, channel):
    c = CalendarController(seeded_api, session, channel=channel, today=TODAY)
    c.mount()
    yield c
    c.unmount()


def test_mount_loads_everything(controller, seeded_api, channel):
    assert [b.id for b in controller.barbers] == ["B1", "B2"]
    assert len(controller.services) == 2
    assert [a.id for a in controller.appointments] == ["a1", "a2"]
    assert channel.subscriber_count("S1") == 1

    filters = seeded_api.filters[-1]
    assert filters.start_date == date(2025, 2, 24)
    assert filters.end_date == date(2025, 4, 6)
    assert filters.size == 500


def test_unmount_releases_subscription(controller, channel):
    controller.unmount()
    assert channel.subscriber_count("S1") == 0
    assert not controller.mounted


def test_grid_places_appointments(controller):
    grid = controller.grid()
    assert len(grid) == 42
    by_date = {cell.date: cell for cell in grid}
    assert [a.id for a in by_date[date(2025, 3, 10)].appointments] == ["a1"]
    assert by_date[TODAY].is_today


def test_read_failures_degrade_to_empty(seeded_api, session):
    seeded_api.fail.update({"list_barbers", "list_appointments"})
    c = CalendarController(seeded_api, session, today=TODAY)
    c.mount()

    assert c.barbers == []
    assert c.appointments == []
    assert len(c.services) == 2
    assert len(c.grid()) == 42


def test_filters_are_sent_and_reload(controller, seeded_api):
    controller.set_barber_filter("B2")
    controller.set_status_filter(AppointmentStatus.CONFIRMED)

    filters = seeded_api.filters[-1]
    assert filters.barber_id == "B2"
    assert filters.status == AppointmentStatus.CONFIRMED

    controller.set_barber_filter(None)
    assert seeded_api.filters[-1].barber_id is None


def test_month_navigation(controller, seeded_api):
    controller.next()
    assert controller.reference == date(2025, 4, 1)
    assert seeded_api.filters[-1].start_date == date(2025, 3, 31)

    controller.previous()
    controller.previous()
    assert controller.reference == date(2025, 2, 1)

    controller.go_to_today()
    assert controller.reference == TODAY


def test_week_view(seeded_api, session):
    c = CalendarController(seeded_api, session, today=TODAY, view="week")
    c.mount()

    assert c.visible_range == (date(2025, 3, 10), date(2025, 3, 16))
    assert len(c.grid()) == 7

    c.next()
    assert c.visible_range == (date(2025, 3, 17), date(2025, 3, 23))


def test_unknown_view():
    with pytest.raises(ValueError):
        CalendarController(None, SessionContext(barbershop_id="S1"), view="year")


def test_schedule_for_uses_business_hours(controller):
    assert controller.schedule_for(date(2025, 3, 10)).is_open
    # sem configuração para quinta-feira
    assert controller.schedule_for(TODAY).is_closed


def test_available_actions(controller):
    assert set(controller.available_actions("a1")) == {
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    }
    assert controller.available_actions("a2") == (
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    )
    assert controller.available_actions("missing") == ()


def test_change_status_reloads(controller, seeded_api):
    calls = len(seeded_api.filters)

    assert controller.change_status("a1", AppointmentStatus.CONFIRMED)

    assert seeded_api.updates[-1][0] == "a1"
    assert seeded_api.updates[-1][1].status == AppointmentStatus.CONFIRMED
    assert len(seeded_api.filters) == calls + 1
    assert controller.reconciler.get("a1").status == AppointmentStatus.CONFIRMED


def test_reschedule(controller, seeded_api):
    new_time = datetime(2025, 3, 11, 10, 0)
    assert controller.reschedule("a1", new_time)
    assert seeded_api.updates[-1][1].appointment_date_time == new_time
    assert controller.reconciler.get("a1").appointment_date_time == new_time


def test_cancel_clears_selection(controller, seeded_api):
    controller.select("a1")
    assert controller.selected.id == "a1"

    assert controller.cancel("a1")

    assert seeded_api.cancelled == ["a1"]
    assert controller.selected is None
    assert controller.reconciler.get("a1").status == AppointmentStatus.CANCELLED


def test_write_error_uses_backend_message(controller, seeded_api):
    seeded_api.fail.add("update_appointment")
    seeded_api.errors["update_appointment"] = ApiError(
        404, "Agendamento não encontrado", detail="Agendamento não encontrado"
    )

    assert not controller.change_status("a1", AppointmentStatus.COMPLETED)
    assert controller.error == "Agendamento não encontrado"
    assert controller.reconciler.get("a1").status == AppointmentStatus.PENDING


def test_write_error_without_detail_is_translated(seeded_api):
    seeded_api.fail.add("cancel_appointment")
    c = CalendarController(seeded_api, SessionContext(barbershop_id="S1", language="pt"), today=TODAY)
    c.mount()
    c.select("a1")

    assert not c.cancel("a1")
    assert c.error == "Ocorreu um erro"
    assert c.selected.id == "a1"


def test_close_details(controller):
    controller.select("a2")
    controller.close_details()
    assert controller.selected is None


def test_live_update_reaches_grid(controller, channel, make_appointment):
    channel.publish("S1", make_appointment("a3", datetime(2025, 3, 14, 16, 0)))
    assert [a.id for a in controller.appointments] == ["a1", "a2", "a3"]

    channel.publish("S1", make_appointment("a1", datetime(2025, 3, 10, 9, 0), status=AppointmentStatus.CONFIRMED))
    assert controller.reconciler.get("a1").status == AppointmentStatus.CONFIRMED
    assert len(controller.appointments) == 3


def test_live_json_payload(controller, channel, make_appointment):
    payload = make_appointment("a4", datetime(2025, 3, 15, 9, 0)).model_dump_json()
    channel.publish("S1", payload)
    assert controller.reconciler.get("a4") is not None


def test_other_shop_updates_are_not_received(controller, channel, make_appointment):
    channel.publish("S2", make_appointment("x1", datetime(2025, 3, 15, 9, 0)))
    assert controller.reconciler.get("x1") is None


def test_updates_after_unmount_are_ignored(controller, make_appointment):
    controller.unmount()
    controller._on_live_update(make_appointment("a9", datetime(2025, 3, 15, 9, 0)))
    assert controller.reconciler.get("a9") is None


def test_reload_after_unmount_is_ignored(controller, seeded_api, make_appointment):
    controller.unmount()
    seeded_api.appointments = [make_appointment("z1", datetime(2025, 3, 15, 9, 0))]
    controller.reload()
    assert [a.id for a in controller.appointments] == ["a1", "a2"]


def test_live_update_for_other_barber_is_ignored_when_filtered(controller, channel, make_appointment):
    controller.set_barber_filter("B1")

    channel.publish("S1", make_appointment("b2", datetime(2025, 3, 14, 10, 0), barber_id="B2"))

    assert controller.reconciler.get("b2") is None
    assert {a.barber_id for a in controller.appointments} == {"B1"}


def test_live_update_leaving_status_filter_is_removed(controller, channel, make_appointment):
    controller.set_status_filter(AppointmentStatus.PENDING)
    controller.select("a1")

    channel.publish(
        "S1", make_appointment("a1", datetime(2025, 3, 10, 9, 0), status=AppointmentStatus.CONFIRMED)
    )

    assert controller.reconciler.get("a1") is None
    assert controller.selected is None


def test_live_update_outside_visible_range_is_ignored(controller, channel, make_appointment):
    channel.publish("S1", make_appointment("may", datetime(2025, 5, 20, 9, 0)))
    assert controller.reconciler.get("may") is None


def test_live_update_matching_filters_is_applied(controller, channel, make_appointment):
    controller.set_barber_filter("B1")
    controller.set_status_filter(AppointmentStatus.PENDING)

    channel.publish("S1", make_appointment("a5", datetime(2025, 3, 20, 11, 0)))
    assert controller.reconciler.get("a5") is not None
