"""Customers derived from bookings: listing, search, details and history."""

from datetime import datetime

import pytest

from trimflow.client.api import ApiError, TrimflowApi


def _customers(client, shop, **params):
    response = client.get("/customers/", params=params, headers=shop.headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_booking_creates_customer(client, shop, book):
    appt = book(datetime(2025, 3, 10, 9, 0), customer="Carlos").json()

    page = _customers(client, shop)
    assert page["total_elements"] == 1
    customer = page["content"][0]
    assert customer["name"] == "Carlos"
    assert customer["email"] == "carlos@example.com"
    assert customer["total_appointments"] == 1
    assert customer["last_appointment_at"] == "2025-03-10T09:00:00"
    assert appt["customer_id"] == customer["id"]


def test_repeat_bookings_reuse_customer(client, shop, book):
    first = book(datetime(2025, 3, 10, 9, 0), customer="Carlos").json()
    second = book(datetime(2025, 3, 12, 9, 0), customer="Carlos").json()

    assert first["customer_id"] == second["customer_id"]
    page = _customers(client, shop)
    assert page["total_elements"] == 1
    assert page["content"][0]["total_appointments"] == 2
    assert page["content"][0]["last_appointment_at"] == "2025-03-12T09:00:00"


def test_search_and_paging(client, shop, book):
    for hour, name in ((9, "Ana"), (10, "Bruno"), (11, "Carla")):
        book(datetime(2025, 3, 10, hour, 0), customer=name)

    assert [c["name"] for c in _customers(client, shop, search="BRU")["content"]] == ["Bruno"]
    assert _customers(client, shop, search="carla@")["total_elements"] == 1

    first = _customers(client, shop, size=2)
    assert [c["name"] for c in first["content"]] == ["Ana", "Bruno"]
    assert first["total_pages"] == 2
    assert client.get("/customers/", params={"page": -1}, headers=shop.headers).status_code == 400


def test_customer_details_and_history(client, shop, book):
    book(datetime(2025, 3, 10, 9, 0), customer="Carlos")
    book(datetime(2025, 3, 14, 9, 0), customer="Carlos")
    book(datetime(2025, 3, 11, 9, 0), customer="Dora")
    customer_id = _customers(client, shop, search="carlos")["content"][0]["id"]

    details = client.get(f"/customers/{customer_id}", headers=shop.headers)
    assert details.status_code == 200
    assert details.json()["total_appointments"] == 2

    history = client.get(f"/customers/{customer_id}/appointments", headers=shop.headers).json()
    assert history["total_elements"] == 2
    # mais recente primeiro
    assert [a["appointment_date_time"][:10] for a in history["content"]] == ["2025-03-14", "2025-03-10"]


def test_customers_are_owner_only_and_scoped(client, shop, other_shop, book):
    book(datetime(2025, 3, 10, 9, 0))
    customer_id = _customers(client, shop)["content"][0]["id"]

    assert client.get("/customers/", headers=shop.public_headers).status_code == 401
    assert client.get("/customers/", headers=other_shop.headers).json()["total_elements"] == 0
    assert client.get(f"/customers/{customer_id}", headers=other_shop.headers).status_code == 404
    assert client.get(f"/customers/{customer_id}/appointments", headers=other_shop.headers).status_code == 404


def test_customer_client_methods(client, shop, book):
    book(datetime(2025, 3, 10, 9, 0), customer="Carlos")
    api = TrimflowApi(http=client, token_getter=lambda: shop.token)

    page = api.list_customers(shop.id, search="carl")
    assert page.total_elements == 1
    customer = page.content[0]

    assert api.get_customer(shop.id, customer.id).email == "carlos@example.com"
    history = api.get_customer_appointments(shop.id, customer.id)
    assert history.content[0].customer_id == customer.id

    with pytest.raises(ApiError) as exc:
        api.get_customer(shop.id, "nao-existe")
    assert exc.value.status == 404
    assert exc.value.detail == "Cliente não encontrado"
