"""Registration, login, barbers and services."""

from trimflow.config import ACCESS_TOKEN_EXPIRE_MINUTES


def test_get_barbershop(client, shop):
    response = client.get(f"/barbershops/{shop.id}")
    assert response.status_code == 200
    assert response.json()["name"] == "Barbearia Central"


def test_register_duplicate_email(client, shop):
    response = client.post(
        "/barbershops/register",
        json={
            "barbershop_name": "Outra",
            "email": "dono@example.com",
            "password": "x",
            "first_name": "A",
            "last_name": "B",
        },
    )
    assert response.status_code == 400


def test_login_wrong_password(client, shop):
    response = client.post("/auth/login", data={"username": "dono@example.com", "password": "errada"})
    assert response.status_code == 401


def test_login_returns_shop(client, shop):
    body = client.post("/auth/login", data={"username": "dono@example.com", "password": "segredo123"}).json()
    assert body["token_type"] == "bearer"
    assert body["barbershop_id"] == shop.id


def test_unknown_barbershop(client):
    assert client.get("/barbershops/nao-existe").status_code == 404


def test_invalid_token(client, shop):
    headers = {"X-Barbershop-Id": shop.id, "Authorization": "Bearer lixo"}
    assert client.get("/appointments/", headers=headers).status_code == 401


def test_public_barber_listing_and_active_filter(client, shop):
    other = client.post("/barbers/", json={"first_name": "Alex", "last_name": "Costa"}, headers=shop.headers).json()
    client.put(f"/barbers/{other['id']}", json={"is_active": False}, headers=shop.headers)

    everyone = client.get("/barbers/", headers=shop.public_headers).json()
    assert len(everyone) == 2

    active = client.get("/barbers/", params={"active_only": True}, headers=shop.public_headers).json()
    assert [b["id"] for b in active] == [shop.barber["id"]]


def test_barber_update_is_scoped(client, shop, other_shop):
    response = client.put(
        f"/barbers/{shop.barber['id']}", json={"first_name": "X"}, headers=other_shop.headers
    )
    assert response.status_code == 404


def test_services(client, shop):
    created = client.post(
        "/services/",
        json={"name": "Barba", "price": 25.0, "duration_minutes": 20},
        headers=shop.headers,
    )
    assert created.status_code == 201

    services = client.get("/services/", params={"active_only": True}, headers=shop.public_headers).json()
    assert {s["name"] for s in services} == {"Corte", "Barba"}


def test_service_validation(client, shop):
    too_short = client.post(
        "/services/",
        json={"name": "Rápido", "price": 5.0, "duration_minutes": 2},
        headers=shop.headers,
    )
    assert too_short.status_code == 422

    negative = client.post(
        "/services/",
        json={"name": "Grátis", "price": -1, "duration_minutes": 30},
        headers=shop.headers,
    )
    assert negative.status_code == 422


def test_listing_needs_barbershop_header(client, shop):
    assert client.get("/services/").status_code == 422


def test_login_is_case_insensitive_and_me(client, shop):
    body = client.post("/auth/login", data={"username": "Dono@Example.com", "password": "segredo123"}).json()
    assert body["expires_in"] == ACCESS_TOKEN_EXPIRE_MINUTES * 60

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["barbershop_id"] == shop.id
    assert "password_hash" not in me.json()
