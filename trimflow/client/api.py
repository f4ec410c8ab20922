import logging
from datetime import date
from typing import Any, Callable, List, Optional

import httpx

from trimflow.config import API_BASE_URL
from trimflow.models.appointment import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentRead,
    AppointmentUpdate,
)
from trimflow.models.barber import BarberRead
from trimflow.models.barbershop import BarbershopRead
from trimflow.models.business_hours import BusinessHoursRead
from trimflow.models.common import Page
from trimflow.models.customer import CustomerRead
from trimflow.models.service import ServiceRead

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Resposta não-2xx ou falha de transporte. ``status`` é 0 quando não houve resposta."""

    def __init__(self, status: int, message: str, data: Any = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.data = data
        # mensagem do backend, quando veio uma
        self.detail = detail


class TrimflowApi:
    """Thin client for the trimflow REST API.

    Every shop-scoped call sends ``X-Barbershop-Id``; the bearer token is read
    from ``token_getter`` on each request so a later login is picked up.
    """

    def __init__(
        self,
        http: Optional[httpx.Client] = None,
        base_url: str = API_BASE_URL,
        token_getter: Optional[Callable[[], Optional[str]]] = None,
    ):
        self.http = http or httpx.Client(base_url=base_url, timeout=10.0)
        self.token_getter = token_getter

    def _request(self, method: str, path: str, barbershop_id: Optional[str] = None, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if barbershop_id:
            headers["X-Barbershop-Id"] = barbershop_id

        token = self.token_getter() if self.token_getter else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Network error - no response received for {method} {path}: {e}")
            raise ApiError(0, str(e)) from e

        if response.status_code >= 400:
            raise self._error_from(response)

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_from(response: httpx.Response) -> ApiError:
        try:
            data = response.json()
        except ValueError:
            data = response.text

        detail = data.get("detail") if isinstance(data, dict) else None
        message = detail if isinstance(detail, str) else f"Request failed with status {response.status_code}"

        if response.status_code == 401:
            logger.warning("Unauthorized - token expired or invalid")
        elif response.status_code == 403:
            logger.error(f"Access forbidden: {data}")

        return ApiError(response.status_code, message, data, detail=detail if isinstance(detail, str) else None)

    # =========================
    # AUTH / BARBEARIA
    # =========================

    def login(self, email: str, password: str) -> dict:
        return self._request("POST", "/auth/login", data={"username": email, "password": password})

    def get_barbershop(self, barbershop_id: str) -> BarbershopRead:
        return BarbershopRead.model_validate(self._request("GET", f"/barbershops/{barbershop_id}"))

    # =========================
    # BARBEIROS / SERVIÇOS / HORÁRIOS
    # =========================

    def list_barbers(self, barbershop_id: str, active_only: bool = False) -> List[BarberRead]:
        data = self._request("GET", "/barbers/", barbershop_id, params={"active_only": active_only})
        return [BarberRead.model_validate(item) for item in data]

    def list_services(self, barbershop_id: str, active_only: bool = False) -> List[ServiceRead]:
        data = self._request("GET", "/services/", barbershop_id, params={"active_only": active_only})
        return [ServiceRead.model_validate(item) for item in data]

    def list_business_hours(self, barbershop_id: str) -> List[BusinessHoursRead]:
        data = self._request("GET", "/business-hours/", barbershop_id)
        return [BusinessHoursRead.model_validate(item) for item in data]

    # =========================
    # AGENDAMENTOS
    # =========================

    def list_appointments(
        self, barbershop_id: str, filters: Optional[AppointmentFilters] = None
    ) -> Page[AppointmentRead]:
        params = (filters or AppointmentFilters()).model_dump(mode="json", exclude_none=True)
        data = self._request("GET", "/appointments/", barbershop_id, params=params)
        return Page[AppointmentRead].model_validate(data)

    def get_appointment(self, barbershop_id: str, appointment_id: str) -> AppointmentRead:
        data = self._request("GET", f"/appointments/{appointment_id}", barbershop_id)
        return AppointmentRead.model_validate(data)

    def create_appointment(self, barbershop_id: str, payload: AppointmentCreate) -> AppointmentRead:
        data = self._request("POST", "/appointments/", barbershop_id, json=payload.model_dump(mode="json"))
        return AppointmentRead.model_validate(data)

    def update_appointment(
        self, barbershop_id: str, appointment_id: str, payload: AppointmentUpdate
    ) -> AppointmentRead:
        data = self._request(
            "PUT",
            f"/appointments/{appointment_id}",
            barbershop_id,
            json=payload.model_dump(mode="json", exclude_unset=True),
        )
        return AppointmentRead.model_validate(data)

    def cancel_appointment(self, barbershop_id: str, appointment_id: str) -> None:
        self._request("DELETE", f"/appointments/{appointment_id}", barbershop_id)

    def get_available_slots(self, barber_id: str, day: date, service_duration: int) -> List[str]:
        return self._request(
            "GET",
            "/appointments/availability",
            params={"barber_id": barber_id, "date": day.isoformat(), "service_duration": service_duration},
        )

    # =========================
    # CLIENTES
    # =========================

    def list_customers(
        self, barbershop_id: str, page: int = 0, size: int = 10, search: Optional[str] = None
    ) -> Page[CustomerRead]:
        params = {"page": page, "size": size}
        if search:
            params["search"] = search
        data = self._request("GET", "/customers/", barbershop_id, params=params)
        return Page[CustomerRead].model_validate(data)

    def get_customer(self, barbershop_id: str, customer_id: str) -> CustomerRead:
        return CustomerRead.model_validate(self._request("GET", f"/customers/{customer_id}", barbershop_id))

    def get_customer_appointments(
        self, barbershop_id: str, customer_id: str, page: int = 0, size: int = 10
    ) -> Page[AppointmentRead]:
        data = self._request(
            "GET",
            f"/customers/{customer_id}/appointments",
            barbershop_id,
            params={"page": page, "size": size},
        )
        return Page[AppointmentRead].model_validate(data)
