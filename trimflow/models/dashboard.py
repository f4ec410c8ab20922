from typing import Dict, List, Optional
from datetime import date
from sqlmodel import SQLModel


class TopService(SQLModel):
    service_id: str
    name: str
    count: int


class DashboardSummary(SQLModel):
    day: date
    barbershop_id: str
    barber_id: Optional[str] = None
    is_open: bool
    total_appointments: int
    status: Dict[str, int]
    revenue_completed: float
    minutes_completed: int
    # None quando a barbearia está fechada no dia
    capacity_minutes: Optional[int] = None
    occupancy_percent: Optional[float] = None
    top_services: List[TopService]
