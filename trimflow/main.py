from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trimflow.config import FRONTEND_URL
from trimflow.core.logger import setup_logging
from trimflow.database import create_db_and_tables
from trimflow.routers import auth
from trimflow.routers import barbershops
from trimflow.routers import barbers, services
from trimflow.routers import business_hours
from trimflow.routers import appointments
from trimflow.routers import calendar, dashboard
from trimflow.routers import customers
from trimflow.routers import live

setup_logging()

app = FastAPI(title="Trimflow API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(barbershops.router)
app.include_router(barbers.router)
app.include_router(services.router)
app.include_router(business_hours.router)
app.include_router(appointments.router)
app.include_router(calendar.router)
app.include_router(dashboard.router)
app.include_router(customers.router)
app.include_router(live.router)


@app.on_event("startup")
def on_startup():
    create_db_and_tables()

@app.get("/")
def root():
    return {"message": "API trimflow funcionando 🚀"}
