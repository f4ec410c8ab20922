import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

# .env na raiz do projeto
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./trimflow.db")

# =========================
# JWT
# =========================
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# =========================
# AGENDA
# =========================
# passo dos slots no calendário
SLOT_STEP_MINUTES = int(os.getenv("SLOT_STEP_MINUTES", "15"))
# quantos dias o cliente vê no wizard de reserva
BOOKING_WINDOW_DAYS = int(os.getenv("BOOKING_WINDOW_DAYS", "14"))
# tamanho da página pedida pelo calendário (um mês inteiro cabe numa página)
CALENDAR_PAGE_SIZE = int(os.getenv("CALENDAR_PAGE_SIZE", "500"))

# Frontend (CORS)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Cliente HTTP
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
