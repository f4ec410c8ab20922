from datetime import time, datetime, timedelta
from sqlmodel import Session, select

from trimflow.core.security import get_password_hash
from trimflow.database import create_db_and_tables, engine
from trimflow.models.appointment import Appointment
from trimflow.models.barber import Barber
from trimflow.models.barbershop import Barbershop
from trimflow.models.business_hours import BusinessHours, DayOfWeek
from trimflow.models.service import Service
from trimflow.models.user import User


OWNER_EMAIL = "dono@trimflow.dev"
OWNER_PASSWORD = "trimflow123"


def main():
    create_db_and_tables()

    with Session(engine) as session:
        # 1) barbearia + dono
        owner = session.exec(select(User).where(User.email == OWNER_EMAIL)).first()
        if owner:
            shop = session.get(Barbershop, owner.barbershop_id)
        else:
            shop = Barbershop(name="Trimflow Demo", email=OWNER_EMAIL, address="Rua Augusta 100")
            session.add(shop)
            session.flush()
            owner = User(
                email=OWNER_EMAIL,
                first_name="Dono",
                last_name="Demo",
                barbershop_id=shop.id,
                password_hash=get_password_hash(OWNER_PASSWORD),
            )
            session.add(owner)

        # 2) criar/atualizar horários (seg-sáb aberto, domingo fechado)
        for day in DayOfWeek:
            is_open = day != DayOfWeek.SUNDAY
            cfg = dict(
                is_open=is_open,
                open_time=time(9, 0) if is_open else None,
                close_time=time(18, 0) if is_open else None,
            )

            row = session.exec(
                select(BusinessHours).where(
                    BusinessHours.barbershop_id == shop.id,
                    BusinessHours.day_of_week == day,
                )
            ).first()

            if row:
                row.is_open = cfg["is_open"]
                row.open_time = cfg["open_time"]
                row.close_time = cfg["close_time"]
                session.add(row)
            else:
                session.add(BusinessHours(barbershop_id=shop.id, day_of_week=day, **cfg))

        # 3) barbeiros e serviços de teste (se não existirem)
        barber = session.exec(select(Barber).where(Barber.barbershop_id == shop.id)).first()
        if not barber:
            barber = Barber(barbershop_id=shop.id, first_name="Marco", last_name="Silva")
            session.add_all([barber, Barber(barbershop_id=shop.id, first_name="Alex", last_name="Costa")])

        service = session.exec(select(Service).where(Service.barbershop_id == shop.id)).first()
        if not service:
            service = Service(barbershop_id=shop.id, name="Corte", duration_minutes=30, price=40.0)
            session.add_all(
                [
                    service,
                    Service(barbershop_id=shop.id, name="Barba", duration_minutes=20, price=30.0),
                    Service(barbershop_id=shop.id, name="Corte + Barba", duration_minutes=50, price=65.0),
                ]
            )

        # 4) um agendamento de exemplo amanhã 10:00 (se o dia estiver aberto)
        tomorrow = (datetime.now() + timedelta(days=1)).date()
        start = datetime.combine(tomorrow, time(10, 0))
        if DayOfWeek.from_date(tomorrow) != DayOfWeek.SUNDAY:
            exists = session.exec(
                select(Appointment).where(
                    Appointment.barber_id == barber.id,
                    Appointment.appointment_date_time == start,
                )
            ).first()
            if not exists:
                session.add(
                    Appointment(
                        barbershop_id=shop.id,
                        barber_id=barber.id,
                        service_id=service.id,
                        appointment_date_time=start,
                        customer_name="João Teste",
                        customer_email="joao@example.com",
                    )
                )

        session.commit()

        print("✅ Seed concluído!")
        print(f"Barbearia: {shop.id} (login {OWNER_EMAIL} / {OWNER_PASSWORD})")
        print("Horários: seg-sáb 09-18; domingo fechado")
        print("Serviços: Corte/Barba/Corte+Barba (se não existiam)")


if __name__ == "__main__":
    main()
