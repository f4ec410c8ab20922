MESSAGES = {
    "en": {
        "booking.title": "Book Your Appointment",
        "booking.selectService": "Select Service",
        "booking.selectBarber": "Select Barber",
        "booking.selectDateTime": "Select Date & Time",
        "booking.yourDetails": "Your Details",
        "booking.confirmation": "Confirmation",
        "booking.noSlots": "No available slots for this date",
        "booking.success": "Booking confirmed!",
        "booking.error": "Booking failed. Please try again.",
        "booking.barberUnavailable": "This barber is not available for online booking.",
        "calendar.noAppointments": "No appointments",
        "status.PENDING": "Pending",
        "status.CONFIRMED": "Confirmed",
        "status.COMPLETED": "Completed",
        "status.CANCELLED": "Cancelled",
        "status.NO_SHOW": "No-show",
        "common.error": "An error occurred",
    },
    "pt": {
        "booking.title": "Marque a Sua Consulta",
        "booking.selectService": "Selecionar Serviço",
        "booking.selectBarber": "Selecionar Barbeiro",
        "booking.selectDateTime": "Selecionar Data e Hora",
        "booking.yourDetails": "Os Seus Dados",
        "booking.confirmation": "Confirmação",
        "booking.noSlots": "Sem horários disponíveis para esta data",
        "booking.success": "Reserva confirmada!",
        "booking.error": "Reserva falhada. Por favor, tente novamente.",
        "booking.barberUnavailable": "Este barbeiro não está disponível para reservas online.",
        "calendar.noAppointments": "Sem marcações",
        "status.PENDING": "Pendente",
        "status.CONFIRMED": "Confirmado",
        "status.COMPLETED": "Concluído",
        "status.CANCELLED": "Cancelado",
        "status.NO_SHOW": "Não compareceu",
        "common.error": "Ocorreu um erro",
    },
}

DEFAULT_LANGUAGE = "en"
