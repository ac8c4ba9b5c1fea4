"""
Fixed widget texts, weekday and month names per locale
"""
from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "es": {
        "today": "Hoy",
        "no_more_classes": "✅ No hay más clases por hoy",
        "no_classes_configured": "Sin clases configuradas",
        "no_subject": "Sin nombre",
        "no_room": "Sin aula",
        "sign_in": "Por favor, inicia sesión en la app",
        "schedule_error": "Error al cargar horario",
        "events_error": "Error al cargar eventos",
        "no_events_today": "Sin eventos hoy",
        "no_pending_events": "No hay eventos pendientes hoy",
        "next_event": "🔔 Próximo: {title}\n   {time}",
        "pending_events": "Eventos pendientes: {count}",
        "events_today": "Eventos hoy: {count}",
        "updated": "Actualizado: {time}",
        "never_updated": "Sin actualizar",
        "no_data": "Sin datos",
        "date": "{day:02d} de {month}",
        "event": "Evento",
    },
    "en": {
        "today": "Today",
        "no_more_classes": "✅ No more classes today",
        "no_classes_configured": "No classes configured",
        "no_subject": "No subject",
        "no_room": "No room",
        "sign_in": "Please sign in to the app",
        "schedule_error": "Error loading schedule",
        "events_error": "Error loading events",
        "no_events_today": "No events today",
        "no_pending_events": "No pending events today",
        "next_event": "🔔 Next: {title}\n   {time}",
        "pending_events": "Pending events: {count}",
        "events_today": "Events today: {count}",
        "updated": "Updated: {time}",
        "never_updated": "Never updated",
        "no_data": "No data",
        "date": "{month} {day:02d}",
        "event": "Event",
    },
}

# Monday first, matching date.weekday()
WEEKDAYS: Dict[str, tuple] = {
    "es": ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo"),
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
}

MONTHS: Dict[str, tuple] = {
    "es": ("enero", "febrero", "marzo", "abril", "mayo", "junio", "julio",
           "agosto", "septiembre", "octubre", "noviembre", "diciembre"),
    "en": ("January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December"),
}

DEFAULT_LOCALE = "es"


class Messages:
    """Lookup of widget texts for one locale"""

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self.locale = locale if locale in MESSAGES else DEFAULT_LOCALE
        self._texts = MESSAGES[self.locale]

    def get(self, key: str, **kwargs) -> str:
        text = self._texts[key]
        return text.format(**kwargs) if kwargs else text

    def weekday(self, index: int) -> str:
        return WEEKDAYS[self.locale][index]

    def month(self, month: int) -> str:
        return MONTHS[self.locale][month - 1]

    def __getitem__(self, key: str) -> str:
        return self._texts[key]
