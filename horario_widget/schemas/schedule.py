from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime, time, date
from enum import Enum

from ..core.utils import normalize_label, parse_time_range, ensure_aware, format_object_id

class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        return list(cls)[value.weekday()]

    @classmethod
    def parse(cls, label: Any) -> Optional["DayOfWeek"]:
        """Resolve an English or Spanish day label ("Miércoles", "wednesday"), None if unknown"""
        if isinstance(label, DayOfWeek):
            return label
        return _DAY_LABELS.get(normalize_label(label))

_DAY_LABELS: Dict[str, DayOfWeek] = {
    "monday": DayOfWeek.MONDAY, "lunes": DayOfWeek.MONDAY,
    "tuesday": DayOfWeek.TUESDAY, "martes": DayOfWeek.TUESDAY,
    "wednesday": DayOfWeek.WEDNESDAY, "miercoles": DayOfWeek.WEDNESDAY,
    "thursday": DayOfWeek.THURSDAY, "jueves": DayOfWeek.THURSDAY,
    "friday": DayOfWeek.FRIDAY, "viernes": DayOfWeek.FRIDAY,
    "saturday": DayOfWeek.SATURDAY, "sabado": DayOfWeek.SATURDAY,
    "sunday": DayOfWeek.SUNDAY, "domingo": DayOfWeek.SUNDAY,
}

class ScheduleSlot(BaseModel):
    """One weekly recurring class occurrence"""
    model_config = {"frozen": True}

    day: DayOfWeek
    start: time
    end: Optional[time] = None
    subject_id: Optional[str] = None
    room: str = ""
    label: str = ""

    @classmethod
    def from_document(cls, doc: Any) -> Optional["ScheduleSlot"]:
        """Build a slot from the stored layout ({"dia", "hora", "materiaId", "aula"}).

        Returns None when the day or the start time cannot be parsed.
        """
        if not isinstance(doc, dict):
            return None
        day = DayOfWeek.parse(doc.get("dia"))
        label = doc.get("hora") if isinstance(doc.get("hora"), str) else ""
        start, end = parse_time_range(label)
        if day is None or start is None:
            return None
        subject_id = doc.get("materiaId")
        room = doc.get("aula")
        return cls(
            day=day,
            start=start,
            end=end,
            subject_id=format_object_id(subject_id) if subject_id is not None else None,
            room=room if isinstance(room, str) else "",
            label=label.strip(),
        )

class Subject(BaseModel):
    name: str = ""
    room: str = ""

    @classmethod
    def from_document(cls, doc: Any) -> "Subject":
        if not isinstance(doc, dict):
            return cls()
        name = doc.get("nombre")
        room = doc.get("aula")
        return cls(
            name=name if isinstance(name, str) else "",
            room=room if isinstance(room, str) else "",
        )

class Event(BaseModel):
    title: str = ""
    timestamp: datetime
    owner_id: str = ""

    @field_validator('timestamp')
    @classmethod
    def attach_timezone(cls, v):
        return ensure_aware(v)

    @classmethod
    def from_document(cls, doc: Any) -> Optional["Event"]:
        """Build an event from an "eventos" document, None without a usable "fecha" """
        if not isinstance(doc, dict) or not isinstance(doc.get("fecha"), datetime):
            return None
        title = doc.get("titulo")
        return cls(
            title=title if isinstance(title, str) else "",
            timestamp=doc["fecha"],
            owner_id=format_object_id(doc.get("uid")),
        )

def parse_schedule_document(doc: Dict[str, Any]) -> Tuple[List[ScheduleSlot], Dict[str, Subject]]:
    """Split a "horarios" document into slots and the subject lookup table"""
    raw_slots = doc.get("slots")
    raw_subjects = doc.get("materias")
    slots = []
    if isinstance(raw_slots, list):
        for raw in raw_slots:
            slot = ScheduleSlot.from_document(raw)
            if slot is not None:
                slots.append(slot)
    subjects = {}
    if isinstance(raw_subjects, dict):
        subjects = {str(key): Subject.from_document(value) for key, value in raw_subjects.items()}
    return slots, subjects

