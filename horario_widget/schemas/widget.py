from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

from .schedule import ScheduleSlot, Subject, Event
from ..core.messages import MESSAGES, DEFAULT_LOCALE

DEFAULT_STATUS = MESSAGES[DEFAULT_LOCALE]["no_data"]

# Named text regions of the widget layout
REGION_DAY = "widget_dia"
REGION_DATE = "widget_fecha"
REGION_CLASSES = ("widget_clase_1", "widget_clase_2", "widget_clase_3")
REGION_STATUS = "widget_cursos"
REGION_CURRENT_SUBJECT = "widget_materia_actual"
REGION_EVENTS = "widget_eventos"
REGION_EVENTS_COUNT = "widget_eventos_count"
REGION_LAST_UPDATE = "widget_ultima_actualizacion"
REGION_CONTAINER = "widget_container"
LAUNCH_MAIN_APP = "launch:main"

MAX_CLASSES = len(REGION_CLASSES)


def _as_str(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default

def _as_int(value: Any, default: int) -> int:
    """Coerce ints, integral floats and digit strings; anything else is the default"""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


class WidgetSnapshot(BaseModel):
    """The single persisted projection the widget renders from.

    Field aliases are the flat preference keys written by the mobile app.
    """
    model_config = {"populate_by_name": True}

    events_today: int = Field(default=0, ge=0, alias="eventsToday")
    next_event_title: str = Field(default="", alias="nextEventToday")
    next_event_time: str = Field(default="", alias="nextEventTodayTime")
    schedule_status: str = Field(default=DEFAULT_STATUS, alias="scheduleStatus")
    current_subject: str = Field(default="", alias="currentSubject")
    last_update: int = Field(default=0, ge=0, alias="lastUpdate")
    version: int = Field(default=0, ge=0, alias="snapshotVersion")

    @classmethod
    def from_preferences(cls, values: Any, default_status: str = DEFAULT_STATUS) -> "WidgetSnapshot":
        """Lenient parse of a flat key/value map; absent or malformed keys take defaults"""
        if not isinstance(values, dict):
            values = {}
        return cls(
            events_today=max(_as_int(values.get("eventsToday"), 0), 0),
            next_event_title=_as_str(values.get("nextEventToday"), ""),
            next_event_time=_as_str(values.get("nextEventTodayTime"), ""),
            schedule_status=_as_str(values.get("scheduleStatus"), default_status),
            current_subject=_as_str(values.get("currentSubject"), ""),
            last_update=max(_as_int(values.get("lastUpdate"), 0), 0),
            version=max(_as_int(values.get("snapshotVersion"), 0), 0),
        )

    def to_preferences(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def empty(cls, status: str = DEFAULT_STATUS) -> "WidgetSnapshot":
        """The fixed cleared snapshot"""
        return cls(
            schedule_status=status,
            events_today=0,
            next_event_title="",
            next_event_time="",
            current_subject="",
        )


class RenderedText(BaseModel):
    """Strings for one render pass, one per widget region"""
    day_label: str = ""
    date_label: str = ""
    class_lines: List[str] = Field(default_factory=list)
    schedule_status: str = ""
    current_subject: str = ""
    next_event_line: str = ""
    events_count_line: str = ""
    events_today: int = 0
    pending_events: int = 0
    last_updated_line: str = ""

    def regions(self) -> Dict[str, str]:
        regions = {
            REGION_DAY: self.day_label,
            REGION_DATE: self.date_label,
            REGION_STATUS: self.schedule_status,
            REGION_CURRENT_SUBJECT: self.current_subject,
            REGION_EVENTS: self.next_event_line,
            REGION_EVENTS_COUNT: self.events_count_line,
            REGION_LAST_UPDATE: self.last_updated_line,
            REGION_CONTAINER: LAUNCH_MAIN_APP,
        }
        for index, region in enumerate(REGION_CLASSES):
            regions[region] = self.class_lines[index] if index < len(self.class_lines) else ""
        return regions


class ScheduleData(BaseModel):
    """What a data source hands to the formatter for one render pass"""
    signed_in: bool = True
    slots: List[ScheduleSlot] = Field(default_factory=list)
    subjects: Dict[str, Subject] = Field(default_factory=dict)
    events: List[Event] = Field(default_factory=list)
    no_schedule: bool = False
    schedule_error: Optional[str] = None
    events_error: Optional[str] = None
    snapshot: Optional[WidgetSnapshot] = None
