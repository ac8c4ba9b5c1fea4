from .schedule import DayOfWeek, ScheduleSlot, Subject, Event, parse_schedule_document
from .widget import WidgetSnapshot, RenderedText, ScheduleData
from .bridge import BridgeResult, WidgetInfo

__all__ = [
    "DayOfWeek", "ScheduleSlot", "Subject", "Event", "parse_schedule_document",
    "WidgetSnapshot", "RenderedText", "ScheduleData",
    "BridgeResult", "WidgetInfo"
]
