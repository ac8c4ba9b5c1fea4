"""
Snapshot Formatter
Turns schedule slots, subjects and today's events (or a cached snapshot)
into the short strings painted on the widget. Never raises.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from .core.messages import Messages
from .core.utils import day_window, format_clock, from_millis
from .schemas.schedule import DayOfWeek, Event, ScheduleSlot, Subject
from .schemas.widget import MAX_CLASSES, RenderedText, ScheduleData, WidgetSnapshot


def _aware(now: datetime) -> datetime:
    # Naive "now" is taken as UTC, same as naive event timestamps
    return now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)


def _header(now: datetime, messages: Messages) -> RenderedText:
    return RenderedText(
        day_label=messages.weekday(now.weekday()),
        date_label=messages.get("date", day=now.day, month=messages.month(now.month)),
    )


def upcoming_slots(now: datetime, slots: Optional[Iterable[ScheduleSlot]], limit: int = MAX_CLASSES) -> List[ScheduleSlot]:
    """Today's slots starting at or after the current minute, earliest first, at most `limit`"""
    today = DayOfWeek.from_date(now)
    current = now.time().replace(second=0, microsecond=0)
    todays = [
        slot for slot in (slots or [])
        if isinstance(slot, ScheduleSlot) and slot.day == today and slot.start >= current
    ]
    # sorted() is stable, so equal start times keep their original order
    return sorted(todays, key=lambda slot: slot.start)[:limit]


def current_slot(now: datetime, slots: Optional[Iterable[ScheduleSlot]]) -> Optional[ScheduleSlot]:
    """The today-slot in progress at `now`, if any"""
    today = DayOfWeek.from_date(now)
    current = now.time()
    running = [
        slot for slot in (slots or [])
        if isinstance(slot, ScheduleSlot) and slot.day == today
        and slot.end is not None and slot.start <= current < slot.end
    ]
    return min(running, key=lambda slot: slot.start) if running else None


def todays_events(now: datetime, events: Optional[Iterable[Event]]) -> List[Event]:
    """Events inside [midnight, midnight + 1 day) of `now`, ordered by timestamp"""
    now = _aware(now)
    start, end = day_window(now)
    todays = [event for event in (events or []) if isinstance(event, Event) and start <= event.timestamp < end]
    return sorted(todays, key=lambda event: event.timestamp)


def pending_events(now: datetime, events: Optional[Iterable[Event]]) -> List[Event]:
    """Today's events strictly after `now`, earliest first"""
    now = _aware(now)
    return [event for event in todays_events(now, events) if event.timestamp > now]


def _resolve(slot: ScheduleSlot, subjects: Dict[str, Subject], messages: Messages):
    subject = subjects.get(slot.subject_id) if slot.subject_id is not None else None
    name = subject.name if subject is not None and subject.name else messages["no_subject"]
    room = (subject.room if subject is not None else "") or slot.room or messages["no_room"]
    return name, room


def format_schedule(
    now: datetime,
    slots: Optional[Iterable[ScheduleSlot]],
    subjects: Optional[Dict[str, Subject]],
    events: Optional[Iterable[Event]],
    messages: Optional[Messages] = None,
) -> RenderedText:
    """Render fetched schedule data for the widget"""
    messages = messages or Messages()
    now = _aware(now)
    subjects = subjects if isinstance(subjects, dict) else {}
    slots = list(slots or [])
    rendered = _header(now, messages)

    lines = []
    for slot in upcoming_slots(now, slots):
        name, room = _resolve(slot, subjects, messages)
        lines.append(f"🕐 {format_clock(slot.start)}\n{name}\n📍 {room}")
    rendered.class_lines = lines
    rendered.schedule_status = "\n\n".join(lines) if lines else messages["no_more_classes"]

    running = current_slot(now, slots)
    rendered.current_subject = _resolve(running, subjects, messages)[0] if running else ""

    todays = todays_events(now, events)
    pending = [event for event in todays if event.timestamp > now]
    rendered.events_today = len(todays)
    rendered.pending_events = len(pending)
    rendered.events_count_line = messages.get("events_today", count=len(todays))
    if not todays:
        rendered.next_event_line = messages["no_events_today"]
    elif not pending:
        rendered.next_event_line = messages["no_pending_events"]
    else:
        first = pending[0]
        line = messages.get(
            "next_event",
            title=first.title or messages["event"],
            time=format_clock(first.timestamp.astimezone(now.tzinfo)),
        )
        if len(pending) > 1:
            line += "\n\n" + messages.get("pending_events", count=len(pending))
        rendered.next_event_line = line

    rendered.last_updated_line = messages.get("updated", time=format_clock(now))
    return rendered


def format_snapshot(now: datetime, snapshot: Optional[WidgetSnapshot], messages: Optional[Messages] = None) -> RenderedText:
    """Render a cached snapshot pushed by the app"""
    messages = messages or Messages()
    now = _aware(now)
    snapshot = snapshot or WidgetSnapshot.empty(messages["no_data"])
    rendered = _header(now, messages)

    rendered.schedule_status = snapshot.schedule_status
    rendered.current_subject = snapshot.current_subject
    rendered.events_today = snapshot.events_today
    rendered.events_count_line = messages.get("events_today", count=snapshot.events_today)
    if snapshot.next_event_title:
        rendered.pending_events = 1
        rendered.next_event_line = messages.get(
            "next_event", title=snapshot.next_event_title, time=snapshot.next_event_time
        ).rstrip()
    elif snapshot.events_today == 0:
        rendered.next_event_line = messages["no_events_today"]
    else:
        rendered.next_event_line = messages["no_pending_events"]

    if snapshot.last_update > 0:
        stamp = from_millis(snapshot.last_update, tz=now.tzinfo)
        rendered.last_updated_line = messages.get("updated", time=format_clock(stamp))
    else:
        rendered.last_updated_line = messages["never_updated"]
    return rendered


def format_signed_out(now: datetime, messages: Optional[Messages] = None) -> RenderedText:
    """No signed-in user: ask for sign-in, leave the events region blank"""
    messages = messages or Messages()
    rendered = _header(_aware(now), messages)
    rendered.schedule_status = messages["sign_in"]
    return rendered


def format_data(now: datetime, data: ScheduleData, messages: Optional[Messages] = None) -> RenderedText:
    """Render whatever a data source produced, degrading failed sections to fixed texts"""
    messages = messages or Messages()
    if not data.signed_in:
        return format_signed_out(now, messages)
    if data.snapshot is not None:
        return format_snapshot(now, data.snapshot, messages)

    rendered = format_schedule(now, data.slots, data.subjects, data.events, messages)
    if data.schedule_error is not None:
        rendered.class_lines = []
        rendered.current_subject = ""
        rendered.schedule_status = messages["schedule_error"]
    elif data.no_schedule:
        rendered.schedule_status = messages["no_classes_configured"]
    if data.events_error is not None:
        rendered.next_event_line = messages["events_error"]
        rendered.events_count_line = ""
        rendered.events_today = 0
        rendered.pending_events = 0
        rendered.last_updated_line = ""
    return rendered
