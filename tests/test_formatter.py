import random
from datetime import datetime, time, timedelta, timezone

from horario_widget.core.messages import Messages
from horario_widget.formatter import (
    format_data,
    format_schedule,
    format_signed_out,
    format_snapshot,
    upcoming_slots,
)
from horario_widget.schemas import DayOfWeek, Event, ScheduleData, ScheduleSlot, Subject, WidgetSnapshot
from horario_widget.core.utils import to_millis

from conftest import NOW

SUBJECTS = {
    "s1": Subject(name="Cálculo I", room="A-201"),
    "s2": Subject(name="Física I", room="Lab 3"),
    "s3": Subject(name="Programación", room="B-105"),
}


def slot(day, start, end=None, subject_id=None, room=""):
    return ScheduleSlot(day=day, start=start, end=end, subject_id=subject_id, room=room)


def event(title, dt):
    return Event(title=title, timestamp=dt, owner_id="u1")


def test_only_classes_not_yet_started_are_listed():
    slots = [
        slot(DayOfWeek.TUESDAY, time(7, 30), time(8, 20), "s1"),
        slot(DayOfWeek.TUESDAY, time(9, 0), time(9, 50), "s2"),
    ]
    rendered = format_schedule(NOW, slots, SUBJECTS, [])

    assert rendered.class_lines == ["🕐 09:00\nFísica I\n📍 Lab 3"]
    assert rendered.schedule_status == "🕐 09:00\nFísica I\n📍 Lab 3"


def test_at_most_three_classes_sorted_by_start():
    slots = [
        slot(DayOfWeek.TUESDAY, time(15, 0), subject_id="s1"),
        slot(DayOfWeek.TUESDAY, time(9, 0), subject_id="s2"),
        slot(DayOfWeek.TUESDAY, time(13, 0), subject_id="s3"),
        slot(DayOfWeek.TUESDAY, time(10, 0), subject_id="s1"),
        slot(DayOfWeek.TUESDAY, time(17, 0), subject_id="s2"),
    ]
    kept = upcoming_slots(NOW, slots)

    assert [s.start for s in kept] == [time(9, 0), time(10, 0), time(13, 0)]
    assert len(format_schedule(NOW, slots, SUBJECTS, []).class_lines) == 3


def test_other_days_are_never_included():
    slots = [
        slot(DayOfWeek.MONDAY, time(9, 0), subject_id="s1"),
        slot(DayOfWeek.WEDNESDAY, time(10, 0), subject_id="s2"),
    ]
    rendered = format_schedule(NOW, slots, SUBJECTS, [])

    assert rendered.class_lines == []
    assert rendered.schedule_status == "✅ No hay más clases por hoy"


def test_equal_start_times_keep_original_order():
    slots = [
        slot(DayOfWeek.TUESDAY, time(10, 0), subject_id="s3"),
        slot(DayOfWeek.TUESDAY, time(10, 0), subject_id="s1"),
    ]
    kept = upcoming_slots(NOW, slots)

    assert [s.subject_id for s in kept] == ["s3", "s1"]


def test_class_starting_this_minute_is_still_shown():
    now = NOW.replace(hour=9, minute=0, second=30)
    slots = [slot(DayOfWeek.TUESDAY, time(9, 0), subject_id="s2")]

    assert len(upcoming_slots(now, slots)) == 1


def test_unresolvable_subject_renders_placeholders():
    slots = [
        slot(DayOfWeek.TUESDAY, time(9, 0), subject_id="missing"),
        slot(DayOfWeek.TUESDAY, time(10, 0)),
        slot(DayOfWeek.TUESDAY, time(11, 0), room="B-1"),
    ]
    rendered = format_schedule(NOW, slots, SUBJECTS, [])

    assert rendered.class_lines == [
        "🕐 09:00\nSin nombre\n📍 Sin aula",
        "🕐 10:00\nSin nombre\n📍 Sin aula",
        "🕐 11:00\nSin nombre\n📍 B-1",
    ]


def test_current_subject_is_the_class_in_progress():
    now = NOW.replace(hour=9, minute=10)
    slots = [
        slot(DayOfWeek.TUESDAY, time(9, 0), time(9, 50), "s2"),
        slot(DayOfWeek.TUESDAY, time(11, 0), time(12, 40), "s3"),
    ]
    rendered = format_schedule(now, slots, SUBJECTS, [])

    assert rendered.current_subject == "Física I"
    assert rendered.class_lines == ["🕐 11:00\nProgramación\n📍 B-105"]


def test_no_events_today():
    rendered = format_schedule(NOW, [], SUBJECTS, [])

    assert rendered.next_event_line == "Sin eventos hoy"
    assert rendered.events_today == 0
    assert rendered.events_count_line == "Eventos hoy: 0"


def test_next_event_is_earliest_future_one():
    events = [
        event("Desayuno", NOW - timedelta(hours=1)),
        event("Reunión", NOW + timedelta(hours=3)),
        event("Entrega", NOW + timedelta(hours=1)),
    ]
    rendered = format_schedule(NOW, [], SUBJECTS, events)

    assert rendered.next_event_line == "🔔 Próximo: Entrega\n   09:00\n\nEventos pendientes: 2"
    assert rendered.events_today == 3
    assert rendered.pending_events == 2


def test_event_at_now_is_not_next():
    events = [event("Ahora", NOW)]
    rendered = format_schedule(NOW, [], SUBJECTS, events)

    assert rendered.next_event_line == "No hay eventos pendientes hoy"
    assert rendered.pending_events == 0
    assert rendered.events_today == 1


def test_single_pending_event_has_no_counter():
    events = [event("", NOW + timedelta(minutes=30))]
    rendered = format_schedule(NOW, [], SUBJECTS, events)

    assert rendered.next_event_line == "🔔 Próximo: Evento\n   08:30"


def test_event_time_is_shown_in_local_time():
    utc_event = event("Clase extra", datetime(2026, 10, 13, 15, 0, tzinfo=timezone.utc))
    rendered = format_schedule(NOW, [], SUBJECTS, [utc_event])

    assert "10:00" in rendered.next_event_line


def test_events_on_other_days_are_ignored():
    events = [event("Mañana", NOW + timedelta(days=1))]
    rendered = format_schedule(NOW, [], SUBJECTS, events)

    assert rendered.events_today == 0
    assert rendered.next_event_line == "Sin eventos hoy"


def test_header_and_last_updated():
    rendered = format_schedule(NOW, [], SUBJECTS, [])

    assert rendered.day_label == "Martes"
    assert rendered.date_label == "13 de octubre"
    assert rendered.last_updated_line == "Actualizado: 08:00"


def test_english_messages():
    rendered = format_schedule(NOW, [], SUBJECTS, [], Messages("en"))

    assert rendered.day_label == "Tuesday"
    assert rendered.date_label == "October 13"
    assert rendered.schedule_status == "✅ No more classes today"
    assert rendered.next_event_line == "No events today"


def test_malformed_inputs_degrade_without_raising():
    rendered = format_schedule(NOW, None, None, None)

    assert rendered.class_lines == []
    assert rendered.events_today == 0


def test_selection_properties_hold_for_random_schedules():
    rng = random.Random(20261013)
    days = list(DayOfWeek)
    for _ in range(200):
        slots = [
            slot(rng.choice(days), time(rng.randrange(6, 22), rng.choice((0, 15, 30, 45))), subject_id="s1")
            for _ in range(rng.randrange(0, 12))
        ]
        now = NOW.replace(hour=rng.randrange(0, 24), minute=rng.randrange(0, 60)) + timedelta(days=rng.randrange(7))
        events = [event("e", now + timedelta(minutes=rng.randrange(-600, 600))) for _ in range(rng.randrange(0, 6))]

        kept = upcoming_slots(now, slots)
        today = DayOfWeek.from_date(now)
        assert len(kept) <= 3
        assert [s.start for s in kept] == sorted(s.start for s in kept)
        assert all(s.day == today for s in kept)
        assert all(s.start >= now.time().replace(second=0, microsecond=0) for s in kept)

        rendered = format_schedule(now, slots, SUBJECTS, events)
        assert rendered.pending_events == len([e for e in events if e.timestamp > now and e.timestamp.date() == now.date()])


def test_snapshot_with_next_event():
    snapshot = WidgetSnapshot(
        events_today=2,
        next_event_title="Entrega",
        next_event_time="10:30",
        schedule_status="2 clases restantes",
        current_subject="Cálculo I",
        last_update=to_millis(NOW - timedelta(minutes=5)),
    )
    rendered = format_snapshot(NOW, snapshot)

    assert rendered.schedule_status == "2 clases restantes"
    assert rendered.current_subject == "Cálculo I"
    assert rendered.next_event_line == "🔔 Próximo: Entrega\n   10:30"
    assert rendered.events_count_line == "Eventos hoy: 2"
    assert rendered.last_updated_line == "Actualizado: 07:55"


def test_empty_snapshot():
    rendered = format_snapshot(NOW, WidgetSnapshot.empty())

    assert rendered.schedule_status == "Sin datos"
    assert rendered.next_event_line == "Sin eventos hoy"
    assert rendered.last_updated_line == "Sin actualizar"


def test_snapshot_with_events_but_none_pending():
    rendered = format_snapshot(NOW, WidgetSnapshot(events_today=3))

    assert rendered.next_event_line == "No hay eventos pendientes hoy"


def test_signed_out_asks_for_sign_in():
    rendered = format_signed_out(NOW)

    assert rendered.schedule_status == "Por favor, inicia sesión en la app"
    assert rendered.next_event_line == ""
    assert format_data(NOW, ScheduleData(signed_in=False)) == rendered


def test_section_errors_are_independent():
    slots = [slot(DayOfWeek.TUESDAY, time(9, 0), subject_id="s2")]
    events = [event("Entrega", NOW + timedelta(hours=1))]

    schedule_failed = format_data(NOW, ScheduleData(events=events, schedule_error="timeout"))
    assert schedule_failed.schedule_status == "Error al cargar horario"
    assert schedule_failed.next_event_line.startswith("🔔 Próximo: Entrega")

    events_failed = format_data(NOW, ScheduleData(slots=slots, subjects=SUBJECTS, events_error="timeout"))
    assert events_failed.next_event_line == "Error al cargar eventos"
    assert events_failed.class_lines == ["🕐 09:00\nFísica I\n📍 Lab 3"]


def test_missing_schedule_document():
    rendered = format_data(NOW, ScheduleData(no_schedule=True))

    assert rendered.schedule_status == "Sin clases configuradas"
