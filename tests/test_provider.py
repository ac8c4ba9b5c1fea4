from datetime import timedelta

import pytest

from horario_widget.core.exceptions import InstanceNotFoundError
from horario_widget.core.messages import Messages
from horario_widget.host import InMemoryWidgetHost
from horario_widget.provider import WidgetProvider
from horario_widget.schemas import WidgetSnapshot
from horario_widget.sources import CachedSource, RemoteSource
from horario_widget.store import MemoryPreferences, SnapshotStore

from conftest import NOW, FakeCollection, FakeDatabase

REGIONS = {
    "widget_dia", "widget_fecha", "widget_clase_1", "widget_clase_2", "widget_clase_3",
    "widget_cursos", "widget_materia_actual", "widget_eventos", "widget_eventos_count",
    "widget_ultima_actualizacion", "widget_container",
}


@pytest.fixture
def store():
    return SnapshotStore(MemoryPreferences())


@pytest.fixture
def host():
    return InMemoryWidgetHost()


def attach(host, source):
    provider = WidgetProvider(host, source, messages=Messages("es"), clock=lambda: NOW)
    host.attach(provider)
    return provider


def test_new_instance_is_painted_with_every_region(host, store):
    attach(host, CachedSource(store))

    instance_id = host.add_instance()
    view = host.get_view(instance_id)

    assert set(view) == REGIONS
    assert view["widget_dia"] == "Martes"
    assert view["widget_container"] == "launch:main"


def test_refresh_paints_all_live_instances(host, store):
    provider = attach(host, CachedSource(store))
    first, second = host.add_instance(), host.add_instance()
    store.save(WidgetSnapshot(schedule_status="Dos clases", version=1))

    rendered = provider.on_refresh_requested()

    assert rendered.schedule_status == "Dos clases"
    assert host.get_view(first)["widget_cursos"] == "Dos clases"
    assert host.get_view(second)["widget_cursos"] == "Dos clases"


def test_refresh_without_instances_does_nothing(host, store):
    provider = attach(host, CachedSource(store))

    assert provider.on_refresh_requested() is None


def test_stale_snapshot_versions_are_ignored(host, store):
    provider = attach(host, CachedSource(store))
    instance_id = host.add_instance()

    store.save(WidgetSnapshot(schedule_status="nuevo", version=5))
    provider.on_refresh_requested()
    store.save(WidgetSnapshot(schedule_status="viejo", version=4))

    assert provider.on_refresh_requested() is None
    assert host.get_view(instance_id)["widget_cursos"] == "nuevo"
    assert provider.rendered_version == 5


def test_last_instance_removed_resets_rendered_version(host, store):
    provider = attach(host, CachedSource(store))
    instance_id = host.add_instance()
    store.save(WidgetSnapshot(version=7))
    provider.on_refresh_requested()

    host.remove_instance(instance_id)

    assert provider.rendered_version == 0
    assert host.get_instance_ids() == []


def test_lifecycle_hooks_fire_on_first_and_last_instance(host, store, monkeypatch):
    provider = attach(host, CachedSource(store))
    calls = []
    monkeypatch.setattr(provider, "on_first_instance_added", lambda: calls.append("first"))
    monkeypatch.setattr(provider, "on_last_instance_removed", lambda: calls.append("last"))

    a = host.add_instance()
    b = host.add_instance()
    host.remove_instance(a)
    host.remove_instance(b)

    assert calls == ["first", "last"]


def test_unknown_instances_raise_not_found(host):
    with pytest.raises(InstanceNotFoundError):
        host.get_view(99)
    with pytest.raises(InstanceNotFoundError):
        host.remove_instance(99)


def test_remote_refresh_for_signed_in_user(host):
    db = FakeDatabase()
    db["horarios"] = FakeCollection([{
        "userId": "u1",
        "esActivo": True,
        "slots": [{"dia": "Martes", "hora": "9:00 - 9:50", "materiaId": "fis101"}],
        "materias": {"fis101": {"nombre": "Física I", "aula": "Lab 3"}},
    }])
    db["eventos"] = FakeCollection([{"uid": "u1", "titulo": "Entrega", "fecha": NOW + timedelta(hours=2)}])
    provider = attach(host, RemoteSource(lambda: db))

    instance_id = host.add_instance(user_id="u1")
    view = host.get_view(instance_id)

    assert view["widget_clase_1"] == "🕐 09:00\nFísica I\n📍 Lab 3"
    assert view["widget_eventos"] == "🔔 Próximo: Entrega\n   10:00"
    assert view["widget_ultima_actualizacion"] == "Actualizado: 08:00"

    provider.on_refresh_requested()
    assert host.get_view(instance_id)["widget_clase_1"] == "🕐 09:00\nFísica I\n📍 Lab 3"
    assert host.get_instance_user(instance_id) == "u1"


def test_refresh_renders_each_instance_for_its_own_user(host):
    db = FakeDatabase()
    db["horarios"] = FakeCollection([{
        "userId": "u1",
        "esActivo": True,
        "slots": [{"dia": "Martes", "hora": "9:00 - 9:50", "materiaId": "fis101"}],
        "materias": {"fis101": {"nombre": "Física I", "aula": "Lab 3"}},
    }])
    provider = attach(host, RemoteSource(lambda: db))
    mine = host.add_instance(user_id="u1")
    anonymous = host.add_instance()

    provider.on_refresh_requested()

    assert host.get_view(mine)["widget_clase_1"] == "🕐 09:00\nFísica I\n📍 Lab 3"
    assert host.get_view(anonymous)["widget_cursos"] == "Por favor, inicia sesión en la app"
