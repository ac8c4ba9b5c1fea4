#!/usr/bin/env python3
"""
Script to initialize MongoDB with the widget collections, indexes and sample data
"""

import argparse
from datetime import datetime, timedelta, timezone

from horario_widget.database import db_manager, connect_to_mongo, close_mongo_connection, get_database
from horario_widget.sources import SCHEDULES_COLLECTION, EVENTS_COLLECTION

SAMPLE_SUBJECTS = {
    "mat101": {"nombre": "Cálculo I", "aula": "A-201"},
    "fis101": {"nombre": "Física I", "aula": "Lab 3"},
    "prg101": {"nombre": "Programación", "aula": "B-105"},
}

SAMPLE_SLOTS = [
    {"dia": dia, "hora": hora, "materiaId": materia}
    for dia in ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes")
    for hora, materia in (
        ("7:30 - 8:20 (M1)", "mat101"),
        ("9:00 - 9:50 (M3)", "fis101"),
        ("11:00 - 12:40 (M5)", "prg101"),
    )
]

def init_database(user_id: str):
    """Create indexes and a sample active schedule plus today's events for `user_id`"""

    print("🔧 Initializing widget database...")

    if not connect_to_mongo():
        print("❌ Could not connect to MongoDB")
        return False
    db = get_database()

    try:
        print("📊 Creating collections and indexes...")
        db_manager.ensure_indexes()
        print("✅ Schedules, events and preferences collections ready")

        print("📝 Creating sample data...")
        db[SCHEDULES_COLLECTION].update_many(
            {"userId": user_id, "esActivo": True},
            {"$set": {"esActivo": False}}
        )
        db[SCHEDULES_COLLECTION].insert_one({
            "userId": user_id,
            "esActivo": True,
            "nombre": "Semestre de ejemplo",
            "slots": SAMPLE_SLOTS,
            "materias": SAMPLE_SUBJECTS,
            "createdAt": datetime.now(timezone.utc)
        })
        print(f"✅ Active schedule created for {user_id}")

        now = datetime.now(timezone.utc)
        events = [
            {"uid": user_id, "titulo": "Entrega de laboratorio", "fecha": now + timedelta(hours=2)},
            {"uid": user_id, "titulo": "Reunión de grupo", "fecha": now + timedelta(hours=4)},
        ]
        db[EVENTS_COLLECTION].insert_many(events)
        print(f"✅ {len(events)} sample events created")

        print("\n🎉 Database initialization completed!")
        return True

    finally:
        close_mongo_connection()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--user-id", default="demo-user", help="owner of the sample schedule and events")
    args = parser.parse_args()
    init_database(args.user_id)
