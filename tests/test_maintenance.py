from sqlalchemy import func, select

from orm import MaintenanceORM


def _log(client, laptop_id, maintenance_type="repair", description=None):
    return client.post(
        "/api/laptops/maintenance",
        json={"laptopId": laptop_id, "maintenanceType": maintenance_type, "description": description},
    )


def test_log_maintenance_forces_status_from_any_state(client, create_laptop):
    for serial, status in (("M1", "available"), ("M2", "assigned"), ("M3", "under maintenance")):
        a = create_laptop(serial=serial, status=status)

        r = _log(client, a["id"], "battery", "swollen battery")
        assert r.status_code == 201, r.text
        record = r.json()
        assert record["laptopId"] == a["id"]
        assert record["maintenanceType"] == "battery"
        assert record["description"] == "swollen battery"
        assert record["createdAt"]

        r = client.get(f"/api/laptops/{a['id']}")
        assert r.json()["status"] == "under maintenance"


def test_log_maintenance_unknown_laptop_writes_nothing(client, db_session):
    r = _log(client, "ghost-laptop")
    assert r.status_code == 404
    assert r.json()["message"] == "Laptop not found"

    count = db_session.execute(select(func.count()).select_from(MaintenanceORM)).scalar_one()
    assert count == 0


def test_log_maintenance_requires_type(client, create_laptop):
    a = create_laptop(serial="M4")
    r = client.post("/api/laptops/maintenance", json={"laptopId": a["id"], "maintenanceType": " "})
    assert r.status_code == 400

    r = client.get(f"/api/laptops/{a['id']}")
    assert r.json()["status"] == "available"


def test_maintenance_does_not_auto_revert(client, create_laptop):
    a = create_laptop(serial="M5")
    _log(client, a["id"])

    r = client.get(f"/api/laptops/{a['id']}")
    assert r.json()["status"] == "under maintenance"

    r = client.patch(f"/api/laptops/{a['id']}/status", json={"status": "available"})
    assert r.json()["status"] == "available"


def test_list_maintenance_history(client, create_laptop):
    a = create_laptop(serial="M6")
    _log(client, a["id"], "screen")
    _log(client, a["id"], "keyboard")

    r = client.get(f"/api/laptops/{a['id']}/maintenance")
    assert r.status_code == 200
    assert [m["maintenanceType"] for m in r.json()] == ["screen", "keyboard"]

    r = client.get("/api/laptops/unknown/maintenance")
    assert r.status_code == 404


def test_delete_laptop_keeps_maintenance_records(client, create_laptop, db_session):
    a = create_laptop(serial="M7")
    _log(client, a["id"])

    r = client.delete(f"/api/laptops/{a['id']}")
    assert r.status_code == 204

    rows = db_session.execute(
        select(MaintenanceORM).where(MaintenanceORM.laptop_id == a["id"])
    ).scalars().all()
    assert len(rows) == 1
