from sqlalchemy import func, select

from orm import EmployeeORM


def _employee(email="alice@example.com", **extra):
    return {
        "firstName": "Alice",
        "lastName": "Smith",
        "email": email,
        "department": "Engineering",
        "role": "Developer",
        "phoneNumber": "555-0100",
        **extra,
    }


def _status(client, laptop_id):
    return client.get(f"/api/laptops/{laptop_id}").json()["status"]


def test_create_employee_with_laptop_marks_it_assigned(client, create_laptop):
    a = create_laptop(serial="E1")

    r = client.post("/api/employees", json=_employee(laptopAssigned=a["id"]))
    assert r.status_code == 201, r.text
    e = r.json()
    assert e["laptopAssigned"] == a["id"]
    assert e["email"] == "alice@example.com"
    assert "password" not in e
    assert "passwordHash" not in e

    assert _status(client, a["id"]) == "assigned"

    r = client.get("/api/laptops/available")
    assert r.json() == []


def test_create_employee_without_laptop(client):
    r = client.post("/api/employees", json=_employee(laptopAssigned=""))
    assert r.status_code == 201
    assert r.json()["laptopAssigned"] is None


def test_create_employee_unknown_laptop_writes_nothing(client, db_session):
    r = client.post("/api/employees", json=_employee(laptopAssigned="missing"))
    assert r.status_code == 404

    count = db_session.execute(select(func.count()).select_from(EmployeeORM)).scalar_one()
    assert count == 0


def test_duplicate_email_is_400(client):
    client.post("/api/employees", json=_employee())
    r = client.post("/api/employees", json=_employee(email="ALICE@example.com"))
    assert r.status_code == 400
    assert "email" in r.json()["message"]


def test_reassign_releases_previous_laptop(client, create_laptop):
    a = create_laptop(serial="E2")
    b = create_laptop(serial="E3")
    e = client.post("/api/employees", json=_employee(laptopAssigned=a["id"])).json()

    r = client.put(f"/api/employees/{e['id']}", json={"laptopAssigned": b["id"], "role": "Lead"})
    assert r.status_code == 200, r.text
    assert r.json()["laptopAssigned"] == b["id"]
    assert r.json()["role"] == "Lead"
    assert r.json()["firstName"] == "Alice"

    assert _status(client, a["id"]) == "available"
    assert _status(client, b["id"]) == "assigned"

    r = client.put(f"/api/employees/{e['id']}", json={"laptopAssigned": None})
    assert r.json()["laptopAssigned"] is None
    assert _status(client, b["id"]) == "available"


def test_release_keeps_maintenance_status(client, create_laptop):
    a = create_laptop(serial="E4")
    e = client.post("/api/employees", json=_employee(laptopAssigned=a["id"])).json()
    client.post("/api/laptops/maintenance", json={"laptopId": a["id"], "maintenanceType": "repair"})

    r = client.delete(f"/api/employees/{e['id']}")
    assert r.status_code == 204
    assert _status(client, a["id"]) == "under maintenance"


def test_delete_employee_releases_laptop(client, create_laptop):
    a = create_laptop(serial="E5")
    e = client.post("/api/employees", json=_employee(laptopAssigned=a["id"])).json()

    r = client.delete(f"/api/employees/{e['id']}")
    assert r.status_code == 204
    assert _status(client, a["id"]) == "available"

    r = client.get(f"/api/employees/{e['id']}")
    assert r.status_code == 404
    r = client.delete(f"/api/employees/{e['id']}")
    assert r.status_code == 404


def test_delete_laptop_clears_employee_reference(client, create_laptop):
    a = create_laptop(serial="E6")
    e = client.post("/api/employees", json=_employee(laptopAssigned=a["id"])).json()

    client.delete(f"/api/laptops/{a['id']}")

    r = client.get(f"/api/employees/{e['id']}")
    assert r.status_code == 200
    assert r.json()["laptopAssigned"] is None


def test_update_unknown_laptop_leaves_employee_untouched(client, create_laptop):
    a = create_laptop(serial="E7")
    e = client.post("/api/employees", json=_employee(laptopAssigned=a["id"])).json()

    r = client.put(f"/api/employees/{e['id']}", json={"laptopAssigned": "missing"})
    assert r.status_code == 404

    r = client.get(f"/api/employees/{e['id']}")
    assert r.json()["laptopAssigned"] == a["id"]
    assert _status(client, a["id"]) == "assigned"


def test_list_employees(client):
    client.post("/api/employees", json=_employee())
    client.post("/api/employees", json=_employee(email="bob@example.com", firstName="Bob"))
    r = client.get("/api/employees")
    assert r.status_code == 200
    assert {e["firstName"] for e in r.json()} == {"Alice", "Bob"}


def test_resubmitting_held_laptop_marks_it_assigned_again(client, create_laptop):
    a = create_laptop(serial="E8")
    e = client.post("/api/employees", json=_employee(laptopAssigned=a["id"])).json()
    client.post("/api/laptops/maintenance", json={"laptopId": a["id"], "maintenanceType": "repair"})
    assert _status(client, a["id"]) == "under maintenance"

    r = client.put(f"/api/employees/{e['id']}", json={"laptopAssigned": a["id"]})
    assert r.status_code == 200, r.text
    assert r.json()["laptopAssigned"] == a["id"]
    assert _status(client, a["id"]) == "assigned"


def test_shared_laptop_stays_assigned_until_last_holder_leaves(client, create_laptop):
    a = create_laptop(serial="E9")
    first = client.post("/api/employees", json=_employee(laptopAssigned=a["id"])).json()
    second = client.post(
        "/api/employees", json=_employee(email="bob@example.com", firstName="Bob", laptopAssigned=a["id"])
    ).json()

    assert client.delete(f"/api/employees/{first['id']}").status_code == 204
    assert _status(client, a["id"]) == "assigned"

    r = client.put(f"/api/employees/{second['id']}", json={"laptopAssigned": None})
    assert r.status_code == 200
    assert _status(client, a["id"]) == "available"


def test_non_string_employee_fields_are_400(client):
    r = client.post("/api/employees", json=_employee(department=7))
    assert r.status_code == 400
    assert "department" in r.json()["message"]
