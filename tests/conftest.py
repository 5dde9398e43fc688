from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

from config import AppConfig
from main import create_app
from orm import EmployeeORM, LaptopORM, MaintenanceORM

ROOT_DIR = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def app_config(tmp_path_factory):
    # ---- テスト用DB ----
    tmp_dir = tmp_path_factory.mktemp("laptop_app")
    db_path = tmp_dir / "test_laptops.db"
    return AppConfig(
        database_url=f"sqlite:///{db_path.as_posix()}",
        jwt_secret="test-secret",
        templates_dir=str(ROOT_DIR / "templates"),
    )


@pytest.fixture(scope="session")
def app(app_config):
    return create_app(app_config)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db_session(app):
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db(app, db_session):
    db_session.execute(delete(MaintenanceORM))
    db_session.execute(delete(EmployeeORM))
    db_session.execute(delete(LaptopORM))
    db_session.commit()
    yield


@pytest.fixture()
def create_laptop(client):
    def _create(serial="ABC 123", brand="Dell", model="XPS", **extra):
        body = {
            "brand": brand,
            "model": model,
            "serialNumber": serial,
            "purchaseDate": "2024-01-01",
            **extra,
        }
        r = client.post("/api/laptops", json=body)
        assert r.status_code == 201, r.text
        return r.json()

    return _create
