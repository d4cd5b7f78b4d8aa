import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="freight_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["LOG_DIR"] = os.path.join(_tmp_dir, "logs")
os.environ.pop("S3_BUCKET_NAME", None)

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from utils.auth_utils import get_current_user

TENANT = "tenant-a"
TEST_USER = {"cognito:username": "tester", "cognito:groups": ["admin"]}


@pytest.fixture
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    with TestClient(app) as test_client:
        test_client.headers.update({"X-Tenant-ID": TENANT})
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_lr(client):
    def _make_lr(lr_no="LR-001", freight=1000, charges=None, **extra):
        payload = {
            "lr_no": lr_no,
            "date": "2024-04-01",
            "truck_no": "MH12AB1234",
            "from_place": "Pune",
            "to_place": "Mumbai",
            "freight": freight,
            "charges": charges or {},
            "consignor": {"name": "Acme Traders", "address": "Pune", "gst": "27AAAAA0000A1Z5"},
            "consignee": {"name": "Metro Stores", "address": "Mumbai"},
        }
        payload.update(extra)
        resp = client.post("/lorry-receipts/", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make_lr
