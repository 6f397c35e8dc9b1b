import pytest
from fastapi.testclient import TestClient

from client import StorefrontClient
from database import Database
from local_storage import LocalStorage
from main import app, get_db

ADMIN_EMAIL = "admin@ir7.com"
ADMIN_PASSWORD = "admin123"


def order_payload(**overrides):
    payload = {
        "customer": {"id": "guest-1", "firstName": "Rafi", "lastName": "Ahmed", "email": "rafi@example.com"},
        "shippingAddress": {
            "address": "12 Lake Road",
            "phone": "01712345678",
            "city": "Dhaka",
            "postcode": "1207",
            "country": "Bangladesh",
        },
        "items": [
            {"id": 1, "name": "Manchester United Home Jersey 2024", "size": "M",
             "quantity": 1, "price": 1299, "category": "jerseys"},
        ],
        "paymentMethod": "bKash",
        "subtotal": 1299,
        "shippingFee": 110,
        "totalAmount": 1409,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def db(tmp_path):
    return Database(tmp_path / "data")


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/users/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def customer_headers(client):
    response = client.post("/api/users/register", json={
        "firstName": "Nadia",
        "lastName": "Islam",
        "email": "Nadia@Example.com",
        "password": "secret123",
        "phone": "01811111111",
    })
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def api(client):
    return StorefrontClient(http=client)


@pytest.fixture
def storage():
    return LocalStorage()


@pytest.fixture
def notes():
    return []


@pytest.fixture
def notify(notes):
    def _notify(message, level="success"):
        notes.append((level, message))
    return _notify
