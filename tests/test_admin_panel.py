import httpx
import pytest

from admin import AdminPanel
from client import StorefrontClient
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, order_payload
from errors import ApiError, ForbiddenError, TransientNetworkError
from local_storage import LocalStorage
from session import AuthSession


@pytest.fixture
def admin_session(api, storage):
    session = AuthSession(api, storage)
    session.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
    return session


@pytest.fixture
def panel(admin_session, notify):
    return AdminPanel(admin_session, notify)


def test_session_sign_in_and_out(api, storage):
    session = AuthSession(api, storage)
    assert not session.is_authenticated()

    user = session.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
    assert session.is_admin()
    assert "passwordHash" not in user
    assert storage.get_item("currentUser")["email"] == ADMIN_EMAIL

    session.sign_out()
    assert session.current_user is None
    assert api.token is None


def test_session_restores_token_from_storage(client, tmp_path):
    path = tmp_path / "local.json"
    AuthSession(StorefrontClient(http=client), LocalStorage(path)).sign_up(
        "Nadia", "Islam", "nadia@example.com", "secret123", "01811111111")

    restored = AuthSession(StorefrontClient(http=client), LocalStorage(path))
    assert restored.client.token is not None
    assert restored.client.me()["email"] == "nadia@example.com"
    assert not restored.is_admin()


def test_wrong_password(api, storage):
    with pytest.raises(ApiError) as exc:
        AuthSession(api, storage).sign_in(ADMIN_EMAIL, "nope-nope")
    assert exc.value.status_code == 401
    assert storage.get_item("currentUser") is None


def test_panel_needs_an_admin(api, storage):
    session = AuthSession(api, storage)
    with pytest.raises(ForbiddenError):
        AdminPanel(session)
    session.sign_up("Nadia", "Islam", "nadia@example.com", "secret123", "01811111111")
    with pytest.raises(ForbiddenError):
        AdminPanel(session)


def test_server_rejects_forged_admin_session(api, storage):
    session = AuthSession(api, storage)
    user = session.sign_up("Nadia", "Islam", "nadia@example.com", "secret123", "01811111111")
    storage.set_item("currentUser", {**user, "role": "admin"})
    panel = AdminPanel(session)
    with pytest.raises(ApiError) as exc:
        panel.load_orders()
    assert exc.value.status_code == 403


def test_manage_orders(panel, client, notes):
    order_id = client.post("/api/orders", json=order_payload()).json()["orderId"]
    assert [o["id"] for o in panel.load_orders()] == [order_id]

    updated = panel.update_order_status(order_id, "confirmed")
    assert updated["status"] == "confirmed"
    assert notes[-1] == ("success", "Order status updated successfully")

    with pytest.raises(ApiError):
        panel.update_order_status(order_id, "teleported")
    assert notes[-1][0] == "error"


def test_manage_products(panel):
    created = panel.save_product({"name": "Puma Training Bib", "price": 350, "category": "accessories", "stock": 40})
    updated = panel.save_product({"stock": 35}, product_id=created["id"])
    assert updated["stock"] == 35
    assert created["id"] in [p["id"] for p in panel.load_products()]

    panel.delete_product(created["id"])
    assert created["id"] not in [p["id"] for p in panel.load_products()]


def test_manage_categories(panel, notes):
    category = panel.save_category({"name": "training", "displayName": "Training"})
    panel.save_category({"isActive": False}, category_id=category["id"])
    panel.delete_category(category["id"])
    assert "training" not in [c["name"] for c in panel.load_categories()]

    with pytest.raises(ApiError) as exc:
        panel.delete_category(1)
    assert exc.value.status_code == 400
    assert notes[-1] == ("error", "Error deleting category: Cannot delete a category that still has products")


def test_manage_users(panel, client):
    client.post("/api/users/register", json={
        "firstName": "Nadia", "lastName": "Islam", "email": "nadia@example.com",
        "password": "secret123", "phone": "01811111111",
    })
    users = panel.load_users()
    nadia = next(u for u in users if u["email"] == "nadia@example.com")
    panel.delete_user(nadia["id"])
    assert [u["email"] for u in panel.load_users()] == [ADMIN_EMAIL]

    with pytest.raises(ApiError) as exc:
        panel.delete_user("admin")
    assert exc.value.status_code == 400


def test_network_failure_is_transient():
    class DeadTransport:
        def request(self, *args, **kwargs):
            raise httpx.ConnectError("connection refused")

    api = StorefrontClient(http=DeadTransport())
    with pytest.raises(TransientNetworkError):
        api.list_products()
