import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from fastapi.testclient import TestClient
from types import SimpleNamespace
from unittest.mock import patch
from uuid import uuid4

from restaurant.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from restaurant.main import app
from restaurant.models.order import OrderStatus
from restaurant.models.reservation import ReservationStatus

NOW = datetime(2026, 10, 19, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def client():
    return TestClient(app)


def _mock_order(status=OrderStatus.PENDING):
    return SimpleNamespace(
        id=uuid4(),
        table=None,
        items=[],
        total_amount=Decimal("25.98"),
        status=status,
        order_time=NOW,
        completion_time=NOW if status == OrderStatus.COMPLETED else None,
    )


def _mock_table(**overrides):
    table = dict(
        id=uuid4(), table_number=4, capacity=4, is_available=True, created_at=NOW, updated_at=NOW
    )
    table.update(overrides)
    return SimpleNamespace(**table)


class TestOrderRoutes:
    def test_create_order_success(self, client):
        """Test order creation returns 201 inside the success envelope"""
        with patch('restaurant.api.v1.orders.place_order') as mock_place_order:
            mock_place_order.return_value = _mock_order()

            order_data = {
                "table_id": str(uuid4()),
                "items": [{"menu_item_id": str(uuid4()), "quantity": 1}]
            }

            response = client.post("/api/v1/orders/", json=order_data)
            assert response.status_code == 201
            body = response.json()
            assert body["success"] is True
            assert body["data"]["status"] == "pending"
            assert Decimal(body["data"]["total_amount"]) == Decimal("25.98")

    def test_create_order_malformed_menu_item_id(self, client):
        """Malformed identifiers are rejected before reaching the service"""
        order_data = {"table_id": str(uuid4()), "items": [{"menu_item_id": "pizza", "quantity": 1}]}

        response = client.post("/api/v1/orders/", json=order_data)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"

    def test_create_order_empty_items(self, client):
        with patch('restaurant.api.v1.orders.place_order') as mock_place_order:
            mock_place_order.side_effect = InvalidArgumentError("Please provide table_id and at least one item.")

            response = client.post("/api/v1/orders/", json={"table_id": str(uuid4()), "items": []})
            assert response.status_code == 400
            assert response.json()["error"]["code"] == "invalid_argument"

    def test_create_order_unknown_table(self, client):
        with patch('restaurant.api.v1.orders.place_order') as mock_place_order:
            mock_place_order.side_effect = NotFoundError("Table not found")

            response = client.post(
                "/api/v1/orders/",
                json={"table_id": str(uuid4()), "items": [{"menu_item_id": str(uuid4()), "quantity": 1}]},
            )
            assert response.status_code == 404
            body = response.json()
            assert body["success"] is False
            assert body["error"] == {"code": "not_found", "message": "Table not found"}
            assert body["request_id"]

    def test_create_order_unavailable_item(self, client):
        with patch('restaurant.api.v1.orders.place_order') as mock_place_order:
            mock_place_order.side_effect = ConflictError("Lemonade is currently not available.")

            response = client.post(
                "/api/v1/orders/",
                json={"table_id": str(uuid4()), "items": [{"menu_item_id": str(uuid4()), "quantity": 1}]},
            )
            assert response.status_code == 400
            assert response.json()["error"]["code"] == "conflict"

    def test_get_order_success(self, client):
        with patch('restaurant.api.v1.orders.get_order_by_id') as mock_get_order:
            mock_order = _mock_order()
            mock_get_order.return_value = mock_order

            response = client.get(f"/api/v1/orders/{mock_order.id}")
            assert response.status_code == 200
            assert response.json()["data"]["id"] == str(mock_order.id)

    def test_get_order_not_found(self, client):
        with patch('restaurant.api.v1.orders.get_order_by_id') as mock_get_order:
            mock_get_order.return_value = None

            response = client.get(f"/api/v1/orders/{uuid4()}")
            assert response.status_code == 404

    def test_get_order_malformed_id(self, client):
        response = client.get("/api/v1/orders/not-a-uuid")
        assert response.status_code == 400

    def test_update_status_success(self, client):
        with patch('restaurant.api.v1.orders.update_order_status') as mock_update:
            mock_update.return_value = _mock_order(OrderStatus.COMPLETED)

            response = client.patch(f"/api/v1/orders/{uuid4()}/status", json={"status": "completed"})
            assert response.status_code == 200
            data = response.json()["data"]
            assert data["status"] == "completed"
            assert data["completion_time"] is not None
            assert data["message"] == "Order status successfully updated to completed"

    def test_update_status_unknown_value(self, client):
        response = client.patch(f"/api/v1/orders/{uuid4()}/status", json={"status": "shipped"})
        assert response.status_code == 400

    def test_update_status_from_final_state(self, client):
        with patch('restaurant.api.v1.orders.update_order_status') as mock_update:
            mock_update.side_effect = InvalidArgumentError(
                "Order is already in a final state: cancelled. Status cannot be updated."
            )

            response = client.patch(f"/api/v1/orders/{uuid4()}/status", json={"status": "completed"})
            assert response.status_code == 400
            assert "final state" in response.json()["error"]["message"]

    def test_delete_order(self, client):
        with patch('restaurant.api.v1.orders.delete_order') as mock_delete:
            response = client.delete(f"/api/v1/orders/{uuid4()}")
            assert response.status_code == 200
            assert response.json()["data"] == {"message": "Order removed"}
            mock_delete.assert_awaited_once()


class TestReservationRoutes:
    def _mock_reservation(self, status=ReservationStatus.PENDING):
        return SimpleNamespace(
            id=uuid4(),
            customer_name="Asha",
            phone_number="555-0100",
            table=None,
            table_id=None,
            date=date(2026, 11, 20),
            time="19:00",
            number_of_guests=3,
            status=status,
            notes=None,
            created_at=NOW,
            updated_at=NOW,
        )

    def test_create_reservation_passes_fields_through(self, client):
        with patch('restaurant.api.v1.reservations.create_reservation') as mock_create:
            mock_create.return_value = self._mock_reservation()

            payload = {
                "customer_name": "  Asha ",
                "phone_number": "555-0100",
                "date": "2026-11-20",
                "time": "19:00",
                "number_of_guests": 3,
            }
            response = client.post("/api/v1/reservations/", json=payload)

            assert response.status_code == 201
            kwargs = mock_create.call_args.kwargs
            assert kwargs["customer_name"] == "Asha"
            assert kwargs["date"] == date(2026, 11, 20)
            assert kwargs["table_id"] is None

    def test_create_reservation_double_booked(self, client):
        with patch('restaurant.api.v1.reservations.create_reservation') as mock_create:
            mock_create.side_effect = ConflictError("Table 4 is already reserved for 19:00 on 2026-11-20.")

            response = client.post("/api/v1/reservations/", json={"customer_name": "Asha"})
            assert response.status_code == 400
            assert response.json()["error"]["code"] == "conflict"

    def test_confirm_reservation(self, client):
        with patch('restaurant.api.v1.reservations.update_reservation_status') as mock_update:
            mock_update.return_value = self._mock_reservation(ReservationStatus.CONFIRMED)

            response = client.patch(f"/api/v1/reservations/{uuid4()}/status", json={"status": "confirmed"})
            assert response.status_code == 200
            assert response.json()["data"]["status"] == "confirmed"

    def test_unknown_reservation(self, client):
        with patch('restaurant.api.v1.reservations.get_reservation_by_id') as mock_get:
            mock_get.return_value = None

            response = client.get(f"/api/v1/reservations/{uuid4()}")
            assert response.status_code == 404


class TestTableRoutes:
    def test_availability_requires_boolean(self, client):
        response = client.patch(f"/api/v1/tables/{uuid4()}/availability", json={})
        assert response.status_code == 400

    def test_availability_update(self, client):
        with patch('restaurant.api.v1.tables.update_table_availability') as mock_update:
            mock_update.return_value = _mock_table(is_available=False)

            response = client.patch(f"/api/v1/tables/{uuid4()}/availability", json={"is_available": False})
            assert response.status_code == 200
            assert response.json()["data"]["is_available"] is False

    def test_create_duplicate_table(self, client):
        with patch('restaurant.api.v1.tables.create_table') as mock_create:
            mock_create.side_effect = ConflictError("Table with this number already exists")

            response = client.post("/api/v1/tables/", json={"table_number": 4, "capacity": 4})
            assert response.status_code == 400
            assert response.json()["error"]["message"] == "Table with this number already exists"

    def test_create_table_rejects_zero_capacity(self, client):
        response = client.post("/api/v1/tables/", json={"table_number": 4, "capacity": 0})
        assert response.status_code == 400


class TestUnexpectedFailures:
    def test_unexpected_error_is_logged_with_traceback(self, client, caplog):
        with patch('restaurant.api.v1.orders.place_order') as mock_place_order:
            mock_place_order.side_effect = RuntimeError("connection reset")

            with caplog.at_level("ERROR", logger="uvicorn"):
                response = client.post(
                    "/api/v1/orders/",
                    json={"table_id": str(uuid4()), "items": [{"menu_item_id": str(uuid4()), "quantity": 1}]},
                )

            assert response.status_code == 500
            assert response.json()["error"]["message"] == "Server failed to place order."
            failures = [r for r in caplog.records if r.getMessage().startswith("Error placing order")]
            assert failures and failures[0].exc_info is not None
