"""
Component tests for the cart HTTP routes.

Routes -> cart service -> cart store -> storage, with only the inventory
service simulated.
"""
import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.notifications import OUT_OF_STOCK_MESSAGE, REMOVE_FAILED_MESSAGE
from tests.conftest import persisted


@pytest.fixture
def cart_service(make_service):
    return make_service([{"id": 2, "amount": 1, "title": "Tênis VR Caminhada Confortável"}])


@pytest.fixture
def test_client(cart_service):
    return TestClient(create_app(cart_service=cart_service))


class TestCartRoutes:

    def test_retrieve_cart(self, test_client: TestClient):
        # Act
        response = test_client.get("/cart")

        # Assert
        assert response.status_code == 200
        cart_info = response.json()["cart_info"]
        assert cart_info["total_items"] == 1
        assert cart_info["cart_items"][0]["id"] == 2

    def test_add_item(self, test_client: TestClient, storage):
        # Act
        response = test_client.post("/cart/items/1")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "committed"
        assert data["detail"] is None
        assert [item["id"] for item in data["cart_info"]["cart_items"]] == [2, 1]
        assert persisted(storage) == data["cart_info"]["cart_items"]

    def test_add_item_out_of_stock(self, test_client: TestClient, inventory):
        # Arrange
        inventory.stock[1]["amount"] = 0

        # Act
        response = test_client.post("/cart/items/1")

        # Assert
        assert response.status_code == 409
        assert response.json()["detail"] == OUT_OF_STOCK_MESSAGE
        assert response.json()["cart_info"]["total_items"] == 1

    def test_add_item_inventory_down(self, test_client: TestClient, inventory):
        inventory.down = True

        response = test_client.post("/cart/items/1")

        assert response.status_code == 502
        assert response.json()["outcome"] == "service_failure"

    def test_set_quantity(self, test_client: TestClient):
        response = test_client.put("/cart/items/2", json={"amount": 3})

        assert response.status_code == 200
        assert response.json()["cart_info"]["cart_items"][0]["amount"] == 3

    def test_set_quantity_zero_is_ignored(self, test_client: TestClient, inventory):
        response = test_client.put("/cart/items/2", json={"amount": 0})

        assert response.status_code == 200
        assert response.json()["outcome"] == "ignored"
        assert response.json()["cart_info"]["cart_items"][0]["amount"] == 1
        assert inventory.requests == []

    def test_set_quantity_requires_amount(self, test_client: TestClient):
        response = test_client.put("/cart/items/2", json={})

        assert response.status_code == 422

    def test_remove_item(self, test_client: TestClient, storage):
        response = test_client.delete("/cart/items/2")

        assert response.status_code == 200
        assert response.json()["cart_info"] == {"cart_items": [], "total_items": 0}
        assert persisted(storage) == []

    def test_remove_missing_item(self, test_client: TestClient, notifier):
        response = test_client.delete("/cart/items/9")

        assert response.status_code == 404
        assert response.json()["detail"] == REMOVE_FAILED_MESSAGE
        assert notifier.messages == [(REMOVE_FAILED_MESSAGE, "error")]
