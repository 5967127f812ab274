"""Integration tests for /api/sweets."""

import pytest
from fastapi.testclient import TestClient

from app.models.sweet import MAX_QUANTITY

TRUFFLE = {"name": "Truffle", "category": "chocolate", "price": 5.00, "quantity": 2}


@pytest.fixture
def create_sweet(client: TestClient, admin):
    """Factory creating a sweet as the admin and returning its JSON."""

    def _create(**overrides) -> dict:
        body = {**TRUFFLE, **overrides}
        response = client.post("/api/sweets", json=body, headers=admin["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _create


class TestPublicReads:
    def test_list_is_public(self, client: TestClient, create_sweet):
        sweet = create_sweet()

        response = client.get("/api/sweets")
        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [sweet["id"]]

    def test_get_one(self, client: TestClient, create_sweet):
        sweet = create_sweet()

        response = client.get(f"/api/sweets/{sweet['id']}")
        assert response.status_code == 200
        assert response.json() == sweet

    def test_get_unknown(self, client: TestClient):
        response = client.get("/api/sweets/does-not-exist")
        assert response.status_code == 404
        assert response.json()["detail"] == "Sweet not found"


class TestSearch:
    @pytest.fixture(autouse=True)
    def _catalogue(self, create_sweet):
        create_sweet(name="Dark Truffle", category="chocolate", price=12.0)
        create_sweet(name="Red Velvet", category="cake", price=7.0)
        create_sweet(name="Cheesecake", category="cake", price=9.0)
        create_sweet(name="Lollipop", category="candy", price=2.5)

    def test_no_filters_matches_list(self, client: TestClient):
        everything = {s["id"] for s in client.get("/api/sweets").json()}
        found = {s["id"] for s in client.get("/api/sweets/search").json()}
        assert found == everything

    def test_category_exact(self, client: TestClient):
        response = client.get("/api/sweets/search", params={"category": "cake"})

        assert response.status_code == 200
        assert {s["name"] for s in response.json()} == {"Red Velvet", "Cheesecake"}

    def test_name_and_price_range(self, client: TestClient):
        response = client.get(
            "/api/sweets/search",
            params={"name": "E", "minPrice": "7", "maxPrice": "9"},
        )
        assert {s["name"] for s in response.json()} == {"Red Velvet", "Cheesecake"}

    def test_blank_params_are_ignored(self, client: TestClient):
        response = client.get(
            "/api/sweets/search",
            params={"name": "", "category": "", "minPrice": "", "maxPrice": ""},
        )
        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_malformed_price(self, client: TestClient):
        response = client.get("/api/sweets/search", params={"minPrice": "cheap"})
        assert response.status_code == 400

    @pytest.mark.parametrize("raw", ["inf", "-inf", "nan", "1e309"])
    def test_non_finite_price_bound(self, client: TestClient, raw):
        for param in ("minPrice", "maxPrice"):
            response = client.get("/api/sweets/search", params={param: raw})
            assert response.status_code == 400
            assert response.json()["detail"] == f"{param} must be a number"


class TestCreate:
    def test_create_sets_owner_and_defaults(self, client: TestClient, admin):
        response = client.post(
            "/api/sweets",
            json={"name": "Fudge", "category": "candy", "price": 3.5},
            headers=admin["headers"],
        )

        assert response.status_code == 201
        data = response.json()
        assert data["adminId"] == admin["user"]["id"]
        assert data["quantity"] == 0
        assert data["imageUrl"] is None
        assert data["description"] is None

    def test_create_camel_case_fields(self, client: TestClient, create_sweet):
        sweet = create_sweet(imageUrl="https://example.com/fudge.png", description="Soft")
        assert sweet["imageUrl"] == "https://example.com/fudge.png"
        assert sweet["description"] == "Soft"

    def test_blank_image_url_means_none(self, client: TestClient, create_sweet):
        assert create_sweet(imageUrl="")["imageUrl"] is None

    def test_client_cannot_choose_owner(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet(adminId="someone-else", id="chosen-id")
        assert sweet["adminId"] == admin["user"]["id"]
        assert sweet["id"] != "chosen-id"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": ""},
            {"name": "x" * 101},
            {"category": "   "},
            {"price": 0},
            {"price": -1},
            {"quantity": -1},
            {"quantity": MAX_QUANTITY + 1},
            {"imageUrl": "not a url"},
            {"description": "x" * 501},
        ],
    )
    def test_validation(self, client: TestClient, admin, overrides):
        response = client.post(
            "/api/sweets", json={**TRUFFLE, **overrides}, headers=admin["headers"]
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("price", ["1e309", "-1e309", "Infinity", "NaN"])
    def test_non_finite_price(self, client: TestClient, admin, price):
        # Not expressible through json=, so the body is sent verbatim
        body = '{"name": "Fudge", "category": "candy", "price": ' + price + "}"
        response = client.post(
            "/api/sweets",
            content=body,
            headers={**admin["headers"], "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("price:")
        assert client.get("/api/sweets").json() == []

    def test_quantity_at_stock_cap(self, client: TestClient, create_sweet):
        assert create_sweet(quantity=MAX_QUANTITY)["quantity"] == MAX_QUANTITY

    def test_missing_required_field(self, client: TestClient, admin):
        response = client.post(
            "/api/sweets", json={"name": "Fudge", "price": 1.0}, headers=admin["headers"]
        )
        assert response.status_code == 400
        assert response.json()["detail"].startswith("category:")


class TestUpdateDelete:
    def test_partial_update(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet(description="Old")

        response = client.put(
            f"/api/sweets/{sweet['id']}",
            json={"price": 6.25},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 6.25
        assert data["name"] == "Truffle"
        assert data["description"] == "Old"

    def test_update_keeps_owner(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet()

        response = client.put(
            f"/api/sweets/{sweet['id']}",
            json={"adminId": "other"},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        assert response.json()["adminId"] == sweet["adminId"]

    def test_update_unknown(self, client: TestClient, admin):
        response = client.put(
            "/api/sweets/missing", json={"price": 1.0}, headers=admin["headers"]
        )
        assert response.status_code == 404

    def test_update_validation(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet()
        response = client.put(
            f"/api/sweets/{sweet['id']}", json={"price": -3}, headers=admin["headers"]
        )
        assert response.status_code == 400

    def test_update_rejects_non_finite_price(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet()
        response = client.put(
            f"/api/sweets/{sweet['id']}",
            content='{"price": 1e309}',
            headers={**admin["headers"], "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert client.get(f"/api/sweets/{sweet['id']}").json()["price"] == 5.0

    def test_update_rejects_quantity_over_cap(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet()
        response = client.put(
            f"/api/sweets/{sweet['id']}",
            json={"quantity": MAX_QUANTITY + 1},
            headers=admin["headers"],
        )
        assert response.status_code == 400

    def test_delete(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet()

        response = client.delete(f"/api/sweets/{sweet['id']}", headers=admin["headers"])
        assert response.status_code == 200
        assert response.json() == {"message": "Sweet deleted successfully"}

        again = client.delete(f"/api/sweets/{sweet['id']}", headers=admin["headers"])
        assert again.status_code == 404


class TestAccessControl:
    def test_guest_gets_401(self, client: TestClient):
        assert client.post("/api/sweets", json=TRUFFLE).status_code == 401
        assert client.post("/api/sweets/x/purchase").status_code == 401

    def test_customer_gets_403_on_admin_routes(
        self, client: TestClient, customer, create_sweet
    ):
        sweet = create_sweet()
        headers = customer["headers"]
        path = f"/api/sweets/{sweet['id']}"

        assert client.post("/api/sweets", json=TRUFFLE, headers=headers).status_code == 403
        assert client.put(path, json={"price": 1.0}, headers=headers).status_code == 403
        assert client.delete(path, headers=headers).status_code == 403
        assert (
            client.post(f"{path}/restock", json={"amount": 5}, headers=headers).status_code
            == 403
        )

    def test_bad_token_gets_401(self, client: TestClient):
        response = client.post(
            "/api/sweets", json=TRUFFLE, headers={"Authorization": "Bearer forged"}
        )
        assert response.status_code == 401


class TestPurchase:
    def test_buy_until_out_of_stock(self, client: TestClient, customer, create_sweet):
        sweet = create_sweet()
        path = f"/api/sweets/{sweet['id']}/purchase"

        first = client.post(path, headers=customer["headers"])
        second = client.post(path, headers=customer["headers"])
        third = client.post(path, headers=customer["headers"])

        assert first.json()["quantity"] == 1
        assert second.json()["quantity"] == 0
        assert third.status_code == 400
        assert third.json()["detail"] == "Sweet is out of stock"
        assert client.get(f"/api/sweets/{sweet['id']}").json()["quantity"] == 0

    def test_admin_can_purchase(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet()
        response = client.post(
            f"/api/sweets/{sweet['id']}/purchase", headers=admin["headers"]
        )
        assert response.status_code == 200

    def test_purchase_unknown(self, client: TestClient, customer):
        response = client.post("/api/sweets/missing/purchase", headers=customer["headers"])
        assert response.status_code == 404


class TestRestock:
    def test_restock_from_zero(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet(quantity=0)

        response = client.post(
            f"/api/sweets/{sweet['id']}/restock",
            json={"amount": 10},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        assert response.json()["quantity"] == 10

    @pytest.mark.parametrize("amount", [0, -5, 2.5, "10", True, None, MAX_QUANTITY + 1])
    def test_invalid_amount(self, client: TestClient, admin, create_sweet, amount):
        sweet = create_sweet(quantity=3)

        response = client.post(
            f"/api/sweets/{sweet['id']}/restock",
            json={"amount": amount},
            headers=admin["headers"],
        )

        assert response.status_code == 400
        assert client.get(f"/api/sweets/{sweet['id']}").json()["quantity"] == 3

    def test_missing_amount(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet()
        response = client.post(
            f"/api/sweets/{sweet['id']}/restock", json={}, headers=admin["headers"]
        )
        assert response.status_code == 400

    def test_restock_unknown(self, client: TestClient, admin):
        response = client.post(
            "/api/sweets/missing/restock", json={"amount": 1}, headers=admin["headers"]
        )
        assert response.status_code == 404

    def test_restock_up_to_stock_cap(self, client: TestClient, admin, create_sweet):
        sweet = create_sweet(quantity=MAX_QUANTITY - 5)
        url = f"/api/sweets/{sweet['id']}/restock"

        refused = client.post(url, json={"amount": 6}, headers=admin["headers"])
        assert refused.status_code == 400
        assert refused.json()["detail"] == "Restock would exceed the maximum stock level"
        assert client.get(f"/api/sweets/{sweet['id']}").json()["quantity"] == MAX_QUANTITY - 5

        accepted = client.post(url, json={"amount": 5}, headers=admin["headers"])
        assert accepted.status_code == 200
        assert accepted.json()["quantity"] == MAX_QUANTITY
