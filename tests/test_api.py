"""
HTTP tests through the FastAPI app with a throwaway database.
"""
from decimal import Decimal

import pytest

from grocery_compare.core.config import settings


def _create_store(client, name, distance):
    response = client.post("/api/stores/", json={"name": name, "chain": name, "distance": distance})
    assert response.status_code == 201
    return response.json()["id"]


def _set_price(client, store_id, product_name, price, is_on_sale=False):
    response = client.put("/api/prices/", json={
        "store_id": store_id,
        "product_name": product_name,
        "price": price,
        "is_on_sale": is_on_sale,
    })
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def priced_client(client):
    """Store X at 5 mi (milk 3.99), store Y at 8 mi (milk 4.29), store Z at 20 mi"""
    x = _create_store(client, "Store X", 5)
    y = _create_store(client, "Store Y", 8)
    z = _create_store(client, "Store Z", 20)
    _set_price(client, x, "milk", "3.99")
    _set_price(client, y, "milk", "4.29")
    _set_price(client, z, "milk", "1.99")
    return client, (x, y, z)


@pytest.mark.e2e
class TestHealth:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["app_name"] == settings.app_name

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


@pytest.mark.e2e
class TestCompareEndpoint:

    def test_ranked_breakdowns_with_summary(self, priced_client):
        client, (x, y, _) = priced_client

        response = client.post("/api/compare/", json={
            "list_items": [{"product_name": "milk", "quantity": 2}],
            "max_distance": 10,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert [b["store_id"] for b in data["breakdowns"]] == [x, y]
        assert Decimal(data["breakdowns"][0]["total_price"]) == Decimal("7.98")
        assert Decimal(data["breakdowns"][1]["total_price"]) == Decimal("8.58")
        assert Decimal(data["summary"]["best_savings"]) == Decimal("0.30")
        assert Decimal(data["summary"]["annual_savings"]) == Decimal("15.60")
        assert data["diagnostics"]["dropped_stores"] == []

    def test_no_stores_found(self, priced_client):
        client, _ = priced_client

        response = client.post("/api/compare/", json={
            "list_items": [{"product_name": "milk"}],
            "max_distance": 0,
        })

        assert response.status_code == 200
        assert response.json()["status"] == "no_stores_found"
        assert response.json()["breakdowns"] == []

    def test_empty_list(self, priced_client):
        client, _ = priced_client

        response = client.post("/api/compare/", json={"list_items": [], "max_distance": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "no_items"
        assert len(data["breakdowns"]) == 2
        assert all(Decimal(b["total_price"]) == 0 for b in data["breakdowns"])

    @pytest.mark.parametrize("body", [
        {"list_items": [{"product_name": "milk"}]},
        {"list_items": [{"product_name": "milk"}], "max_distance": -1},
        {"list_items": [{"product_name": "milk"}], "max_distance": "far"},
        {"list_items": "milk", "max_distance": 10},
        {"max_distance": 10},
        {"list_items": [{"product_name": "milk", "quantity": 0}], "max_distance": 10},
        {"list_items": [{"product_name": ""}], "max_distance": 10},
        {"list_items": [{"product_name": "milk", "quantity": "2"}], "max_distance": 10},
        {"list_items": [{"product_name": "milk", "quantity": 2.0}], "max_distance": 10},
    ])
    def test_invalid_input_is_400(self, priced_client, body):
        client, _ = priced_client

        response = client.post("/api/compare/", json=body)

        assert response.status_code == 400
        assert "detail" in response.json()


@pytest.mark.e2e
class TestStoresEndpoint:

    def test_list_and_filter(self, priced_client):
        client, (x, y, z) = priced_client

        all_stores = client.get("/api/stores/").json()
        nearby = client.get("/api/stores/", params={"max_distance": 6}).json()

        assert all_stores["total"] == 3
        assert [s["id"] for s in all_stores["items"]] == [x, y, z]
        assert [s["id"] for s in nearby["items"]] == [x]

    def test_get_missing_store(self, client):
        assert client.get("/api/stores/999").status_code == 404

    def test_negative_distance_rejected(self, client):
        response = client.post("/api/stores/", json={"name": "Bad", "chain": "Bad", "distance": -1})

        assert response.status_code == 422

    def test_distance_limited_to_tenths(self, client):
        response = client.post("/api/stores/", json={"name": "Bad", "chain": "Bad", "distance": "9.96"})

        assert response.status_code == 422

    def test_fractional_distance_kept_at_the_boundary(self, client):
        near = _create_store(client, "Near", "9.9")
        _create_store(client, "Far", "10.0")
        _set_price(client, near, "milk", "3.99")

        listed = client.get("/api/stores/", params={"max_distance": "9.9"}).json()
        compared = client.post("/api/compare/", json={
            "list_items": [{"product_name": "milk"}],
            "max_distance": 9.97,
        }).json()

        assert [s["id"] for s in listed["items"]] == [near]
        assert Decimal(listed["items"][0]["distance"]) == Decimal("9.9")
        assert [b["store_id"] for b in compared["breakdowns"]] == [near]


@pytest.mark.e2e
class TestPricesEndpoint:

    def test_upsert_reports_created(self, priced_client):
        client, (x, _, _) = priced_client

        data = _set_price(client, x, "milk", "3.79", is_on_sale=True)

        assert data["created"] is False
        assert data["price"]["is_on_sale"] is True

    def test_unknown_store_is_400(self, client):
        response = client.put("/api/prices/", json={"store_id": 999, "product_name": "milk", "price": "1.00"})

        assert response.status_code == 400

    def test_sub_cent_price_rejected(self, priced_client):
        client, (x, _, _) = priced_client

        response = client.put("/api/prices/", json={"store_id": x, "product_name": "milk", "price": "3.999"})

        assert response.status_code == 422
        exact = client.get("/api/prices/", params={"product_name": "milk", "store_id": x}).json()
        assert [Decimal(p["price"]) for p in exact["items"]] == [Decimal("3.99")]

    def test_filters_required(self, client):
        assert client.get("/api/prices/").status_code == 400

    def test_get_by_product_and_search(self, priced_client):
        client, _ = priced_client

        exact = client.get("/api/prices/", params={"product_name": "milk"}).json()
        search = client.get("/api/prices/search", params={"q": "MIL"}).json()

        assert exact["total"] == 3
        assert search["total"] == 3

    def test_history(self, priced_client):
        client, (x, _, _) = priced_client
        _set_price(client, x, "milk", "3.49")

        response = client.get("/api/prices/history", params={"store_id": x, "product_name": "milk"})

        assert response.status_code == 200
        assert [Decimal(p["price"]) for p in response.json()] == [Decimal("3.99"), Decimal("3.49")]

    def test_import(self, priced_client):
        client, (x, _, _) = priced_client

        response = client.post("/api/prices/import", json={"documents": [
            {"storeId": x, "productName": "eggs", "price": "2.99"},
            {"storeId": x, "price": "2.99"},
        ]})

        assert response.status_code == 200
        data = response.json()
        assert data["created_count"] == 1
        assert data["failed_count"] == 1

    def test_upload_csv(self, priced_client):
        client, (x, y, _) = priced_client
        content = f"store_id,product_name,price,is_on_sale\n{x},bread,2.49,yes\n{y},milk,4.09,no\n,,,\n".encode()

        response = client.post("/api/prices/upload-csv", files={"file": ("prices.csv", content, "text/csv")})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["total_rows"] == 3
        assert data["created_count"] == 1
        assert data["updated_count"] == 1
        assert data["skipped_count"] == 1

    def test_upload_requires_csv(self, client):
        response = client.post("/api/prices/upload-csv", files={"file": ("prices.xlsx", b"x", "application/octet-stream")})

        assert response.status_code == 400

    def test_delete(self, priced_client):
        client, (x, _, _) = priced_client
        price_id = _set_price(client, x, "milk", "3.99")["price"]["id"]

        assert client.delete(f"/api/prices/{price_id}").status_code == 204
        assert client.delete(f"/api/prices/{price_id}").status_code == 404


@pytest.mark.e2e
class TestListsEndpoint:

    def test_compare_stored_list(self, priced_client):
        client, (x, y, _) = priced_client
        list_id = client.post("/api/lists/", json={"name": "Weekly"}).json()["id"]
        client.post(f"/api/lists/{list_id}/items", json={"product_name": "milk", "quantity": 2})
        client.post(f"/api/lists/{list_id}/items", json={"product_name": "caviar", "checked": True})

        response = client.post(f"/api/lists/{list_id}/compare", json={"max_distance": 10, "unchecked_only": True})

        assert response.status_code == 200
        data = response.json()
        assert [b["store_id"] for b in data["breakdowns"]] == [x, y]
        assert data["breakdowns"][0]["items_total"] == 1

    def test_stored_list_uses_default_distance(self, priced_client):
        client, _ = priced_client
        list_id = client.post("/api/lists/", json={"name": "Weekly"}).json()["id"]
        client.post(f"/api/lists/{list_id}/items", json={"product_name": "milk"})

        response = client.post(f"/api/lists/{list_id}/compare", json={})

        assert response.status_code == 200
        expected = sum(1 for distance in (5, 8, 20) if distance <= settings.DEFAULT_MAX_DISTANCE)
        assert len(response.json()["breakdowns"]) == expected

    def test_item_quantity_clamped(self, client):
        list_id = client.post("/api/lists/", json={"name": "Weekly"}).json()["id"]
        item_id = client.post(f"/api/lists/{list_id}/items", json={"product_name": "milk"}).json()["id"]

        response = client.put(f"/api/lists/items/{item_id}", json={"quantity": 0})

        assert response.status_code == 200
        assert response.json()["quantity"] == 1

    def test_list_lifecycle(self, client):
        list_id = client.post("/api/lists/", json={"name": "Weekly"}).json()["id"]

        assert client.put(f"/api/lists/{list_id}", json={"name": "Party"}).json()["name"] == "Party"
        assert [s["id"] for s in client.get("/api/lists/").json()] == [list_id]
        assert client.delete(f"/api/lists/{list_id}").status_code == 204
        assert client.get(f"/api/lists/{list_id}").status_code == 404
        assert client.post(f"/api/lists/{list_id}/compare", json={}).status_code == 404


@pytest.mark.e2e
class TestAlertsEndpoint:

    def test_alert_fires_on_price_drop(self, priced_client):
        client, (x, _, _) = priced_client
        response = client.post("/api/alerts/", json={"product_name": "milk", "target_price": "3.50", "store_id": x})
        assert response.status_code == 201
        alert_id = response.json()["id"]

        data = _set_price(client, x, "milk", "3.25")

        assert [a["alert_id"] for a in data["triggered_alerts"]] == [alert_id]
        assert client.get("/api/alerts/").json()[0]["last_triggered_at"] is not None

    def test_sub_cent_target_rejected(self, client):
        response = client.post("/api/alerts/", json={"product_name": "milk", "target_price": "3.505"})

        assert response.status_code == 422

    def test_alert_for_unknown_store_is_400(self, client):
        response = client.post("/api/alerts/", json={"product_name": "milk", "target_price": "3.50", "store_id": 999})

        assert response.status_code == 400

    def test_delete_alert(self, client):
        alert_id = client.post("/api/alerts/", json={"product_name": "milk", "target_price": "3.50"}).json()["id"]

        assert client.delete(f"/api/alerts/{alert_id}").status_code == 204
        assert client.delete(f"/api/alerts/{alert_id}").status_code == 404
