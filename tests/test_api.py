"""
==============================================================================
API Integration Tests
==============================================================================

Tests for REST API and WebSocket endpoints.

==============================================================================
"""

from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from app.store.document_store import DocumentStore


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient):
        """Test health check returns status."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["catalog"] == "healthy"

    def test_readiness_probe(self, client: TestClient):
        """Catalog is subscribed during startup."""
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_liveness_probe(self, client: TestClient):
        """Test liveness probe."""
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["alive"] is True


class TestAuthEndpoints:
    """Tests for authentication endpoints."""

    def test_login_success(self, client: TestClient):
        """Test successful login."""
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "admin", "password": "admin123"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["user"]["username"] == "admin"

    def test_login_invalid_password(self, client: TestClient):
        """Test login with invalid password."""
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "admin", "password": "wrongpassword"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_login_unknown_user(self, client: TestClient):
        """Test login with an unknown user."""
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "nonexistent", "password": "admin123"}
        )
        assert response.status_code == 401

    def test_refresh(self, client: TestClient):
        """Refresh token yields a new token pair."""
        login = client.post(
            "/api/v1/auth/login",
            json={"username": "admin", "password": "admin123"}
        ).json()

        response = client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": login["refresh_token"]}
        )
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "admin"

    def test_get_current_admin(self, client: TestClient, admin_headers: dict):
        """Test getting current admin info."""
        response = client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["username"] == "admin"

    def test_get_current_admin_no_token(self, client: TestClient):
        """Test getting current admin without token."""
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401

    def test_invalid_token(self, client: TestClient):
        """Test with invalid token."""
        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer invalid_token"}
        )
        assert response.status_code == 401


class TestCatalogEndpoints:
    """Tests for public catalog endpoints."""

    def test_list_all_in_store_order(self, client: TestClient, seeded_ids: List[str]):
        """Default query lists every product in key order."""
        response = client.get("/api/v1/catalog/products")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        assert [p["id"] for p in data["products"]] == seeded_ids

    def test_product_payload_uses_document_names(self, client: TestClient, seeded_ids: List[str]):
        response = client.get(f"/api/v1/catalog/products/{seeded_ids[2]}")
        assert response.status_code == 200
        product = response.json()["product"]
        assert product["name"] == "Anklet"
        assert product["inStock"] is True
        assert product["isFavorite"] is False
        assert "imageUrl" in product

    def test_search_and_stock(self, client: TestClient, seeded_ids: List[str]):
        response = client.get(
            "/api/v1/catalog/products",
            params={"search": "ring", "stock": "inStock"}
        )
        assert [p["name"] for p in response.json()["products"]] == ["Gold Ring"]

    def test_out_of_stock(self, client: TestClient, seeded_ids: List[str]):
        response = client.get("/api/v1/catalog/products", params={"stock": "outOfStock"})
        assert [p["name"] for p in response.json()["products"]] == ["Heavy Necklace"]

    def test_category_and_weight(self, client: TestClient, seeded_ids: List[str]):
        """Unparseable weights pass the weight filter."""
        response = client.get(
            "/api/v1/catalog/products",
            params={"category": "Rings", "weight_min": 6, "weight_max": 30}
        )
        assert [p["name"] for p in response.json()["products"]] == ["bangle"]

    def test_sort_by_name(self, client: TestClient, seeded_ids: List[str]):
        response = client.get("/api/v1/catalog/products", params={"sort": "nameAZ"})
        assert [p["name"] for p in response.json()["products"]] == [
            "Anklet", "bangle", "Gold Ring", "Heavy Necklace"
        ]

    def test_sort_by_weight_descending(self, client: TestClient, seeded_ids: List[str]):
        response = client.get("/api/v1/catalog/products", params={"sort": "weightHighToLow"})
        assert [p["weight"] for p in response.json()["products"]] == ["25.5 g", "12g", "5g", "abc"]

    def test_invalid_sort_rejected(self, client: TestClient):
        response = client.get("/api/v1/catalog/products", params={"sort": "priceLowToHigh"})
        assert response.status_code == 422

    def test_categories(self, client: TestClient, seeded_ids: List[str]):
        response = client.get("/api/v1/catalog/categories")
        assert response.json()["categories"] == ["Rings", "Necklaces", "Anklets"]

    def test_weight_range(self, client: TestClient, seeded_ids: List[str]):
        response = client.get("/api/v1/catalog/weight-range")
        data = response.json()
        assert (data["min"], data["max"]) == (5, 26)

    def test_weight_range_empty_catalog(self, client: TestClient):
        data = client.get("/api/v1/catalog/weight-range").json()
        assert (data["min"], data["max"]) == (0, 1000)

    def test_product_not_found(self, client: TestClient):
        response = client.get("/api/v1/catalog/products/missing")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_catalog_follows_store_writes(self, client: TestClient, document_store: DocumentStore):
        """Writes made after startup are visible without reloading."""
        document_store.set("k1", {"name": "Chain", "weight": "9g", "category": "Chains"})
        response = client.get("/api/v1/catalog/products")
        assert [p["id"] for p in response.json()["products"]] == ["k1"]


class TestPriceEndpoints:
    """Tests for price estimates."""

    def test_estimate_with_defaults(self, client: TestClient):
        """Making charge defaults to 10% and purity to 22 karat."""
        response = client.post("/api/v1/catalog/estimate", json={"weight": "10g", "gold_rate": 50})
        assert response.status_code == 200
        display = response.json()["estimate"]["display"]
        assert display == {
            "base_price": "458.33",
            "making_charge_amount": "45.83",
            "total_price": "504.17",
        }

    def test_estimate_catalog_product(self, client: TestClient, seeded_ids: List[str]):
        response = client.get(
            f"/api/v1/catalog/products/{seeded_ids[0]}/estimate",
            params={"gold_rate": 60, "making_charge": 0, "purity": 24}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["product_id"] == seeded_ids[0]
        assert data["estimate"]["display"]["total_price"] == "300.00"

    def test_estimate_rejects_bad_purity(self, client: TestClient):
        response = client.post("/api/v1/catalog/estimate", json={"weight": "10g", "purity": 30})
        assert response.status_code == 422


class TestFavoritesEndpoints:
    """Tests for per-client favorites."""

    def test_toggle_and_filter(
        self,
        client: TestClient,
        seeded_ids: List[str],
        client_headers: Dict[str, str]
    ):
        """A toggled product shows up in the favorites-only view."""
        response = client.post(
            f"/api/v1/favorites/{seeded_ids[1]}/toggle",
            headers=client_headers
        )
        assert response.status_code == 200
        assert response.json()["is_favorite"] is True

        listed = client.get(
            "/api/v1/catalog/products",
            params={"favorites_only": True},
            headers=client_headers
        ).json()
        assert [p["id"] for p in listed["products"]] == [seeded_ids[1]]
        assert listed["products"][0]["isFavorite"] is True

    def test_toggle_twice_removes(self, client: TestClient, client_headers: Dict[str, str]):
        client.post("/api/v1/favorites/p1/toggle", headers=client_headers)
        response = client.post("/api/v1/favorites/p1/toggle", headers=client_headers)
        assert response.json()["favorites"] == []

    def test_favorites_are_per_client(self, client: TestClient, client_headers: Dict[str, str]):
        client.post("/api/v1/favorites/p1/toggle", headers=client_headers)
        other = client.get("/api/v1/favorites", headers={"X-Client-Id": "other-browser"})
        assert other.json()["favorites"] == []

    def test_clear(self, client: TestClient, client_headers: Dict[str, str]):
        client.post("/api/v1/favorites/p1/toggle", headers=client_headers)
        assert client.delete("/api/v1/favorites", headers=client_headers).status_code == 200
        assert client.get("/api/v1/favorites", headers=client_headers).json()["total"] == 0

    def test_client_id_required(self, client: TestClient):
        response = client.get("/api/v1/favorites")
        assert response.status_code == 422

    def test_malformed_client_id(self, client: TestClient):
        response = client.get("/api/v1/favorites", headers={"X-Client-Id": "../../etc"})
        assert response.status_code == 422

    def test_favorites_only_without_client_is_empty(self, client: TestClient, seeded_ids: List[str]):
        response = client.get("/api/v1/catalog/products", params={"favorites_only": True})
        assert response.json()["total"] == 0


class TestAdminProductEndpoints:
    """Tests for admin product management."""

    PRODUCT_FORM = {"name": "Gold Ring", "weight": "5g", "category": "Rings", "price": "5000"}

    def test_requires_token(self, client: TestClient):
        assert client.get("/api/v1/admin/products").status_code == 401
        assert client.post("/api/v1/admin/products", data=self.PRODUCT_FORM).status_code == 401

    def test_requires_admin_role(self, client: TestClient, viewer_headers: dict):
        response = client.get("/api/v1/admin/products", headers=viewer_headers)
        assert response.status_code == 403

    def test_create_and_list(self, client: TestClient, admin_headers: dict):
        response = client.post("/api/v1/admin/products", data=self.PRODUCT_FORM, headers=admin_headers)
        assert response.status_code == 201
        product = response.json()["product"]
        assert product["inStock"] is True
        assert product["imageUrl"] is None

        listed = client.get("/api/v1/admin/products", headers=admin_headers).json()
        assert [p["id"] for p in listed["products"]] == [product["id"]]

        public = client.get("/api/v1/catalog/products").json()
        assert public["products"][0]["name"] == "Gold Ring"

    def test_create_missing_fields(self, client: TestClient, admin_headers: dict):
        response = client.post(
            "/api/v1/admin/products",
            data={"name": "Gold Ring", "weight": "  "},
            headers=admin_headers
        )
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Please fill all required fields"
        assert error["details"]["missing"] == ["weight", "category"]

    def test_create_with_long_description(self, client: TestClient, admin_headers: dict,
                                          document_store: DocumentStore):
        """Long free text is stored as given."""
        form = dict(self.PRODUCT_FORM, description="x" * 5001)

        response = client.post("/api/v1/admin/products", data=form, headers=admin_headers)

        assert response.status_code == 201
        product_id = response.json()["product"]["id"]
        assert document_store.get(product_id)["description"] == "x" * 5001

    def test_edit_with_long_name(self, client: TestClient, admin_headers: dict,
                                 document_store: DocumentStore):
        document_store.set("k1", {"name": "Ring", "weight": "5g", "category": "Rings"})

        response = client.put(
            "/api/v1/admin/products/k1",
            data={"name": "Ring " * 100, "weight": "5g", "category": "Rings"},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert document_store.get("k1")["name"] == ("Ring " * 100).strip()

    def test_create_with_image_upload(self, client: TestClient, admin_headers: dict):
        """Uploaded image is retrievable at the saved imageUrl."""
        response = client.post(
            "/api/v1/admin/products",
            data=self.PRODUCT_FORM,
            files={"image": ("ring.png", b"\x89PNG fake image", "image/png")},
            headers=admin_headers
        )
        assert response.status_code == 201
        image_url = response.json()["product"]["imageUrl"]
        assert image_url.startswith("/media/products/")

        image = client.get(image_url)
        assert image.status_code == 200
        assert image.content == b"\x89PNG fake image"
        assert image.headers["content-type"].startswith("image/png")

    def test_media_not_found(self, client: TestClient):
        assert client.get("/media/products/missing").status_code == 404

    def test_edit_keeps_image_and_unsent_fields(self, client: TestClient, admin_headers: dict,
                                                document_store: DocumentStore):
        document_store.set("k1", {
            "name": "Ring", "weight": "5g", "category": "Rings",
            "description": "Old", "imageUrl": "https://img.example/ring.jpg",
        })

        response = client.put(
            "/api/v1/admin/products/k1",
            data={"name": "Ring", "weight": "6g", "category": "Rings", "imageUrl": ""},
            headers=admin_headers
        )

        assert response.status_code == 200
        stored = document_store.get("k1")
        assert stored["weight"] == "6g"
        assert stored["description"] == "Old"
        assert stored["imageUrl"] == "https://img.example/ring.jpg"

    def test_edit_form(self, client: TestClient, admin_headers: dict, document_store: DocumentStore):
        document_store.set("k1", {"name": "Ring", "weight": "5g", "category": "Rings", "inStock": False})

        response = client.get("/api/v1/admin/products/k1/form", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "edit"
        assert data["form"]["in_stock"] is False

    def test_edit_missing_product(self, client: TestClient, admin_headers: dict):
        response = client.put(
            "/api/v1/admin/products/missing",
            data=self.PRODUCT_FORM,
            headers=admin_headers
        )
        assert response.status_code == 404

    def test_delete_requires_confirm(self, client: TestClient, admin_headers: dict,
                                     document_store: DocumentStore):
        document_store.set("k1", {"name": "Ring"})

        response = client.delete("/api/v1/admin/products/k1", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CONFIRMATION_REQUIRED"

        response = client.delete(
            "/api/v1/admin/products/k1",
            params={"confirm": True},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert document_store.get("k1") is None

    def test_toggle_stock(self, client: TestClient, admin_headers: dict, document_store: DocumentStore):
        document_store.set("k1", {"name": "Ring", "inStock": True})

        response = client.post("/api/v1/admin/products/k1/toggle-stock", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["inStock"] is False
        out = client.get("/api/v1/catalog/products", params={"stock": "outOfStock"}).json()
        assert [p["id"] for p in out["products"]] == ["k1"]


class TestProductFeed:
    """Tests for the live product WebSocket."""

    def test_initial_snapshot(self, client: TestClient, seeded_ids: List[str]):
        with client.websocket_connect("/ws/products") as websocket:
            message = websocket.receive_json()
            assert message["type"] == "snapshot"
            assert message["version"] == 1
            assert [p["id"] for p in message["products"]] == seeded_ids
            websocket.send_json({"type": "stop"})
