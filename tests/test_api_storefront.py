"""Public catalog, banner and address endpoints via TestClient."""

import pytest

pytestmark = pytest.mark.api


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_request_id_is_generated(self, client):
        assert client.get("/health").headers["X-Request-ID"]

    def test_request_id_is_propagated(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"


class TestProductsAPI:
    def test_list_with_pagination(self, client, make_category, make_product):
        books = make_category("Books")
        for i in range(3):
            make_product(name=f"Book {i}", price=f"{10 + i}.00", category=books)
        make_product(name="Loose item")

        body = client.get("/products", params={"category": "Books", "limit": 2, "sort": "price_desc"}).json()

        assert body["pagination"] == {"total": 3, "page": 1, "limit": 2, "pages": 2}
        assert [p["name"] for p in body["products"]] == ["Book 2", "Book 1"]
        assert body["products"][0]["category"]["name"] == "Books"

    def test_unknown_sort_is_422(self, client):
        assert client.get("/products", params={"sort": "random"}).status_code == 422

    def test_limit_is_bounded(self, client):
        assert client.get("/products", params={"limit": 1000}).status_code == 422

    def test_get_product(self, client, make_product):
        product = make_product(name="Lamp", price="45.00")

        body = client.get(f"/products/{product.id}").json()

        assert body["name"] == "Lamp"
        assert body["price"] == "45.00"

    def test_unknown_product(self, client):
        assert client.get("/products/999").status_code == 404

    def test_categories(self, client, make_category):
        make_category("Toys")
        make_category("Books")

        assert [c["name"] for c in client.get("/categories").json()] == ["Books", "Toys"]


class TestBannersAPI:
    def test_select_for_anonymous(self, client, make_banner):
        make_banner(audience="RETURNING_USERS", priority=9)
        newcomer = make_banner(audience="NEW_USERS", priority=5)
        make_banner(audience="ALL", priority=1)

        body = client.get("/banners/select", params={"position": "HOME_TOP"}).json()

        assert [b["id"] for b in body] == [newcomer.id]

    def test_select_for_logged_in_user(self, client, user_headers, make_banner):
        returning = make_banner(audience="RETURNING_USERS", priority=9)
        make_banner(audience="NEW_USERS", priority=5)
        everyone = make_banner(audience="ALL", priority=1)

        body = client.get(
            "/banners/select", params={"position": "HOME_TOP", "max": 3}, headers=user_headers
        ).json()

        assert [b["id"] for b in body] == [returning.id, everyone.id]

    def test_select_requires_valid_position(self, client):
        assert client.get("/banners/select", params={"position": "SIDEBAR"}).status_code == 422

    def test_list_active_only(self, client, make_banner):
        make_banner(is_active=False)
        live = make_banner()

        everything = client.get("/banners").json()
        active = client.get("/banners", params={"active": "true"}).json()

        assert len(everything) == 2
        assert [b["id"] for b in active] == [live.id]

    def test_get_banner(self, client, make_banner):
        banner = make_banner(title="Hello")

        assert client.get(f"/banners/{banner.id}").json()["title"] == "Hello"


class TestAddressesAPI:
    def test_create_and_list(self, client, user_headers):
        payload = {
            "street": "Main 1",
            "city": "Springfield",
            "state": "IL",
            "postal_code": "62701",
            "country": "USA",
            "is_default": True,
        }

        created = client.post("/addresses", json=payload, headers=user_headers)

        assert created.status_code == 201
        assert created.json()["is_default"] is True
        assert [a["id"] for a in client.get("/addresses", headers=user_headers).json()] == [created.json()["id"]]

    def test_blank_field_is_422(self, client, user_headers):
        payload = {"street": "", "city": "X", "state": "Y", "postal_code": "1", "country": "Z"}

        assert client.post("/addresses", json=payload, headers=user_headers).status_code == 422

    def test_me(self, client, user, user_headers):
        assert client.get("/users/me", headers=user_headers).json()["email"] == user.email
