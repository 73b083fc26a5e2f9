from decimal import Decimal

from fastapi.testclient import TestClient

from prelovin.cart.models import CartItem
from prelovin.cart.service import CartService
from prelovin.categories.service import CategoryService
from prelovin.core.config import settings
from prelovin.products.models import Product, ProductCondition
from prelovin.users.models import User

CHECKOUT_BODY = {"shippingAddress": "Jl. Merdeka 1", "shippingCity": "Bandung", "shippingPhone": "08123456789"}


class TestAuthentication:

    def test_anonymous_cart_request_never_reaches_storage(self, client, mocker):
        get_cart_items = mocker.patch.object(CartService, "get_cart_items")

        response = client.get("/api/cart")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"
        get_cart_items.assert_not_called()

    def test_invalid_token_is_rejected(self, client):
        response = client.get("/api/orders", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_auth_user_before_and_after_sync(self, client, auth_headers):
        headers = auth_headers("fresh-user", email="fresh@example.com", first_name="Rina")

        assert client.get("/api/auth/user", headers=headers).status_code == 404

        synced = client.post("/api/auth/user", headers=headers)
        assert synced.status_code == 200
        assert synced.json()["email"] == "fresh@example.com"
        assert synced.json()["firstName"] == "Rina"

        me = client.get("/api/auth/user", headers=headers).json()
        assert me["id"] == "fresh-user"

    def test_first_write_creates_user_from_claims(self, client, db_session, seller, make_product, auth_headers):
        product = make_product(seller.id, stock=3)
        headers = auth_headers("newcomer", email="newcomer@example.com", first_name="Dewi")

        response = client.post("/api/cart", json={"productId": product.id}, headers=headers)

        assert response.status_code == 201
        assert db_session.query(User).filter(User.id == "newcomer").one().first_name == "Dewi"


class TestPublicReads:

    def test_categories(self, client, category):
        body = client.get("/api/categories").json()
        assert body == [{"id": category.id, "name": "Elektronik", "slug": "elektronik",
                         "icon": "Smartphone", "description": None}]

    def test_public_user_hides_private_fields(self, client, buyer):
        body = client.get(f"/api/users/{buyer.id}").json()

        assert body["firstName"] == "Budi"
        assert body["city"] == "Bandung"
        for private in ("email", "phone", "address"):
            assert private not in body

    def test_unknown_user(self, client):
        response = client.get("/api/users/ghost")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    def test_product_list_embeds_public_seller(self, client, seller, category, make_product):
        make_product(seller.id, category_id=category.id, original_price=Decimal("200000"))

        products = client.get("/api/products").json()

        assert len(products) == 1
        assert products[0]["seller"]["id"] == seller.id
        assert "email" not in products[0]["seller"]
        assert products[0]["category"]["slug"] == "elektronik"
        assert products[0]["discountPercent"] == 50
        assert Decimal(products[0]["price"]) == Decimal("100000")

    def test_product_detail_counts_views(self, client, seller, make_product):
        product = make_product(seller.id)

        first = client.get(f"/api/products/{product.id}")
        second = client.get(f"/api/products/{product.id}")

        assert first.status_code == 200
        assert first.json()["views"] == 0
        assert second.json()["views"] == 1

    def test_product_detail_missing(self, client):
        response = client.get("/api/products/12345")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_inactive_product_still_readable_by_id(self, client, seller, make_product):
        product = make_product(seller.id, is_active=False)

        assert client.get("/api/products").json() == []
        assert client.get(f"/api/products/{product.id}").status_code == 200


class TestCatalogQuery:

    def _seed(self, db_session, seller, category, make_product):
        make_product(seller.id, name="Kamera Analog", price=Decimal("150000"), views=10,
                     condition=ProductCondition.SEPERTI_BARU, category_id=category.id)
        make_product(seller.id, name="Jaket Kulit", description="kamera tidak termasuk", price=Decimal("80000"),
                     views=2, condition=ProductCondition.BAGUS)
        make_product(seller.id, name="Meja Jati", price=Decimal("400000"), views=30,
                     condition=ProductCondition.LAYAK_PAKAI)

    def _names(self, response):
        assert response.status_code == 200
        return [p["name"] for p in response.json()]

    def test_default_is_newest_first(self, client, db_session, seller, category, make_product):
        self._seed(db_session, seller, category, make_product)
        assert self._names(client.get("/api/products")) == ["Meja Jati", "Jaket Kulit", "Kamera Analog"]

    def test_search_matches_name_or_description(self, client, db_session, seller, category, make_product):
        self._seed(db_session, seller, category, make_product)
        assert self._names(client.get("/api/products", params={"search": "KAMERA"})) == ["Jaket Kulit", "Kamera Analog"]

    def test_condition_and_category(self, client, db_session, seller, category, make_product):
        self._seed(db_session, seller, category, make_product)

        by_condition = client.get("/api/products", params=[("condition", "bagus"), ("condition", "layak-pakai")])
        assert self._names(by_condition) == ["Meja Jati", "Jaket Kulit"]
        assert self._names(client.get("/api/products", params={"category": "elektronik"})) == ["Kamera Analog"]

    def test_price_bounds_are_inclusive(self, client, db_session, seller, category, make_product):
        self._seed(db_session, seller, category, make_product)
        names = self._names(client.get("/api/products", params={"minPrice": "80000", "maxPrice": "150000"}))
        assert names == ["Jaket Kulit", "Kamera Analog"]

    def test_sort_options(self, client, db_session, seller, category, make_product):
        self._seed(db_session, seller, category, make_product)

        assert self._names(client.get("/api/products", params={"sortBy": "price-low"})) == \
            ["Jaket Kulit", "Kamera Analog", "Meja Jati"]
        assert self._names(client.get("/api/products", params={"sortBy": "price-high"})) == \
            ["Meja Jati", "Kamera Analog", "Jaket Kulit"]
        assert self._names(client.get("/api/products", params={"sortBy": "most-viewed"})) == \
            ["Meja Jati", "Kamera Analog", "Jaket Kulit"]

    def test_unknown_sort_is_a_validation_error(self, client):
        response = client.get("/api/products", params={"sortBy": "random"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_exclude_and_seller_filter(self, client, db_session, seller, buyer, category, make_product):
        self._seed(db_session, seller, category, make_product)
        other = make_product(buyer.id, name="Punya Pembeli")

        assert self._names(client.get("/api/products", params={"sellerId": buyer.id})) == ["Punya Pembeli"]
        assert "Punya Pembeli" not in self._names(client.get("/api/products", params={"exclude": other.id}))


class TestSellerProducts:

    def test_create_product(self, client, seller_headers, category):
        payload = {
            "name": "Sepeda Lipat",
            "price": "2200000",
            "originalPrice": "3500000",
            "categoryId": category.id,
            "condition": "Bagus",
            "images": ["https://img.example.com/1.jpg", "  "],
            "stock": 2,
            "location": "Jakarta Barat",
        }

        response = client.post("/api/products", json=payload, headers=seller_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["sellerId"] == "seller-1"
        assert body["views"] == 0
        assert body["soldCount"] == 0
        assert body["isActive"] is True
        assert body["images"] == ["https://img.example.com/1.jpg"]

    def test_malformed_product_is_rejected(self, client, seller_headers):
        response = client.post("/api/products", json={"name": "", "price": "-5", "condition": "Rusak"},
                               headers=seller_headers)
        assert response.status_code == 422
        fields = {detail["field"] for detail in response.json()["error"]["details"]}
        assert "body -> name" in fields
        assert "body -> price" in fields

    def test_create_requires_login(self, client):
        assert client.post("/api/products", json={}).status_code == 401

    def test_update_by_owner(self, client, seller, seller_headers, make_product):
        product = make_product(seller.id, stock=1)

        response = client.patch(f"/api/products/{product.id}", json={"stock": 4, "isActive": False},
                                headers=seller_headers)

        assert response.status_code == 200
        assert response.json()["stock"] == 4
        assert response.json()["isActive"] is False
        assert response.json()["name"] == "Kamera Bekas"

    def test_update_rejects_null_for_required_fields(self, client, seller, seller_headers, make_product):
        product = make_product(seller.id, stock=2)

        for field in ("name", "price", "condition", "images", "stock", "isActive"):
            response = client.patch(f"/api/products/{product.id}", json={field: None}, headers=seller_headers)
            assert response.status_code == 422, field
            details = response.json()["error"]["details"]
            assert [d["field"] for d in details] == [f"body -> {field}"]

        response = client.patch(f"/api/products/{product.id}",
                                json={"description": None, "originalPrice": None, "categoryId": None, "location": None},
                                headers=seller_headers)
        assert response.status_code == 200
        assert response.json()["stock"] == 2
        assert response.json()["location"] is None

    def test_update_by_someone_else(self, client, seller, buyer_headers, make_product):
        product = make_product(seller.id)

        response = client.patch(f"/api/products/{product.id}", json={"price": "1"}, headers=buyer_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_update_missing_product(self, client, seller_headers):
        assert client.patch("/api/products/999", json={"stock": 1}, headers=seller_headers).status_code == 404

    def test_delete(self, client, db_session, seller, buyer, seller_headers, buyer_headers, make_product):
        product = make_product(seller.id)
        product_id = product.id
        CartService.add_to_cart(db_session, buyer.id, product_id)

        assert client.delete(f"/api/products/{product_id}", headers=buyer_headers).status_code == 403

        response = client.delete(f"/api/products/{product_id}", headers=seller_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted"}
        assert db_session.query(CartItem).count() == 0
        assert client.delete(f"/api/products/{product_id}", headers=seller_headers).status_code == 404

    def test_my_products_and_stats(self, client, seller, seller_headers, make_product):
        make_product(seller.id, views=5, sold_count=2)
        make_product(seller.id, is_active=False, views=1)

        assert len(client.get("/api/my-products", headers=seller_headers).json()) == 2
        stats = client.get("/api/my-products/stats", headers=seller_headers).json()
        assert stats == {"totalProducts": 2, "activeProducts": 1, "totalSold": 2, "totalViews": 6}


class TestCart:

    def test_own_product_is_rejected(self, client, db_session, seller, seller_headers, make_product):
        product = make_product(seller.id, stock=3)

        response = client.post("/api/cart", json={"productId": product.id}, headers=seller_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "OWN_PRODUCT"
        assert db_session.query(CartItem).count() == 0

    def test_quantity_above_stock(self, client, seller, buyer_headers, make_product):
        product = make_product(seller.id, stock=2)

        response = client.post("/api/cart", json={"productId": product.id, "quantity": 3}, headers=buyer_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INSUFFICIENT_STOCK"

    def test_missing_product(self, client, buyer_headers):
        response = client.post("/api/cart", json={"productId": 404}, headers=buyer_headers)
        assert response.status_code == 404

    def test_each_add_is_checked_alone(self, client, seller, buyer_headers, make_product):
        product = make_product(seller.id, stock=5)

        for _ in range(2):
            response = client.post("/api/cart", json={"productId": product.id, "quantity": 3}, headers=buyer_headers)
            assert response.status_code == 201

        cart = client.get("/api/cart", headers=buyer_headers).json()
        assert len(cart) == 1
        assert cart[0]["quantity"] == 6
        assert cart[0]["product"]["seller"]["id"] == seller.id

    def test_update_and_remove(self, client, seller, buyer_headers, seller_headers, make_product):
        product = make_product(seller.id, stock=5)
        item = client.post("/api/cart", json={"productId": product.id}, headers=buyer_headers).json()

        assert client.patch(f"/api/cart/{item['id']}", json={"quantity": 2}, headers=seller_headers).status_code == 404
        assert client.patch(f"/api/cart/{item['id']}", json={"quantity": 0}, headers=buyer_headers).status_code == 422

        updated = client.patch(f"/api/cart/{item['id']}", json={"quantity": 2}, headers=buyer_headers)
        assert updated.json()["quantity"] == 2

        for _ in range(2):
            removed = client.delete(f"/api/cart/{item['id']}", headers=buyer_headers)
            assert removed.json() == {"message": "Item removed from cart"}
        assert client.get("/api/cart", headers=buyer_headers).json() == []


class TestOrders:

    def _buy(self, client, product, headers, quantity=1):
        client.post("/api/cart", json={"productId": product.id, "quantity": quantity}, headers=headers)
        return client.post("/api/orders", json=CHECKOUT_BODY, headers=headers)

    def test_checkout_happy_path(self, client, db_session, seller, buyer_headers, make_product):
        product = make_product(seller.id, stock=1, price=Decimal("100000"))

        response = self._buy(client, product, buyer_headers)

        assert response.status_code == 201
        order = response.json()
        assert Decimal(order["totalAmount"]) == Decimal("100000")
        assert order["status"] == "pending"
        assert client.get("/api/cart", headers=buyer_headers).json() == []

        db_session.expire_all()
        stored = db_session.get(Product, product.id)
        assert (stored.stock, stored.sold_count) == (0, 1)

        detail = client.get(f"/api/orders/{order['id']}", headers=buyer_headers).json()
        assert len(detail["items"]) == 1
        assert detail["items"][0]["productId"] == product.id
        assert detail["items"][0]["product"]["name"] == "Kamera Bekas"

    def test_empty_cart(self, client, buyer_headers):
        response = client.post("/api/orders", json=CHECKOUT_BODY, headers=buyer_headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EMPTY_CART"

    def test_stock_conflict_at_checkout(self, client, db_session, seller, buyer_headers, make_product):
        product = make_product(seller.id, stock=5)
        client.post("/api/cart", json={"productId": product.id, "quantity": 3}, headers=buyer_headers)
        client.post("/api/cart", json={"productId": product.id, "quantity": 3}, headers=buyer_headers)

        response = client.post("/api/orders", json=CHECKOUT_BODY, headers=buyer_headers)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "STOCK_CONFLICT"
        assert client.get("/api/cart", headers=buyer_headers).json()[0]["quantity"] == 6

    def test_missing_shipping_address(self, client, buyer_headers):
        response = client.post("/api/orders", json={"shippingCity": "Bandung"}, headers=buyer_headers)
        assert response.status_code == 422

    def test_order_list_and_deleted_product(self, client, seller, seller_headers, buyer_headers, make_product):
        product = make_product(seller.id, stock=2)
        self._buy(client, product, buyer_headers)
        client.delete(f"/api/products/{product.id}", headers=seller_headers)

        orders = client.get("/api/orders", headers=buyer_headers).json()

        assert len(orders) == 1
        assert orders[0]["items"][0]["product"] is None
        assert orders[0]["items"][0]["sellerId"] == seller.id

    def test_order_detail_open_to_any_member_by_default(self, client, seller, buyer_headers, auth_headers, make_product):
        product = make_product(seller.id)
        order_id = self._buy(client, product, buyer_headers).json()["id"]

        response = client.get(f"/api/orders/{order_id}", headers=auth_headers("stranger"))

        assert response.status_code == 200

    def test_order_detail_owner_only(self, client, monkeypatch, seller, seller_headers, buyer_headers,
                                     auth_headers, make_product):
        monkeypatch.setattr(settings, "ORDER_DETAIL_OWNER_ONLY", True)
        product = make_product(seller.id)
        order_id = self._buy(client, product, buyer_headers).json()["id"]

        assert client.get(f"/api/orders/{order_id}", headers=auth_headers("stranger")).status_code == 404
        assert client.get(f"/api/orders/{order_id}", headers=buyer_headers).status_code == 200
        assert client.get(f"/api/orders/{order_id}", headers=seller_headers).status_code == 200

    def test_unknown_order(self, client, buyer_headers):
        response = client.get("/api/orders/999", headers=buyer_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ORDER_NOT_FOUND"

    def test_status_updates(self, client, seller, seller_headers, buyer_headers, auth_headers, make_product):
        product = make_product(seller.id)
        order_id = self._buy(client, product, buyer_headers).json()["id"]
        url = f"/api/orders/{order_id}/status"

        assert client.patch(url, json={"status": "shipped"}, headers=buyer_headers).status_code == 400
        assert client.patch(url, json={"status": "paid"}, headers=auth_headers("stranger")).status_code == 403

        paid = client.patch(url, json={"status": "paid"}, headers=buyer_headers)
        assert paid.status_code == 200
        assert paid.json()["status"] == "paid"

        shipped = client.patch(url, json={"status": "shipped"}, headers=seller_headers)
        assert shipped.json()["status"] == "shipped"

        invalid = client.patch(url, json={"status": "cancelled"}, headers=buyer_headers)
        assert invalid.status_code == 400
        assert invalid.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_request_id_header(client):
    assert client.get("/api/categories").headers["X-Request-ID"]


def test_request_id_header_is_echoed(client):
    assert client.get("/api/categories", headers={"X-Request-ID": "abc-123"}).headers["X-Request-ID"] == "abc-123"


def test_server_side_value_error_is_a_500(client, mocker):
    mocker.patch.object(CategoryService, "get_categories", side_effect=ValueError("bad row"))
    unguarded = TestClient(client.app, raise_server_exceptions=False)

    response = unguarded.get("/api/categories")

    assert response.status_code == 500
    assert response.json() == {"error": {
        "code": "INTERNAL_SERVER_ERROR",
        "message": "An internal server error occurred. Please try again later.",
    }}
