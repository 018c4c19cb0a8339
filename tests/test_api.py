# =============================================================================
# tests/test_api.py - End-to-End API Tests
# =============================================================================
# Drives the HTTP surface the way a client would: alice sells, bob buys.
# Money fields serialize as strings with two decimals.
# =============================================================================

import pytest

PREFIX = "/api/v1"


@pytest.fixture
def alice(register_and_login):
    return register_and_login("alice")


@pytest.fixture
def bob(register_and_login):
    return register_and_login("bob")


@pytest.fixture
def keyboard(client, alice):
    _, headers = alice
    response = client.post(f"{PREFIX}/products", headers=headers, json={
        "title": "Mechanical keyboard",
        "description": "Tactile switches, full size",
        "price": "10.00",
        "stock_quantity": 5,
        "tags": ["keyboard"],
    })
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthFlow:
    """Tests for register, login, refresh and logout over HTTP."""

    def test_register_hides_password_hash(self, client):
        response = client.post(f"{PREFIX}/auth/register", json={
            "email": "Carol@Example.com",
            "username": "carol",
            "password": "correct-horse-42",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "carol@example.com"
        assert "password_hash" not in body
        assert "password" not in body

    def test_duplicate_registration(self, client, alice):
        response = client.post(f"{PREFIX}/auth/register", json={
            "email": "alice@example.com",
            "username": "someone",
            "password": "correct-horse-42",
        })

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_EMAIL"

    def test_weak_password(self, client):
        response = client.post(f"{PREFIX}/auth/register", json={
            "email": "dave@example.com",
            "username": "dave",
            "password": "password",
        })

        assert response.status_code == 400
        assert response.json()["code"] == "WEAK_PASSWORD"

    def test_bad_credentials(self, client, alice):
        response = client.post(f"{PREFIX}/auth/login", json={"identifier": "alice", "password": "nope-nope-1"})

        assert response.status_code == 401

    def test_refresh_then_logout(self, client, alice):
        # Arrange
        login = client.post(f"{PREFIX}/auth/login", json={"email": "alice@example.com", "password": "correct-horse-42"})
        refresh_token = login.json()["refresh_token"]

        # Act
        refreshed = client.post(f"{PREFIX}/auth/refresh", json={"refresh_token": refresh_token})
        logout = client.post(f"{PREFIX}/auth/logout", json={"refresh_token": refresh_token})
        after = client.post(f"{PREFIX}/auth/refresh", json={"refresh_token": refresh_token})

        # Assert
        assert refreshed.status_code == 200
        headers = {"Authorization": f"Bearer {refreshed.json()['access_token']}"}
        assert client.get(f"{PREFIX}/users/profile", headers=headers).status_code == 200
        assert logout.status_code == 204
        assert after.status_code == 401


class TestProfile:
    def test_profile_and_preferences(self, client, alice):
        user, headers = alice

        profile = client.put(f"{PREFIX}/users/profile", headers=headers, json={"full_name": "Alice A"})
        prefs = client.put(f"{PREFIX}/users/preferences", headers=headers, json={"theme": "dark"})

        assert profile.status_code == 200
        assert profile.json()["full_name"] == "Alice A"
        assert prefs.json()["theme"] == "dark"
        assert prefs.json()["language"] == "en"

    def test_unknown_profile_field_rejected(self, client, alice):
        _, headers = alice

        response = client.put(f"{PREFIX}/users/profile", headers=headers, json={"email": "x@example.com"})

        assert response.status_code == 400


class TestCatalog:
    """Tests for product endpoints."""

    def test_create_and_read(self, client, alice, keyboard):
        user, _ = alice

        response = client.get(f"{PREFIX}/products/{keyboard['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == "10.00"
        assert body["seller_id"] == user["id"]

    def test_list_with_filters(self, client, keyboard):
        response = client.get(f"{PREFIX}/products", params={"min_price": "5", "max_price": "20", "sort": "price_asc"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["products"][0]["id"] == keyboard["id"]

    def test_list_without_parameters(self, client, keyboard):
        response = client.get(f"{PREFIX}/products")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["limit"] == 20
        assert body["offset"] == 0
        assert body["products"][0]["id"] == keyboard["id"]

    def test_list_by_seller_and_condition(self, client, alice, bob, keyboard):
        user, _ = alice
        other, _ = bob

        own = client.get(f"{PREFIX}/products", params={"seller_id": user["id"], "condition": "new"})
        none = client.get(f"{PREFIX}/products", params={"seller_id": other["id"]})

        assert own.json()["total"] == 1
        assert none.json()["total"] == 0

    def test_list_reversed_price_range(self, client, keyboard):
        response = client.get(f"{PREFIX}/products", params={"min_price": "20", "max_price": "5"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_only_seller_can_update(self, client, bob, keyboard):
        _, headers = bob

        response = client.put(f"{PREFIX}/products/{keyboard['id']}", headers=headers, json={"price": "1.00"})

        assert response.status_code == 403

    def test_delete_hides_product(self, client, alice, keyboard):
        _, headers = alice

        deleted = client.delete(f"{PREFIX}/products/{keyboard['id']}", headers=headers)

        assert deleted.status_code == 204
        assert client.get(f"{PREFIX}/products/{keyboard['id']}").status_code == 404

    def test_embedding_written_after_create(self, client, store, keyboard):
        assert keyboard["id"] in store.embeddings

    def test_view_recorded_for_logged_in_user(self, client, bob, keyboard):
        _, headers = bob

        client.get(f"{PREFIX}/products/{keyboard['id']}", headers=headers)
        prefs = client.get(f"{PREFIX}/users/preferences", headers=headers).json()

        assert prefs["browsing_history"][0]["product_id"] == keyboard["id"]


class TestCartEndpoints:
    def test_cart_and_wishlist(self, client, bob, keyboard):
        _, headers = bob

        added = client.post(f"{PREFIX}/cart", headers=headers, json={"product_id": keyboard["id"], "quantity": 2})
        updated = client.put(f"{PREFIX}/cart/{keyboard['id']}", headers=headers, json={"quantity": 4})
        wished = client.post(f"{PREFIX}/wishlist/{keyboard['id']}", headers=headers)
        removed = client.delete(f"{PREFIX}/cart/{keyboard['id']}", headers=headers)

        assert added.status_code == 201
        assert added.json()["subtotal"] == "20.00"
        assert updated.json()["total"] == "40.00"
        assert wished.status_code == 201
        assert len(wished.json()["items"]) == 1
        assert removed.status_code == 204
        assert client.get(f"{PREFIX}/cart", headers=headers).json()["items"] == []


class TestMarketplaceScenario:
    """Full purchase: list, order, pay, ship, deliver, review."""

    def test_purchase_flow(self, client, store, alice, bob, keyboard):
        alice_user, alice_headers = alice
        _, bob_headers = bob
        product_id = keyboard["id"]

        # Bob fills his cart and orders 3 of 5
        client.post(f"{PREFIX}/cart", headers=bob_headers, json={"product_id": product_id, "quantity": 3})
        order = client.post(f"{PREFIX}/orders", headers=bob_headers, json={
            "items": [{"product_id": product_id, "quantity": 3}],
            "shipping_address": {"line1": "1 Main St"},
        })
        assert order.status_code == 201, order.text
        order = order.json()
        assert order["total_amount"] == "30.00"
        assert order["status"] == "pending"
        assert client.get(f"{PREFIX}/products/{product_id}").json()["stock_quantity"] == 2
        assert client.get(f"{PREFIX}/cart", headers=bob_headers).json()["items"] == []

        # A second order for 3 more fails and changes nothing
        again = client.post(f"{PREFIX}/orders", headers=bob_headers, json={
            "items": [{"product_id": product_id, "quantity": 3}],
        })
        assert again.status_code == 409
        assert again.json()["code"] == "INSUFFICIENT_STOCK"
        assert client.get(f"{PREFIX}/products/{product_id}").json()["stock_quantity"] == 2

        # Alice can't ship before payment
        early = client.put(f"{PREFIX}/orders/{order['id']}/status", headers=alice_headers, json={"status": "shipped"})
        assert early.status_code == 409
        assert early.json()["code"] == "INVALID_TRANSITION"

        # Bob pays; Alice ships and delivers
        paid = client.post(f"{PREFIX}/orders/{order['id']}/payment", headers=bob_headers, json={
            "payment_method": "card",
            "transaction_id": "tx-42",
        })
        assert paid.status_code == 200
        assert paid.json()["payment_status"] == "paid"
        assert paid.json()["escrow_amount"] == "30.00"

        for status in ("shipped", "delivered"):
            moved = client.put(f"{PREFIX}/orders/{order['id']}/status", headers=alice_headers, json={"status": status})
            assert moved.status_code == 200, moved.text
            assert moved.json()["status"] == status

        # Both sides see the order
        assert client.get(f"{PREFIX}/orders", headers=bob_headers).json()["total"] == 1
        assert client.get(f"{PREFIX}/orders", headers=alice_headers, params={"role": "seller"}).json()["total"] == 1
        assert client.get(f"{PREFIX}/orders", headers=alice_headers).json()["total"] == 0

        # Bob reviews: verified purchase, seller reputation follows
        review = client.post(f"{PREFIX}/products/{product_id}/reviews", headers=bob_headers, json={
            "rating": 5,
            "comment": "Great keys",
        })
        assert review.status_code == 201
        assert review.json()["is_verified_purchase"] is True
        duplicate = client.post(f"{PREFIX}/products/{product_id}/reviews", headers=bob_headers, json={"rating": 4})
        assert duplicate.status_code == 409
        assert duplicate.json()["code"] == "DUPLICATE_REVIEW"
        assert client.get(f"{PREFIX}/users/profile", headers=alice_headers).json()["reputation_score"] == "5.00"

        # Alice was told about each step
        inbox = client.get(f"{PREFIX}/notifications", headers=alice_headers).json()
        types = {n["type"] for n in inbox["notifications"]}
        assert {"order_placed", "payment", "review"} <= types
        assert inbox["unread"] == inbox["total"]

        read_all = client.put(f"{PREFIX}/notifications/read-all", headers=alice_headers)
        assert read_all.status_code == 200
        assert client.get(f"{PREFIX}/notifications", headers=alice_headers).json()["unread"] == 0

    def test_buyer_cancel_restocks(self, client, bob, keyboard):
        _, headers = bob
        order = client.post(f"{PREFIX}/orders", headers=headers, json={
            "items": [{"product_id": keyboard["id"], "quantity": 4}],
        }).json()

        cancelled = client.put(f"{PREFIX}/orders/{order['id']}/status", headers=headers, json={"status": "cancelled"})

        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"
        assert client.get(f"{PREFIX}/products/{keyboard['id']}").json()["stock_quantity"] == 5

    def test_stranger_cannot_see_order(self, client, register_and_login, bob, keyboard):
        _, bob_headers = bob
        _, eve_headers = register_and_login("eve")
        order = client.post(f"{PREFIX}/orders", headers=bob_headers, json={
            "items": [{"product_id": keyboard["id"], "quantity": 1}],
        }).json()

        response = client.get(f"{PREFIX}/orders/{order['id']}", headers=eve_headers)

        assert response.status_code == 403


class TestSearchEndpoints:
    def test_keyword_search(self, client, bob, keyboard):
        _, headers = bob

        response = client.get(f"{PREFIX}/search", headers=headers, params={"q": "keyboard"})

        assert response.status_code == 200
        body = response.json()
        assert body["mode"] == "keyword"
        assert body["results"][0]["id"] == keyboard["id"]

    def test_semantic_search(self, client, bob, keyboard):
        _, headers = bob

        response = client.post(f"{PREFIX}/search/semantic", headers=headers, json={"query": "mechanical keyboard"})

        assert response.status_code == 200
        body = response.json()
        assert body["mode"] == "semantic"
        assert body["results"][0]["id"] == keyboard["id"]
        assert body["results"][0]["score"] > 0

    def test_semantic_search_falls_back(self, client, embeddings, bob, keyboard):
        _, headers = bob
        embeddings.fail = True

        response = client.post(f"{PREFIX}/search/semantic", headers=headers, json={"query": "keyboard"})

        assert response.json()["mode"] == "keyword"

    def test_search_requires_auth(self, client):
        assert client.get(f"{PREFIX}/search", params={"q": "keyboard"}).status_code == 401
