# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the API models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - The order and payment status tables allow exactly the documented moves
# =============================================================================

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from core.models import (
    CartUpdate,
    OrderCreate,
    OrderStatus,
    PaymentStatus,
    PreferencesResponse,
    PreferencesUpdate,
    ProductCreate,
    ProductFilters,
    ProductSort,
    ProductUpdate,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
    can_transition,
    can_transition_payment,
)


# =============================================================================
# User Models
# =============================================================================

class TestUserRegister:
    """Tests for UserRegister model."""

    def test_valid_registration(self):
        # Arrange / Act
        body = UserRegister(email="alice@example.com", username="alice", password="correct-horse-42")

        # Assert
        assert body.email == "alice@example.com"
        assert body.full_name is None

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            UserRegister(email="not-an-email", username="alice", password="x")

    @pytest.mark.parametrize("username", ["ab", "has space", "semi;colon"])
    def test_invalid_username(self, username):
        with pytest.raises(ValidationError):
            UserRegister(email="a@example.com", username=username, password="x")


class TestUserLogin:
    """Tests for UserLogin model."""

    def test_identifier_accepts_email_alias(self):
        """Test that clients may send `email` instead of `identifier`."""
        body = UserLogin.model_validate({"email": "alice@example.com", "password": "pw"})
        assert body.identifier == "alice@example.com"

    def test_identifier_accepts_username_alias(self):
        body = UserLogin.model_validate({"username": "alice", "password": "pw"})
        assert body.identifier == "alice"


class TestUserResponse:
    """Tests for UserResponse model."""

    def test_password_hash_is_not_exposed(self):
        """Test that a full users row never leaks password_hash."""
        row = {
            "id": str(uuid4()),
            "email": "alice@example.com",
            "username": "alice",
            "password_hash": "$2b$12$secret",
            "reputation_score": "4.50",
        }

        dumped = UserResponse.model_validate(row).model_dump()

        assert "password_hash" not in dumped
        assert dumped["reputation_score"] == Decimal("4.50")


class TestProfileAndPreferences:
    """Tests for partial update models."""

    def test_profile_update_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ProfileUpdate(email="new@example.com")

    def test_preferences_update_rejects_history(self):
        """Test that history lists can't be written by clients."""
        with pytest.raises(ValidationError):
            PreferencesUpdate(search_history=["x"])

    def test_preferences_defaults(self):
        prefs = PreferencesResponse()
        assert prefs.theme.value == "system"
        assert prefs.language == "en"
        assert prefs.browsing_history == []


# =============================================================================
# Product Models
# =============================================================================

class TestProductCreate:
    """Tests for ProductCreate model."""

    def test_valid_product(self):
        product = ProductCreate(title="Keyboard", price="10.00", stock_quantity=5)

        assert product.price == Decimal("10.00")
        assert product.currency == "USD"
        assert product.condition.value == "new"

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(title="Keyboard", price="-1.00")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(title="Keyboard", price="1.00", stock_quantity=-1)

    def test_three_decimal_places_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(title="Keyboard", price="1.001")

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(title="", price="1.00")


class TestProductUpdate:
    """Tests for ProductUpdate model."""

    def test_only_sent_fields_are_set(self):
        update = ProductUpdate(price="12.50")
        assert update.model_dump(exclude_unset=True) == {"price": Decimal("12.50")}

    def test_seller_id_cannot_be_changed(self):
        with pytest.raises(ValidationError):
            ProductUpdate(seller_id=str(uuid4()))


class TestProductFilters:
    def test_default_sort_is_newest(self):
        assert ProductFilters().sort == ProductSort.NEWEST


# =============================================================================
# Cart and Order Models
# =============================================================================

class TestCartUpdate:
    def test_zero_quantity_allowed(self):
        """Test that 0 is accepted; the service treats it as removal."""
        assert CartUpdate(quantity=0).quantity == 0


class TestOrderCreate:
    """Tests for OrderCreate model."""

    def test_requires_items(self):
        with pytest.raises(ValidationError):
            OrderCreate(items=[])

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            OrderCreate(items=[{"product_id": str(uuid4()), "quantity": 0}])


class TestStatusMachines:
    """Tests for the order and payment transition tables."""

    @pytest.mark.parametrize("current,new", [
        (OrderStatus.PENDING, OrderStatus.PAID),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.PAID, OrderStatus.SHIPPED),
        (OrderStatus.PAID, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
    ])
    def test_allowed_order_transitions(self, current, new):
        assert can_transition(current, new)

    @pytest.mark.parametrize("current,new", [
        (OrderStatus.PENDING, OrderStatus.SHIPPED),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.PENDING),
        (OrderStatus.PAID, OrderStatus.PENDING),
    ])
    def test_rejected_order_transitions(self, current, new):
        assert not can_transition(current, new)

    def test_accepts_plain_strings(self):
        assert can_transition("pending", "paid")

    def test_payment_transitions(self):
        assert can_transition_payment(PaymentStatus.PENDING, PaymentStatus.PAID)
        assert can_transition_payment(PaymentStatus.PENDING, PaymentStatus.FAILED)
        assert can_transition_payment(PaymentStatus.PAID, PaymentStatus.REFUNDED)
        assert not can_transition_payment(PaymentStatus.FAILED, PaymentStatus.PAID)
        assert not can_transition_payment(PaymentStatus.PENDING, PaymentStatus.REFUNDED)
