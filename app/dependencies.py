# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The services are built once in the app lifespan from the connected
# adapters and kept on app.state; nothing here is a module-level global.
# =============================================================================

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from core.services import (
    AuthService,
    CartService,
    NotificationService,
    OrderService,
    ProductService,
    SearchService,
    UserService,
)
from lib.embeddings import EmbeddingClient
from lib.redis_client import RedisStore
from lib.supabase_client import SupabaseStore


@dataclass(frozen=True)
class Services:
    """Every domain service, wired to the same adapters."""
    auth: AuthService
    users: UserService
    products: ProductService
    search: SearchService
    cart: CartService
    orders: OrderService
    notifications: NotificationService


def build_services(
    settings: Settings,
    store: SupabaseStore,
    cache: RedisStore,
    embeddings: EmbeddingClient,
) -> Services:
    """Construct the service graph from connected adapters."""
    notifications = NotificationService(store)
    users = UserService(store)
    return Services(
        auth=AuthService(store, cache, settings),
        users=users,
        products=ProductService(store, cache, settings, notifications),
        search=SearchService(store, embeddings, users, settings),
        cart=CartService(store),
        orders=OrderService(store, notifications),
        notifications=notifications,
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_auth_service(request: Request) -> AuthService:
    return get_services(request).auth


def get_user_service(request: Request) -> UserService:
    return get_services(request).users


def get_product_service(request: Request) -> ProductService:
    return get_services(request).products


def get_search_service(request: Request) -> SearchService:
    return get_services(request).search


def get_cart_service(request: Request) -> CartService:
    return get_services(request).cart


def get_order_service(request: Request) -> OrderService:
    return get_services(request).orders


def get_notification_service(request: Request) -> NotificationService:
    return get_services(request).notifications


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
CartServiceDep = Annotated[CartService, Depends(get_cart_service)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
