# storefront/api/__init__.py
from uuid import uuid4

from fastapi import FastAPI, Request

from storefront.api.errors import register_exception_handlers
from storefront.api.routers import addresses, admin, banners, carts, health, orders, payments, products, users
from storefront.utils.logging import add_context, clear_context


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront",
        version="1.0.0",
    )

    register_exception_handlers(app)

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Kazda linia logu z requestu dostaje request_id, metode i sciezke."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        clear_context()
        add_context(request_id=request_id, method=request.method, path=request.url.path)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(banners.router)
    app.include_router(addresses.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(payments.router)
    app.include_router(admin.router)

    return app
