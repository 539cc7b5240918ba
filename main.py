from contextlib import asynccontextmanager

from fastapi import FastAPI

from notification_service.infrastructure.database import engine, initialize_database
from notification_service.infrastructure.identity import IdentityClient
from notification_service.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepara la base de datos y el cliente de identidad; los libera al cerrar."""

    initialize_database()
    try:
        async with IdentityClient.from_settings() as identity_client:
            app.state.identity_client = identity_client
            yield
    finally:
        app.state.identity_client = None
        engine.dispose()


def create_app() -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    app = FastAPI(title="Notification Service", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()
