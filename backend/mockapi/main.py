from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mockapi.api.health import router as health_router
from mockapi.api.routes_playground import router as playground_router
from mockapi.config import settings
from mockapi.services.mock_api_service import MockApiService


def create_app(mock_api: Optional[MockApiService] = None) -> FastAPI:
    """
    Build the playground app around one engine instance.
    Tests pass their own instance (zero latency, fake clock).
    """
    app = FastAPI(title="Mock API Lab", version="0.1.0")
    app.state.mock_api = mock_api or MockApiService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="/api", tags=["health"])

    app.include_router(playground_router)

    return app


app = create_app()
