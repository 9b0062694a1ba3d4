# sleep_nudge/api/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sleep_nudge import __version__
from sleep_nudge.api.routes import sleep_routes
from sleep_nudge.config.config_manager import ConfigManager
from sleep_nudge.core.services.sleep_service import SleepRegularityService


def create_app(service=None, config_path=None):
    """Build the API around its own service and night store"""
    app = FastAPI(
        title="Sleep Regularity Nudge API",
        description="API for tracking sleep timing regularity and deciding when to nudge",
        version=__version__
    )

    # Enable CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # For development - restrict this in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if service is None:
        service = SleepRegularityService.from_config_manager(ConfigManager(config_path))
    app.state.sleep_service = service

    # Include routers
    app.include_router(sleep_routes.router)

    @app.get("/")
    async def root():
        return {
            "message": "Welcome to the Sleep Regularity Nudge API",
            "version": __version__,
            "storage": service.repository.storage_kind(),
            "documentation": "/docs"
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
