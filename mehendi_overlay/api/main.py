from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mehendi_overlay.api.controller_loader import ControllerLoader
from mehendi_overlay.app.container import AppContainer


def create_app(container: AppContainer | None = None) -> FastAPI:
    if container is None:
        container = AppContainer()
        container.logging()
    settings = container.settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url=None,
        openapi_url=f"/docs/v{settings.app_version}/openapi.json",
    )
    app.container = container

    ControllerLoader.auto_register_controllers(app=app, container=container)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.openapi = ControllerLoader.custom_openapi(app, settings.app_name, settings.app_version)
    return app
