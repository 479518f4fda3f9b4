import importlib
import inspect
import pkgutil

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRouter

from mehendi_overlay.api.controllers.controller_base import ControllerBase
from mehendi_overlay.app.container import AppContainer

CONTROLLERS_PACKAGE = "mehendi_overlay.api.controllers"


class ControllerLoader:
    @staticmethod
    def custom_openapi(app: FastAPI, title: str, version: str):
        def openapi():
            if app.openapi_schema:
                return app.openapi_schema
            app.openapi_schema = get_openapi(
                title=title,
                version=version,
                routes=app.routes,
            )
            return app.openapi_schema
        return openapi

    @staticmethod
    def auto_register_controllers(app: FastAPI, package: str = CONTROLLERS_PACKAGE, container: AppContainer | None = None):
        package_module = importlib.import_module(package)

        for _, module_name, _ in pkgutil.iter_modules(package_module.__path__):
            full_module_name = f"{package}.{module_name}"
            module = importlib.import_module(full_module_name)

            for _, cls in inspect.getmembers(module, inspect.isclass):
                if issubclass(cls, ControllerBase) and cls is not ControllerBase and cls.__module__ == module.__name__:
                    instance = cls()
                    if isinstance(getattr(instance, "router", None), APIRouter):
                        app.include_router(instance.router)

            if container is not None:
                container.wire(modules=[module])
