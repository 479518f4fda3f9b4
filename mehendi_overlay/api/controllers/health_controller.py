from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from mehendi_overlay.api.controllers.controller_base import ControllerBase
from mehendi_overlay.app.container import AppContainer
from mehendi_overlay.application.health_check import HealthCheckService
from mehendi_overlay.domain.health_models import HealthReportModel


class HealthController(ControllerBase):
    def __init__(self):
        super().__init__()

        @self.router.get("", response_model=HealthReportModel)
        @inject
        def root(service: HealthCheckService = Depends(Provide[AppContainer.health_check_service])) -> HealthReportModel:
            return service.check()
