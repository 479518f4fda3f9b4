from datetime import datetime
from typing import Dict

from mehendi_overlay.domain.health_models import HealthEntryModel, HealthReportModel, HealthStatus
from mehendi_overlay.crosscutting.config import AppSettings
from mehendi_overlay.domain.pattern_generator import PatternGenerator
from mehendi_overlay.domain.rendering import RasterSurfaceProvider


class HealthCheckService:
    def __init__(self, surface_provider: RasterSurfaceProvider, settings: AppSettings):
        self._surfaces = surface_provider
        self._settings = settings

    def check(self) -> HealthReportModel:
        overall_start = datetime.now()
        entries: Dict[str, HealthEntryModel] = {}
        self_start = datetime.now()
        entries["SELF"] = HealthEntryModel(
            data={"app": self._settings.app_name, "version": self._settings.app_version},
            description="Self check passed",
            duration=str(datetime.now() - self_start),
            exception=None,
            status=HealthStatus.HEALTHY,
            tags=["api", "critical"]
        )
        entries["RENDERING"] = self._rendering_check()

        return HealthReportModel.from_entries(entries, str(datetime.now() - overall_start))

    #region Rendering Checks
    def _rendering_check(self) -> HealthEntryModel:
        start_time: datetime = datetime.now()
        try:
            surface = self._surfaces.acquire(8, 8)
            probe = PatternGenerator(self._settings.pattern_color).generate(8, 8, "geometric")
            surface.draw_image(self._surfaces.rasterize(probe), 0, 0, 8, 8)
            surface.encode_png()
            return HealthEntryModel(
                data={"max_pixels": self._settings.max_surface_pixels},
                description="Rendering surface available",
                duration=str(datetime.now() - start_time),
                exception=None,
                status=HealthStatus.HEALTHY,
                tags=["rendering", "critical"]
            )
        except Exception as e:
            return HealthEntryModel(
                data=None,
                description="Rendering surface unavailable",
                duration=str(datetime.now() - start_time),
                exception=str(e),
                status=HealthStatus.UNHEALTHY,
                tags=["rendering", "critical"]
            )
    #endregion
