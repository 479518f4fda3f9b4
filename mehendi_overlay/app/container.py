"""Dependency container wiring settings, adapters and the overlay use case."""

from __future__ import annotations

from dependency_injector import containers, providers

from mehendi_overlay.application.apply_pattern import ApplyPatternUseCase
from mehendi_overlay.application.compositor import Compositor
from mehendi_overlay.application.health_check import HealthCheckService
from mehendi_overlay.application.rate_limiter import RateLimiter, RateLimitPolicy
from mehendi_overlay.crosscutting.config import load_settings
from mehendi_overlay.crosscutting.logging_setup import get_logger, setup_logging
from mehendi_overlay.domain.detector import HandRegionDetector
from mehendi_overlay.domain.pattern_generator import PatternGenerator
from mehendi_overlay.infrastructure.image_loader import ImageSourceLoader
from mehendi_overlay.infrastructure.opencv_surface import OpenCvSurfaceProvider


class AppContainer(containers.DeclarativeContainer):
    settings = providers.Singleton(load_settings)

    #region Crosscutting
    logging = providers.Resource(
        setup_logging,
        level=settings.provided.log_level,
        log_format=settings.provided.log_format,
        app_name=settings.provided.app_name,
        app_version=settings.provided.app_version,
    )
    logger = providers.Singleton(get_logger, "mehendi_overlay")
    #endregion

    #region Infrastructure
    surface_provider = providers.Singleton(
        OpenCvSurfaceProvider,
        logger=logger,
        max_pixels=settings.provided.max_surface_pixels,
    )
    image_loader = providers.Factory(
        ImageSourceLoader,
        logger=logger,
        timeout=settings.provided.fetch_timeout,
        max_bytes=settings.provided.max_image_bytes,
    )
    #endregion

    #region Domain
    detector = providers.Factory(HandRegionDetector, settings=settings.provided.detection)
    generator = providers.Factory(PatternGenerator, color=settings.provided.pattern_color)
    compositor = providers.Factory(
        Compositor,
        surface_provider=surface_provider,
        settings=settings.provided.overlay,
    )
    #endregion

    #region Services
    apply_pattern_use_case = providers.Factory(
        ApplyPatternUseCase,
        loader=image_loader,
        surface_provider=surface_provider,
        detector=detector,
        generator=generator,
        compositor=compositor,
        logger=logger,
    )
    rate_limiter = providers.Singleton(
        RateLimiter,
        default_max=settings.provided.rate_limit_max,
        default_window_s=settings.provided.rate_limit_window,
    )
    rate_limit_policy = providers.Singleton(
        RateLimitPolicy,
        max_requests=settings.provided.rate_limit_max,
        window_s=settings.provided.rate_limit_window,
        cooldown_s=settings.provided.rate_limit_cooldown,
    )
    health_check_service = providers.Factory(
        HealthCheckService,
        surface_provider=surface_provider,
        settings=settings,
    )
    #endregion


__all__ = ["AppContainer"]
