import asyncio

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, HTTPException, Request, status

from mehendi_overlay.api.controllers.controller_base import ControllerBase
from mehendi_overlay.api.models.overlay_models import (
    ApplyPatternRequestModel,
    ApplyPatternResponseModel,
    BoundingBoxModel,
)
from mehendi_overlay.app.container import AppContainer
from mehendi_overlay.application.apply_pattern import ApplyPatternRequest, ApplyPatternUseCase
from mehendi_overlay.application.rate_limiter import RateLimiter, RateLimitPolicy
from mehendi_overlay.domain.entities import PatternStyle
from mehendi_overlay.shared.errors import ImageDecodeError, OverlayError, RenderingUnavailable

_ERROR_STATUS = {
    ImageDecodeError: status.HTTP_400_BAD_REQUEST,
    RenderingUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class OverlayController(ControllerBase):
    """REST endpoints exposing the henna pattern overlay pipeline."""

    def __init__(self) -> None:
        super().__init__()

        @self.router.post(
            "/apply",
            response_model=ApplyPatternResponseModel,
            summary="Overlay a procedural henna pattern on a hand photo",
            responses=ControllerBase.error_responses(400, 429, 500, 503),
        )
        @inject
        async def apply(
            payload: ApplyPatternRequestModel,
            request: Request,
            use_case: ApplyPatternUseCase = Depends(Provide[AppContainer.apply_pattern_use_case]),
            limiter: RateLimiter = Depends(Provide[AppContainer.rate_limiter]),
            policy: RateLimitPolicy = Depends(Provide[AppContainer.rate_limit_policy]),
            logger=Depends(Provide[AppContainer.logger]),
        ) -> ApplyPatternResponseModel:
            client = request.client.host if request.client else "anonymous"
            decision = limiter.check_policy(f"overlay:{client}", policy)
            if not decision.allowed:
                logger.warning("api.rate_limited", client=client, retry_after=decision.retry_after)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail="Too many overlay requests, please try again later.",
                    headers={"Retry-After": str(decision.retry_after or 1)},
                )

            dto = ApplyPatternRequest(image_source=payload.image_source, style_name=payload.style_name)
            loop = asyncio.get_running_loop()
            try:
                response = await loop.run_in_executor(None, use_case.execute, dto)
            except OverlayError as exc:
                raise HTTPException(
                    status_code=_ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR),
                    detail=exc.to_dict(),
                ) from exc

            return ApplyPatternResponseModel(
                image=response.data_uri,
                width=response.image.width,
                height=response.image.height,
                style=response.style,
                bounding_box=BoundingBoxModel.from_entity(response.bounding_box),
            )

        @self.router.get(
            "/styles",
            response_model=list[PatternStyle],
            summary="List the pattern styles the generator knows",
        )
        async def styles() -> list[PatternStyle]:
            return list(PatternStyle)
