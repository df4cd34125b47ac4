"""Operational endpoints: source reachability and deployment facts."""

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ensemble_forecaster.application.dtos.health_dto import (
    ApplicationInfoDTO,
    SystemHealthDTO,
)
from ensemble_forecaster.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from ensemble_forecaster.domain.entities.health import ServiceStatus
from ensemble_forecaster.main.container import AppContainer

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["System"])


@router.get(
    "/health",
    response_model=SystemHealthDTO,
    summary="Reachability of the history source",
    responses={503: {"description": "The history source is down"}},
)
@inject
async def health(
    response: Response,
    health_use_case: GetHealthStatusUseCase = Depends(
        Provide[AppContainer.get_health_status_use_case]
    ),
) -> SystemHealthDTO:
    try:
        report = await health_use_case.execute()
    except Exception as exc:
        logger.error("system.health.failed", error=str(exc), exc_info=exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Health probe could not be completed",
        ) from exc

    if report.status is ServiceStatus.DOWN:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    logger.debug("system.health.reported", status=report.status.value)
    return report


@router.get(
    "/info",
    response_model=ApplicationInfoDTO,
    summary="Build, uptime and ensemble configuration",
)
@inject
async def info(
    request: Request,
    info_use_case: GetApplicationInfoUseCase = Depends(
        Provide[AppContainer.get_application_info_use_case]
    ),
) -> ApplicationInfoDTO:
    started_at = getattr(request.app.state, "started_at", None)
    try:
        described = await info_use_case.execute(started_at)
    except Exception as exc:
        logger.error("system.info.failed", error=str(exc), exc_info=exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Application info is unavailable",
        ) from exc

    logger.debug(
        "system.info.reported",
        status=described.status.value,
        predictions_served=described.runtime.predictions_served,
    )
    return described
