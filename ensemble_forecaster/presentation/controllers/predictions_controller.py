"""
Presentation Layer - Forecast Controller

Exposes endpoints to forecast the next label of a history source, replay
the ensemble over its recent past and report realised outcomes.
"""

from typing import Optional

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ensemble_forecaster.application.dtos.prediction_dto import (
    BacktestResponseDTO,
    HistoryResponseDTO,
    PredictionResponseDTO,
    UpdateActualRequestDTO,
    UpdateActualResponseDTO,
)
from ensemble_forecaster.application.use_cases.forecast_use_cases import (
    GeneratePredictionUseCase,
    RunBacktestUseCase,
)
from ensemble_forecaster.application.use_cases.prediction_history_use_cases import (
    GetPredictionHistoryUseCase,
    RecordActualOutcomeUseCase,
)
from ensemble_forecaster.domain.entities.errors import (
    HistorySourceError,
    InsufficientDataError,
    PredictionHistoryEmptyError,
)
from ensemble_forecaster.main.container import AppContainer

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/forecast", tags=["Forecast"])

SOURCE_QUERY = Query(
    default=None,
    description="URL of the history feed; the configured source when omitted",
)


@router.get(
    "/predict",
    response_model=PredictionResponseDTO,
    summary="Forecast the next label of a history source",
    description="""
    Fetch the full event history, tune the ensemble weights on it and
    forecast the label of the next event. Sequences shorter than the
    minimum history fall back to the observed label frequency.
    """,
)
@inject
async def predict(
    src: Optional[str] = SOURCE_QUERY,
    prediction_use_case: GeneratePredictionUseCase = Depends(
        Provide[AppContainer.generate_prediction_use_case]
    ),
) -> PredictionResponseDTO:
    try:
        return await prediction_use_case.execute(src)
    except HistorySourceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)
    except Exception as exc:  # pragma: no cover
        logger.error(
            "prediction.unexpected_error", src=src, error=str(exc), exc_info=exc
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/premium",
    response_model=PredictionResponseDTO,
    summary="Forecast only when enough history is available",
)
@inject
async def premium_predict(
    src: Optional[str] = SOURCE_QUERY,
    min_records: int = Query(
        default=40, ge=1, description="Minimum number of usable events required"
    ),
    prediction_use_case: GeneratePredictionUseCase = Depends(
        Provide[AppContainer.generate_prediction_use_case]
    ),
) -> PredictionResponseDTO:
    try:
        return await prediction_use_case.execute(src, min_records=min_records)
    except InsufficientDataError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    except HistorySourceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)
    except Exception as exc:  # pragma: no cover
        logger.error(
            "prediction.premium_unexpected_error", src=src, error=str(exc), exc_info=exc
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/backtest",
    response_model=BacktestResponseDTO,
    summary="Walk-forward accuracy of the tuned ensemble",
)
@inject
async def backtest(
    src: Optional[str] = SOURCE_QUERY,
    window: Optional[int] = Query(
        default=None, ge=1, description="Trailing window to replay"
    ),
    backtest_use_case: RunBacktestUseCase = Depends(
        Provide[AppContainer.run_backtest_use_case]
    ),
) -> BacktestResponseDTO:
    try:
        return await backtest_use_case.execute(src, window)
    except HistorySourceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)
    except Exception as exc:  # pragma: no cover
        logger.error("backtest.unexpected_error", src=src, error=str(exc), exc_info=exc)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/history",
    response_model=HistoryResponseDTO,
    summary="Recently served predictions",
)
@inject
async def get_prediction_history(
    limit: int = Query(
        default=50,
        ge=1,
        le=500,
        description="Maximum number of prediction records to return",
    ),
    history_use_case: GetPredictionHistoryUseCase = Depends(
        Provide[AppContainer.get_prediction_history_use_case]
    ),
) -> HistoryResponseDTO:
    return await history_use_case.execute(limit)


@router.post(
    "/update-actual",
    response_model=UpdateActualResponseDTO,
    summary="Report the realised label of the latest prediction",
)
@inject
async def update_actual(
    payload: UpdateActualRequestDTO,
    record_use_case: RecordActualOutcomeUseCase = Depends(
        Provide[AppContainer.record_actual_outcome_use_case]
    ),
) -> UpdateActualResponseDTO:
    try:
        return await record_use_case.execute(payload.actual)
    except PredictionHistoryEmptyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
