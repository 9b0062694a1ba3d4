# sleep_nudge/api/routes/sleep_routes.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from typing import Dict, List, Optional

from sleep_nudge.core.errors import SleepDataError
from sleep_nudge.core.models.data_models import (
    CsvImportRequest,
    ImportSummary,
    NudgeKind,
    NudgeMessage,
    RawNight,
    RegularityAssessment,
)
from sleep_nudge.core.services.sleep_service import SleepRegularityService


# Dependency
def get_sleep_service(request: Request) -> SleepRegularityService:
    return request.app.state.sleep_service


router = APIRouter(
    prefix="/sleep",
    tags=["Sleep"],
    responses={404: {"description": "Not found"}}
)


@router.get("/nights", response_model=List[RawNight])
def list_nights(service: SleepRegularityService = Depends(get_sleep_service)):
    """List every stored night"""
    return service.repository.read_all()


@router.post("/nights", response_model=RegularityAssessment, status_code=201)
def log_night(night: RawNight, service: SleepRegularityService = Depends(get_sleep_service)):
    """Log a night (replacing any night with the same date) and get the new assessment"""
    try:
        return service.log_night(night)
    except SleepDataError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/nights", response_model=Dict)
def clear_nights(service: SleepRegularityService = Depends(get_sleep_service)):
    """Delete every stored night"""
    service.clear()
    return {"status": "success", "message": "All nights cleared"}


@router.post("/nights/on-track", response_model=RegularityAssessment, status_code=201)
def log_on_track_night(service: SleepRegularityService = Depends(get_sleep_service)):
    """Log a night centred on the current baseline"""
    return service.log_on_track_night()


@router.post("/nights/late", response_model=RegularityAssessment, status_code=201)
def log_late_night(offset_min: Optional[int] = None,
                   service: SleepRegularityService = Depends(get_sleep_service)):
    """Log a night later than the current baseline"""
    return service.log_late_night(offset_min=offset_min)


@router.post("/seed", response_model=RegularityAssessment)
def seed_demo_week(service: SleepRegularityService = Depends(get_sleep_service)):
    """Replace the store with a demo week of progressively later nights"""
    return service.seed_demo_week()


@router.post("/import", response_model=ImportSummary)
def import_csv(payload: CsvImportRequest, service: SleepRegularityService = Depends(get_sleep_service)):
    """Replace the store with nights parsed from CSV text"""
    try:
        return service.import_csv(payload.csv)
    except SleepDataError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/export", response_class=PlainTextResponse)
def export_csv(service: SleepRegularityService = Depends(get_sleep_service)):
    """Export stored nights as CSV"""
    return PlainTextResponse(service.export_csv(), media_type="text/csv")


@router.get("/stats", response_model=RegularityAssessment)
def get_stats(service: SleepRegularityService = Depends(get_sleep_service)):
    """Baseline, drift and risk level for the stored nights"""
    return service.assess()


@router.get("/history", response_model=List[Dict])
def get_history(limit: Optional[int] = Query(None, ge=0), service: SleepRegularityService = Depends(get_sleep_service)):
    """Recent nights, most recent first"""
    return service.history(limit).to_dict(orient="records")


@router.get("/nudge", response_model=NudgeMessage)
def get_nudge(kind: NudgeKind = NudgeKind.IMMEDIATE,
              service: SleepRegularityService = Depends(get_sleep_service)):
    """Nudge the notification layer would display right now"""
    return service.nudge(kind)
