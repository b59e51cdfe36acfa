"""Triage router - FastAPI endpoints for symptom triage"""

import logging

from fastapi import APIRouter, Depends, Query

from ...dependencies import get_triage_service
from .schemas import FollowUpRequest, TriageRequest
from .service import TriageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Triage"])


@router.post("/triage/analyze")
async def analyze_symptoms(
    data: TriageRequest,
    service: TriageService = Depends(get_triage_service),
):
    """Analyze symptoms and return a risk assessment"""
    result = await service.analyze_symptoms(
        data.symptoms, data.patientInfo.model_dump(), data.severityLevel
    )
    return result.to_envelope()


@router.post("/triage/followup")
async def submit_follow_up(
    data: FollowUpRequest,
    service: TriageService = Depends(get_triage_service),
):
    """Submit answers to follow-up questions"""
    result = await service.submit_follow_up(data.triageId, data.answers)
    return result.to_envelope()


@router.get("/triage/disclaimers")
async def get_disclaimers(service: TriageService = Depends(get_triage_service)):
    result = await service.get_disclaimers()
    return result.to_envelope()


@router.get("/symptoms/suggestions")
async def get_symptom_suggestions(
    q: str = Query(..., min_length=1),
    service: TriageService = Depends(get_triage_service),
):
    """Autocomplete symptom names"""
    result = await service.get_symptom_suggestions(q)
    return result.to_envelope()
