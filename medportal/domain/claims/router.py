"""Claims router - FastAPI endpoints for claims and patient records"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ...dependencies import get_claims_service
from ...shared.validators import validate_iso_date
from .schemas import ClaimAppealRequest
from .service import ClaimsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Claims"])


@router.get("/claims/status")
async def get_claim_status(
    claimId: Optional[str] = Query(None),
    patientId: Optional[str] = Query(None),
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    service: ClaimsService = Depends(get_claims_service),
):
    """Get claim status by claim or patient"""
    date_range = None
    if startDate and endDate:
        try:
            date_range = {"start": validate_iso_date(startDate), "end": validate_iso_date(endDate)}
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    result = await service.get_claim_status(claimId or None, patientId or None, date_range)
    return result.to_envelope()


@router.get("/claims/denial-reasons/{claim_id}")
async def get_denial_reasons(
    claim_id: str,
    service: ClaimsService = Depends(get_claims_service),
):
    result = await service.get_denial_reasons(claim_id)
    return result.to_envelope()


@router.post("/claims/appeal")
async def submit_appeal(
    data: ClaimAppealRequest,
    service: ClaimsService = Depends(get_claims_service),
):
    """Appeal a denied claim"""
    result = await service.submit_appeal(
        data.claimId, data.reason, data.documents, data.additionalInfo
    )
    return result.to_envelope()


@router.get("/patient/summary/{patient_id}")
async def get_patient_summary(
    patient_id: str,
    service: ClaimsService = Depends(get_claims_service),
):
    result = await service.get_patient_summary(patient_id)
    return result.to_envelope()


@router.get("/patient/insurance/{patient_id}")
async def get_insurance_info(
    patient_id: str,
    service: ClaimsService = Depends(get_claims_service),
):
    result = await service.get_insurance_info(patient_id)
    return result.to_envelope()
