"""Claims service - claim status, appeals and patient records"""

import logging
from typing import Any, Optional

from ...services.gateway_client import GatewayClient
from ...shared.envelope import ServiceResult
from ..base import GatewayBackedService
from .fallback import ClaimsFallback

logger = logging.getLogger(__name__)


class ClaimsService(GatewayBackedService):
    """Service layer for the gateway's ehr-rcm operations"""

    gateway_service = "ehr-rcm"

    def __init__(self, gateway: GatewayClient, fallback: ClaimsFallback):
        super().__init__(gateway)
        self.fallback = fallback

    async def get_claim_status(
        self,
        claim_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        date_range: Optional[dict[str, Any]] = None,
    ) -> ServiceResult:
        payload = await self._try_gateway(
            "getClaimStatus",
            {"claimId": claim_id, "patientId": patient_id, "dateRange": date_range},
        )
        if payload is not None:
            return ServiceResult.ok(
                "Claim status retrieved successfully", claims=payload.get("claims") or []
            )
        return self.fallback.get_claim_status(claim_id, patient_id, date_range)

    async def get_denial_reasons(self, claim_id: str) -> ServiceResult:
        payload = await self._try_gateway("getDenialReasons", {"claimId": claim_id})
        if payload is not None:
            return ServiceResult.ok(
                "Denial reasons retrieved successfully",
                claimId=claim_id,
                reasons=payload.get("reasons") or [],
                appealOptions=payload.get("appealOptions") or [],
            )
        return self.fallback.get_denial_reasons(claim_id)

    async def submit_appeal(
        self,
        claim_id: str,
        reason: str,
        documents: Optional[list[str]] = None,
        additional_info: Optional[str] = None,
    ) -> ServiceResult:
        payload = await self._try_gateway(
            "submitAppeal",
            {
                "claimId": claim_id,
                "reason": reason,
                "documents": documents or [],
                "additionalInfo": additional_info,
            },
            required=("appealId",),
        )
        if payload is not None:
            return ServiceResult.ok(
                "Claim appeal submitted successfully",
                appealId=payload["appealId"],
                trackingNumber=payload.get("trackingNumber"),
                status=payload.get("status", "submitted"),
            )
        return self.fallback.submit_appeal(claim_id, reason, documents, additional_info)

    async def get_patient_summary(self, patient_id: str) -> ServiceResult:
        payload = await self._try_gateway(
            "getPatientSummary",
            {"patientId": patient_id, "includeClaims": True, "includeAppointments": True},
            required=("patient",),
        )
        if payload is not None:
            return ServiceResult.ok(
                "Patient summary retrieved successfully", patient=payload["patient"]
            )
        return self.fallback.get_patient_summary(patient_id)

    async def get_insurance_info(self, patient_id: str) -> ServiceResult:
        payload = await self._try_gateway(
            "getInsuranceInfo", {"patientId": patient_id}, required=("insurance",)
        )
        if payload is not None:
            return ServiceResult.ok(
                "Insurance information retrieved successfully",
                patientId=patient_id,
                insurance=payload["insurance"],
            )
        return self.fallback.get_insurance_info(patient_id)
