"""Triage service - symptom analysis and follow-up"""

import logging
from typing import Any, Optional

from ...services.gateway_client import GatewayClient
from ...shared.envelope import ServiceResult
from ..base import GatewayBackedService
from .fallback import TriageFallback

logger = logging.getLogger(__name__)


class TriageService(GatewayBackedService):
    """Service layer for the gateway's symptoms operations"""

    gateway_service = "symptoms"

    def __init__(self, gateway: GatewayClient, fallback: TriageFallback):
        super().__init__(gateway)
        self.fallback = fallback

    async def analyze_symptoms(
        self,
        symptoms: list[str],
        patient_info: dict[str, Any],
        severity_level: Optional[str] = None,
    ) -> ServiceResult:
        payload = await self._try_gateway(
            "analyzeTriage",
            {"symptoms": symptoms, "patientInfo": patient_info, "severityLevel": severity_level},
            required=("triageId",),
        )
        if payload is not None:
            return ServiceResult.ok(
                "Triage analysis completed successfully",
                triageId=payload["triageId"],
                assessment=payload.get("assessment"),
            )
        return self.fallback.analyze_symptoms(symptoms, patient_info, severity_level)

    async def submit_follow_up(self, triage_id: str, answers: dict[str, str]) -> ServiceResult:
        payload = await self._try_gateway(
            "submitFollowUp", {"triageId": triage_id, "answers": answers}
        )
        if payload is not None:
            return ServiceResult.ok(
                "Follow-up answers submitted successfully",
                updatedAssessment=payload.get("assessment"),
            )
        return self.fallback.submit_follow_up(triage_id, answers)

    async def get_disclaimers(self) -> ServiceResult:
        payload = await self._try_gateway("getDisclaimers", {}, required=("disclaimers",))
        if payload is not None:
            return ServiceResult.ok(
                "Disclaimers retrieved successfully", disclaimers=payload["disclaimers"]
            )
        return self.fallback.get_disclaimers()

    async def get_symptom_suggestions(self, query: str, limit: int = 10) -> ServiceResult:
        payload = await self._try_gateway("getSuggestions", {"query": query, "limit": limit})
        if payload is not None:
            return ServiceResult.ok(
                "Symptom suggestions retrieved successfully",
                suggestions=payload.get("suggestions") or [],
            )
        return self.fallback.get_symptom_suggestions(query, limit)
