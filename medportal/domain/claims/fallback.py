"""
Claims fallback
Placeholder claim, coverage and patient data served while the gateway's
ehr-rcm service is unavailable, plus locally recorded appeals
"""

import logging
import uuid
from typing import Any, Optional

from ...masking import mask_id
from ...shared.envelope import ServiceResult
from ...stores import Clock, RecordStore, utc_now
from .models import AppealRecord

logger = logging.getLogger(__name__)

INSURANCE_COMPANY = "HealthFirst Insurance"

DENIAL_REASONS = [
    {
        "code": "CO-16",
        "description": "Claim/service lacks information which is needed for adjudication",
        "category": "Missing Information",
        "actionRequired": "Submit additional documentation",
    },
    {
        "code": "CO-97",
        "description": "Payment is included in the allowance for another service/procedure",
        "category": "Bundled Service",
        "actionRequired": "Review bundling guidelines",
    },
]

APPEAL_OPTIONS = [
    "Submit corrected claim with additional documentation",
    "File formal appeal with insurance company",
    "Request peer-to-peer review with medical director",
]

PRIMARY_POLICY = {
    "company": INSURANCE_COMPANY,
    "policyNumber": "HF123456789",
    "groupNumber": "GRP001",
    "effectiveDate": "2024-01-01",
    "status": "active",
}


class ClaimsFallback:
    def __init__(self, store: RecordStore[AppealRecord], clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    def get_claim_status(
        self,
        claim_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        date_range: Optional[dict[str, Any]] = None,
    ) -> ServiceResult:
        claims = [
            {
                "claimId": claim_id or f"claim_{uuid.uuid4().hex}",
                "patientId": patient_id,
                "serviceDate": "2024-01-15",
                "providerId": "dr_smith_001",
                "providerName": "Dr. Sarah Smith",
                "serviceDescription": "Annual Physical Examination",
                "claimAmount": 250.00,
                "approvedAmount": 200.00,
                "status": "approved",
                "insuranceCompany": INSURANCE_COMPANY,
                "processedDate": "2024-01-20",
                "paymentDate": "2024-01-25",
            },
            {
                "claimId": f"claim_{uuid.uuid4().hex}",
                "patientId": patient_id,
                "serviceDate": "2024-01-10",
                "providerId": "lab_central_001",
                "providerName": "Central Medical Laboratory",
                "serviceDescription": "Blood Work Panel",
                "claimAmount": 150.00,
                "approvedAmount": 150.00,
                "status": "paid",
                "insuranceCompany": INSURANCE_COMPANY,
                "processedDate": "2024-01-12",
                "paymentDate": "2024-01-15",
            },
        ]
        if claim_id:
            claims = claims[:1]
        return ServiceResult.fallback("Mock claim status provided", claims=claims)

    def get_denial_reasons(self, claim_id: str) -> ServiceResult:
        return ServiceResult.fallback(
            "Mock denial reasons provided",
            claimId=claim_id,
            reasons=[dict(reason) for reason in DENIAL_REASONS],
            appealOptions=list(APPEAL_OPTIONS),
        )

    def submit_appeal(
        self,
        claim_id: str,
        reason: str,
        documents: Optional[list[str]] = None,
        additional_info: Optional[str] = None,
    ) -> ServiceResult:
        appeal_id = f"appeal_{uuid.uuid4().hex}"
        record = AppealRecord(
            id=appeal_id,
            claim_id=claim_id,
            reason=reason,
            tracking_number=f"TRK{uuid.uuid4().hex[:12].upper()}",
            created_at=self.clock(),
            documents=list(documents or []),
            additional_info=additional_info,
        )
        self.store.put(appeal_id, record)
        logger.info(f"📝 Fallback appeal {appeal_id} recorded for claim {claim_id}")

        return ServiceResult.fallback(
            "Claim appeal recorded",
            appealId=record.id,
            trackingNumber=record.tracking_number,
            status=record.status,
        )

    def get_patient_summary(self, patient_id: str) -> ServiceResult:
        logger.info(f"📋 Serving placeholder summary for patient {mask_id(patient_id)}")
        patient = {
            "patientId": patient_id,
            "demographics": {
                "name": "John Doe",
                "dateOfBirth": "1980-05-15",
                "gender": "male",
                "address": "123 Main St, City, State 12345",
                "phone": "+1-555-0123",
                "email": "john.doe@email.com",
            },
            "insurance": {"primary": dict(PRIMARY_POLICY)},
            "recentClaims": [
                {
                    "claimId": "claim_001",
                    "serviceDate": "2024-01-15",
                    "amount": 250.00,
                    "status": "approved",
                }
            ],
            "upcomingAppointments": [
                {
                    "appointmentId": "appt_001",
                    "providerId": "dr_smith_001",
                    "datetime": "2024-02-01T10:00:00Z",
                    "type": "follow-up",
                }
            ],
            "alerts": [
                "Annual physical due",
                "Insurance verification needed for upcoming appointment",
            ],
        }
        return ServiceResult.fallback("Mock patient summary provided", patient=patient)

    def get_insurance_info(self, patient_id: str) -> ServiceResult:
        insurance = {
            "primary": {
                **PRIMARY_POLICY,
                "planName": "Premium Health Plan",
                "expirationDate": "2024-12-31",
                "copayAmount": 25.00,
                "deductible": 1500.00,
                "deductibleMet": 250.00,
                "outOfPocketMax": 5000.00,
                "outOfPocketMet": 275.00,
            },
            "secondary": None,
            "eligibilityLastVerified": self.clock().isoformat(),
            "benefits": {
                "preventiveCare": "100% covered",
                "primaryCare": "$25 copay",
                "specialistCare": "$50 copay",
                "emergencyRoom": "$250 copay",
                "prescription": "Formulary dependent",
            },
        }
        return ServiceResult.fallback(
            "Mock insurance information provided", patientId=patient_id, insurance=insurance
        )
