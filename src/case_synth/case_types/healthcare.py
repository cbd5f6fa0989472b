"""Healthcare payer case types: claims, pre-authorizations and claim disputes.

These are created in batches and need no caller input; short descriptions
are built from the generated fields. Patients are picked at random from
``sn_hcls_patient``; with no patients on file the configured default patient
(empty by default) is used and the name falls back to ``Unknown Patient``.
"""

from __future__ import annotations

from case_synth.case_types.common import CLAIM_REVIEW, CLAIM_SUMMARY, PHYSICIAN_NAMES, PROCEDURES
from case_synth.case_types.registry import AttachmentSpec, CaseTypeSchema
from case_synth.fields.specs import (
    ComputedDate,
    ConfigValue,
    Constant,
    FieldRef,
    GeneratedText,
    NextSequenceNumber,
    RandomChoice,
    RandomNumericRange,
    RandomPatternString,
    RelatedField,
    RelatedRecordLookup,
    Template,
)

PATIENT_COLLECTION = "sn_hcls_patient"
PRE_AUTH_COLLECTION = "sn_hcls_pre_auth_header"

DIAGNOSIS_CODES = ("E11.9", "I10", "M54.5", "J45.909", "K21.9", "M17.11")
PROCEDURE_CODES = ("99213", "99214", "27447", "29881", "93458", "22612")
DENIAL_CODES = ("CO 16", "PR 204", "OA 18", "CO 50")


def _patient() -> RelatedRecordLookup:
    return RelatedRecordLookup(PATIENT_COLLECTION, fallback=ConfigValue("default_patient"))


def _patient_name(source_field: str) -> RelatedField:
    return RelatedField(source_field, PATIENT_COLLECTION, "name", default="Unknown Patient")


HEALTHCARE_CLAIM = CaseTypeSchema(
    id="healthcare_claim",
    display_name="Healthcare Claim",
    target_collection="sn_hcls_claim_header",
    requires_short_description=False,
    allows_batch=True,
    requester_field="patient",
    agent_field="assigned_to",
    field_plan={
        "number": RandomPatternString("CLM", 8),
        "patient": _patient(),
        "patient_name": _patient_name("patient"),
        "claim_type": RandomChoice(["professional", "institutional", "dental", "pharmacy"]),
        "provider_name": RandomChoice(PHYSICIAN_NAMES),
        "diagnosis_code": RandomChoice(DIAGNOSIS_CODES),
        "procedure_code": RandomChoice(PROCEDURE_CODES),
        "service_date": ComputedDate(-14),
        "submitted_date": ComputedDate(-7),
        "total_charge": RandomNumericRange(150, 25000, 2),
        "allowed_amount": RandomNumericRange(0, FieldRef("total_charge"), 2),
        "paid_amount": RandomNumericRange(0, FieldRef("allowed_amount"), 2),
        "status": RandomChoice(["submitted", "in_review", "approved", "denied", "paid"]),
        "state": Constant(1),
        "assigned_to": ConfigValue("agent_user"),
        "opened_by": ConfigValue("agent_user"),
        "short_description": Template("Healthcare claim {number} for {patient_name}"),
        "description": GeneratedText(
            "Write a two-sentence summary of a healthcare claim for procedure {procedure_code} "
            "(diagnosis {diagnosis_code}) billed by {provider_name} for ${total_charge}."
        ),
    },
    annotation_plan=CLAIM_REVIEW,
    attachment=CLAIM_SUMMARY,
)

PRE_AUTHORIZATION = CaseTypeSchema(
    id="pre_authorization",
    display_name="Pre-Authorization",
    target_collection=PRE_AUTH_COLLECTION,
    requires_short_description=False,
    allows_batch=True,
    requester_field="patient",
    agent_field="assigned_to",
    field_plan={
        "number": RandomPatternString("PA", 7),
        "patient": _patient(),
        "patient_name": _patient_name("patient"),
        "mrn": RandomPatternString("MRN", 6),
        "requested_procedure": RandomChoice(PROCEDURES),
        "physician_name": RandomChoice(PHYSICIAN_NAMES),
        "urgency": RandomChoice(["routine", "urgent", "emergent"]),
        "status": RandomChoice(["pending", "approved", "denied"]),
        "requested_date": ComputedDate(0),
        "expected_service_date": ComputedDate(14),
        "estimated_cost": RandomNumericRange(500, 60000, 2),
        "assigned_to": ConfigValue("agent_user"),
        "opened_by": ConfigValue("agent_user"),
        "short_description": Template("Pre-authorization for {requested_procedure} ({patient_name})"),
        "clinical_notes": GeneratedText(
            "Write brief clinical notes from {physician_name} supporting a request for "
            "{requested_procedure}."
        ),
    },
    annotation_plan=CLAIM_REVIEW,
    attachment=AttachmentSpec(
        file_name="medical_necessity_letter.txt",
        prompt_template=(
            "Generate a letter of medical necessity from {physician_name} for {requested_procedure}."
        ),
    ),
)

CLAIM_DISPUTE = CaseTypeSchema(
    id="claim_dispute",
    display_name="Claim Dispute",
    target_collection="u_claimdispute",
    requires_short_description=False,
    allows_batch=True,
    requester_field="u_member",
    agent_field="assigned_to",
    field_plan={
        "number": NextSequenceNumber("u_claimdispute", prefix="CD", width=7),
        "u_member": _patient(),
        "u_patient_name": _patient_name("u_member"),
        "u_denial_code": RandomChoice(DENIAL_CODES),
        "u_reason_for_denial": Constant("Services not covered under the patient's benefit plan."),
        "u_requested_procedure": RandomChoice(PROCEDURES),
        "u_physician_name": RandomChoice(PHYSICIAN_NAMES),
        "u_initial_determination": RandomChoice(["Adverse", "Favorable"]),
        "u_initial_determination_date": ComputedDate(-10),
        "u_pre_auth_request": RelatedRecordLookup(
            PRE_AUTH_COLLECTION, filter={"patient": FieldRef("u_member")}
        ),
        "u_mrn": RandomPatternString("MRN", 6),
        "u_source": Constant("Provider"),
        "u_secondary_diagnosis_of_concern": Constant("Hypertension"),
        "state": Constant(1),
        "priority": Constant(3),
        "short_description": Template("Claim dispute for {u_patient_name}"),
        "description": Template(
            "Patient {u_patient_name} is disputing the claim denial for {u_requested_procedure}."
        ),
        "assigned_to": ConfigValue("agent_user"),
        "opened_by": ConfigValue("agent_user"),
        "opened_at": ComputedDate(0),
    },
    annotation_plan=CLAIM_REVIEW,
    attachment=AttachmentSpec(
        file_name="appeal_letter.txt",
        prompt_template=(
            "Generate an appeal letter for {u_patient_name} disputing denial code "
            "{u_denial_code} for {u_requested_procedure}."
        ),
    ),
)

CASE_TYPES = [HEALTHCARE_CLAIM, PRE_AUTHORIZATION, CLAIM_DISPUTE]
