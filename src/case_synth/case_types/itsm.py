"""IT service management case types: incidents and change requests."""

from __future__ import annotations

from case_synth.case_types.common import ERROR_LOG, SUPPORT_CONVERSATION
from case_synth.case_types.registry import AnnotationStep, AttachmentSpec, CaseTypeSchema
from case_synth.fields.specs import (
    CallerInput,
    ComputedDate,
    ConfigValue,
    Constant,
    GeneratedText,
    RandomChoice,
    RelatedRecordLookup,
)

INCIDENT = CaseTypeSchema(
    id="incident",
    display_name="Incident",
    target_collection="incident",
    requires_short_description=True,
    allows_batch=False,
    requester_field="caller_id",
    agent_field="assigned_to",
    field_plan={
        "short_description": CallerInput("short_description"),
        "description": GeneratedText(
            'Write a detailed description for an IT incident titled "{short_description}".'
        ),
        "caller_id": ConfigValue("incident_end_user"),
        "cmdb_ci": RelatedRecordLookup("cmdb_ci", fallback=ConfigValue("configuration_item")),
        "business_service": ConfigValue("business_service"),
        "impact": Constant(1),
        "urgency": Constant(1),
        "priority": Constant(1),
        "category": Constant("Network"),
        "subcategory": Constant("Email"),
        "contact_type": RandomChoice(["email", "phone", "self-service", "walk-in"]),
        "assignment_group": ConfigValue("incident_assignment_group"),
        "assigned_to": ConfigValue("agent_user"),
        "state": Constant(1),
        "opened_by": ConfigValue("incident_end_user"),
        "opened_at": ComputedDate(0),
        "location": ConfigValue("incident_location"),
    },
    annotation_plan=SUPPORT_CONVERSATION,
    attachment=ERROR_LOG,
)

CHANGE_REQUEST = CaseTypeSchema(
    id="change_request",
    display_name="Change Request",
    target_collection="change_request",
    requires_short_description=True,
    allows_batch=False,
    requester_field="requested_by",
    agent_field="assigned_to",
    field_plan={
        "short_description": CallerInput("short_description"),
        "description": GeneratedText(
            'Write the implementation summary for a change titled "{short_description}".'
        ),
        "justification": GeneratedText(
            'Write a one-paragraph business justification for "{short_description}".'
        ),
        "implementation_plan": GeneratedText(
            'List the implementation steps for "{short_description}".'
        ),
        "backout_plan": GeneratedText('Write a backout plan for "{short_description}".'),
        "type": RandomChoice(["standard", "normal", "emergency"]),
        "risk": RandomChoice([2, 3, 4]),
        "impact": RandomChoice([1, 2, 3]),
        "cmdb_ci": RelatedRecordLookup("cmdb_ci", fallback=ConfigValue("configuration_item")),
        "assignment_group": ConfigValue("change_assignment_group"),
        "assigned_to": ConfigValue("agent_user"),
        "requested_by": ConfigValue("incident_end_user"),
        "start_date": ComputedDate(2),
        "end_date": ComputedDate(3),
        "state": Constant(-5),
    },
    annotation_plan=(
        AnnotationStep(
            kind="note_from_requester",
            author_role="requester",
            prompt_template='Write a comment from the requester asking for "{short_description}" to be scheduled.',
        ),
        AnnotationStep(
            kind="note_from_agent",
            author_role="agent",
            prompt_template='Write a work note confirming peer review of "{short_description}".',
        ),
    ),
    attachment=AttachmentSpec(
        file_name="implementation_plan.txt",
        prompt_template='Generate a step-by-step runbook for the change: "{short_description}".',
    ),
)

CASE_TYPES = [INCIDENT, CHANGE_REQUEST]

__all__ = ["CASE_TYPES", "INCIDENT", "CHANGE_REQUEST"]
