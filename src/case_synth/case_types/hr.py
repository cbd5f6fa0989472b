"""HR service delivery case type."""

from __future__ import annotations

from case_synth.case_types.common import SUPPORT_CONVERSATION
from case_synth.case_types.registry import AttachmentSpec, CaseTypeSchema
from case_synth.fields.specs import CallerInput, ComputedDate, ConfigValue, Constant, GeneratedText

HR_CASE = CaseTypeSchema(
    id="hr_case",
    display_name="HR Case",
    target_collection="sn_hr_core_case",
    requires_short_description=True,
    allows_batch=False,
    requester_field="opened_for",
    agent_field="assigned_to",
    field_plan={
        "short_description": CallerInput("short_description"),
        "description": GeneratedText(
            'Write a detailed description for an HR case titled "{short_description}".'
        ),
        "opened_for": ConfigValue("hr_opened_for"),
        "hr_service": ConfigValue("hr_service"),
        "subject_person": ConfigValue("hr_subject_person"),
        "assignment_group": ConfigValue("hr_assignment_group"),
        "assigned_to": ConfigValue("agent_user"),
        "hr_service_type": Constant("employee_relations"),
        "due_date": ComputedDate(5),
        "opened_by": ConfigValue("hr_opened_for"),
    },
    annotation_plan=SUPPORT_CONVERSATION,
    attachment=AttachmentSpec(
        file_name="case_summary.txt",
        prompt_template='Generate a short HR case summary document for "{short_description}".',
    ),
)

CASE_TYPES = [HR_CASE]
