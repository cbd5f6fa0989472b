"""Customer service management case type."""

from __future__ import annotations

from case_synth.case_types.common import ERROR_LOG, SUPPORT_CONVERSATION
from case_synth.case_types.registry import CaseTypeSchema
from case_synth.fields.specs import CallerInput, ConfigValue, Constant, GeneratedText, RandomChoice

CSM_CASE = CaseTypeSchema(
    id="csm_case",
    display_name="Customer Service Case",
    target_collection="sn_customerservice_case",
    requires_short_description=True,
    allows_batch=False,
    requester_field="contact",
    agent_field="assigned_to",
    field_plan={
        "short_description": CallerInput("short_description"),
        "description": GeneratedText(
            'Write a detailed customer description of the problem "{short_description}".'
        ),
        "contact": ConfigValue("csm_contact"),
        "account": ConfigValue("csm_account"),
        "product": ConfigValue("csm_product"),
        "priority": Constant(2),
        "severity": Constant(2),
        "channel": RandomChoice(["web", "email", "phone", "chat"]),
        "assigned_to": ConfigValue("csm_agent"),
        "opened_by": ConfigValue("csm_contact"),
    },
    annotation_plan=SUPPORT_CONVERSATION,
    attachment=ERROR_LOG,
)

CASE_TYPES = [CSM_CASE]
