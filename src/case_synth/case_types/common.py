"""Annotation plans and attachments shared by the built-in case types."""

from __future__ import annotations

from case_synth.case_types.registry import AnnotationStep, AttachmentSpec

# Requester and agent alternate; the closing entries assume the earlier
# ones are already on the record.
SUPPORT_CONVERSATION = (
    AnnotationStep(
        kind="note_from_requester",
        author_role="requester",
        prompt_template=(
            'Write a short comment from the person who reported "{short_description}", '
            "adding one more detail about the problem."
        ),
    ),
    AnnotationStep(
        kind="note_from_agent",
        author_role="agent",
        prompt_template=(
            'Write an internal work note from the agent investigating "{short_description}", '
            "describing the first troubleshooting step taken."
        ),
    ),
    AnnotationStep(
        kind="note_from_requester",
        author_role="requester",
        prompt_template=(
            'Write a short comment from the requester of "{short_description}" '
            "confirming they tried the suggested fix."
        ),
    ),
    AnnotationStep(
        kind="note_from_agent",
        author_role="agent",
        prompt_template=(
            'Write a work note recording the resolution of "{short_description}" '
            "and why it resolved the issue."
        ),
    ),
)

CLAIM_REVIEW = (
    AnnotationStep(
        kind="note_from_requester",
        author_role="requester",
        prompt_template=(
            'Write a short note from the submitting provider about "{short_description}", '
            "stating what they expect from the review."
        ),
    ),
    AnnotationStep(
        kind="note_from_agent",
        author_role="agent",
        prompt_template=(
            'Write an internal note from the claims reviewer handling "{short_description}", '
            "listing the documents checked."
        ),
    ),
    AnnotationStep(
        kind="note_from_agent",
        author_role="agent",
        prompt_template=(
            'Write the reviewer\'s determination note for "{short_description}" '
            "and the reason for it."
        ),
    ),
)

ERROR_LOG = AttachmentSpec(
    file_name="error_log.txt",
    prompt_template='Generate a log snippet for the issue: "{short_description}".',
)

CLAIM_SUMMARY = AttachmentSpec(
    file_name="claim_summary.txt",
    prompt_template='Generate a plain-text summary document for "{short_description}".',
)

PHYSICIAN_NAMES = ("Dr. John Smith", "Dr. Emily Brown", "Dr. James Dean", "Dr. Lisa White")

PROCEDURES = (
    "Atypical Nevus Removal",
    "Congenital Nevus Removal",
    "Knee Arthroscopy",
    "Spinal Fusion Surgery",
    "Cardiac Catheterization",
)
