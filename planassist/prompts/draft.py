"""Draft prompt builder - grounded prompt for drafting one plan field."""

import re
from collections.abc import Sequence

from planassist.models.common import PlanTypeCode
from planassist.models.draft import StudentContext
from planassist.models.reference import ReferenceChunk

PLAN_TYPE_DISPLAY_NAMES: dict[str, str] = {
    PlanTypeCode.IEP.value: "IEP (Individualized Education Program)",
    PlanTypeCode.FIVE_OH_FOUR.value: "504 Plan",
    PlanTypeCode.BEHAVIOR_PLAN.value: "Behavior Intervention Plan",
}

DRAFT_INSTRUCTIONS = (
    "- Use professional, clear language appropriate for special education documentation",
    "- Follow the style and format of the reference examples",
    "- Make the content specific to the student's grade level and needs",
    "- Ensure compliance with IDEA and best practices",
    "- Keep the response focused and actionable",
)

DRAFT_CLOSING_DIRECTIVE = (
    "Generate only the content for this field. Do not include explanations or headers."
)

_WORD_START = re.compile(r"\b\w")


def plan_type_display_name(plan_type_code: PlanTypeCode | str) -> str:
    """Full plan name, or the literal code when it is not a known plan type."""
    code = plan_type_code.value if isinstance(plan_type_code, PlanTypeCode) else plan_type_code
    return PLAN_TYPE_DISPLAY_NAMES.get(code, code)


def humanize_key(key: str) -> str:
    """``present_levels`` -> ``Present Levels``."""
    return _WORD_START.sub(lambda m: m.group(0).upper(), key.replace("_", " "))


def build_draft_prompt(
    *,
    plan_type_code: PlanTypeCode | str,
    section_tag: str,
    field_key: str,
    chunks: Sequence[ReferenceChunk],
    student_context: StudentContext | None = None,
    user_prompt: str | None = None,
) -> str:
    """Assemble the prompt sent to the generation client for a field draft.

    Block order is fixed: role framing, student information, section/field
    header, numbered reference examples, optional specific request,
    instructions, closing directive. Only the student fields that are present
    are emitted. The closing directive is always the final line.
    """
    lines: list[str] = []

    lines.append(
        "You are an expert special education plan writer. Generate professional, "
        f"compliant content for a {plan_type_display_name(plan_type_code)}."
    )
    lines.append("")

    # Student context
    if student_context:
        lines.append("## Student Information")
        if student_context.first_name:
            lines.append(f"- Student: {student_context.first_name}")
        if student_context.grade:
            lines.append(f"- Grade: {student_context.grade}")
        if student_context.need_description:
            lines.append(f"- Need: {student_context.need_description}")
        lines.append("")

    # Section header
    lines.append(f"## Section: {humanize_key(section_tag)}")
    lines.append(f"Field: {humanize_key(field_key)}")
    lines.append("")

    # Reference examples
    if chunks:
        lines.append("## Reference Examples from Best Practice Documents")
        lines.append("Use these examples as reference for style, format, and level of detail:")
        lines.append("")
        for index, chunk in enumerate(chunks, start=1):
            label = f"### Example {index}"
            if chunk.grade_band:
                label += f" (Grade Band: {chunk.grade_band.value})"
            lines.append(label)
            lines.append(chunk.text)
            lines.append("")

    if user_prompt:
        lines.append("## Specific Request")
        lines.append(user_prompt)
        lines.append("")

    lines.append("## Instructions")
    lines.append(f"Generate appropriate content for the {field_key.replace('_', ' ')} field.")
    lines.extend(DRAFT_INSTRUCTIONS)
    lines.append("")

    lines.append(DRAFT_CLOSING_DIRECTIVE)

    return "\n".join(lines)
