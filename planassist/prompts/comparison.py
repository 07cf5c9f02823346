"""Comparison prompt builder - baseline vs. student artifact messages.

The baseline is always presented first and the student artifact second; the
model reads "baseline = expected, compare = produced" from that position as
well as from the section labels.
"""

from datetime import date
from typing import Any, assert_never

from planassist.extraction.extractor import to_data_url
from planassist.models.artifact import Artifact, ImageArtifact, TextArtifact
from planassist.models.common import PlanTypeCode

BASELINE_HEADER = "=== BASELINE ARTIFACT ==="
COMPARE_HEADER = "=== STUDENT ARTIFACT ==="

COMPARISON_SYSTEM_PROMPT = """You compare two artifacts for a student.

The first artifact is the BASELINE: what the work should look like.
The second artifact is the STUDENT artifact: what the student produced.

Produce a clear comparison that covers:
- where the student work matches the baseline
- where the student work does not match the baseline
- specific strengths in the student work
- specific gaps or errors in the student work
- short, concrete suggestions for next steps

CRITICAL CONSTRAINTS:
- Use only information from the two artifacts supplied in this message.
- Do NOT invent content, scores, dates, or details that are not present in the artifacts.
- If an artifact is unreadable or a detail cannot be determined, say so rather than guessing.

Format your response with clear sections and bullet points for readability."""


def _artifact_parts(header: str, artifact: Artifact) -> list[dict[str, Any]]:
    if isinstance(artifact, TextArtifact):
        return [{"type": "text", "text": f"{header}\n{artifact.content}"}]
    if isinstance(artifact, ImageArtifact):
        return [
            {"type": "text", "text": f"{header}\n(see attached image)"},
            {"type": "image_url", "image_url": {"url": to_data_url(artifact)}},
        ]
    assert_never(artifact)


def build_comparison_messages(
    *,
    student_name: str,
    plan_type_code: PlanTypeCode | str,
    artifact_date: date | str,
    description: str | None,
    baseline: Artifact,
    compare: Artifact,
) -> list[dict[str, Any]]:
    """Build the system and user chat messages for an artifact comparison.

    Text artifacts are inlined verbatim. Image artifacts become separate
    ``image_url`` parts in the same user message and never appear as text.

    Returns:
        ``[system_message, user_message]`` in chat-completions format
    """
    code = plan_type_code.value if isinstance(plan_type_code, PlanTypeCode) else plan_type_code
    header = "\n".join(
        [
            f"Student: {student_name}",
            f"Plan type: {code}",
            f"Artifact date: {artifact_date}",
            f"Description: {description or 'No description provided'}",
        ]
    )

    content: list[dict[str, Any]] = [{"type": "text", "text": header}]
    content.extend(_artifact_parts(BASELINE_HEADER, baseline))
    content.extend(_artifact_parts(COMPARE_HEADER, compare))

    return [
        {"role": "system", "content": COMPARISON_SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]
