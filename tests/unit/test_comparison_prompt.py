"""Tests for the comparison prompt builder."""

import base64
from datetime import date

from planassist.models.artifact import ImageArtifact, TextArtifact
from planassist.models.common import PlanTypeCode
from planassist.prompts.comparison import (
    BASELINE_HEADER,
    COMPARE_HEADER,
    COMPARISON_SYSTEM_PROMPT,
    build_comparison_messages,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-payload"


def _build(baseline, compare, description: str | None = "Unit 3 essay"):
    return build_comparison_messages(
        student_name="Ava Smith",
        plan_type_code=PlanTypeCode.IEP,
        artifact_date=date(2025, 3, 14),
        description=description,
        baseline=baseline,
        compare=compare,
    )


def _user_text(messages) -> str:
    return "\n".join(part["text"] for part in messages[1]["content"] if part["type"] == "text")


def test_system_prompt_restricts_model_to_artifacts() -> None:
    messages = _build(TextArtifact(content="a"), TextArtifact(content="b"))

    assert messages[0] == {"role": "system", "content": COMPARISON_SYSTEM_PROMPT}
    lowered = COMPARISON_SYSTEM_PROMPT.lower()
    for topic in ("matches", "does not match", "strengths", "gaps", "next steps"):
        assert topic in lowered
    assert "do not invent" in lowered
    assert lowered.index("baseline") < lowered.index("student artifact")


def test_text_pair_inlined_verbatim_in_order() -> None:
    baseline_text = "Expected: 5-paragraph essay\nwith thesis."
    compare_text = "Student wrote 3 paragraphs."
    messages = _build(TextArtifact(content=baseline_text), TextArtifact(content=compare_text))

    text = _user_text(messages)
    assert baseline_text in text
    assert compare_text in text
    assert text.index(BASELINE_HEADER) < text.index(baseline_text)
    assert text.index(baseline_text) < text.index(COMPARE_HEADER)
    assert text.index(COMPARE_HEADER) < text.index(compare_text)
    assert all(part["type"] == "text" for part in messages[1]["content"])


def test_metadata_header_comes_first() -> None:
    messages = _build(TextArtifact(content="a"), TextArtifact(content="b"))

    first = messages[1]["content"][0]["text"]
    assert first == (
        "Student: Ava Smith\n"
        "Plan type: IEP\n"
        "Artifact date: 2025-03-14\n"
        "Description: Unit 3 essay"
    )


def test_missing_description_placeholder() -> None:
    messages = _build(TextArtifact(content="a"), TextArtifact(content="b"), description=None)
    assert "Description: No description provided" in _user_text(messages)


def test_text_image_pair_keeps_image_out_of_text() -> None:
    image = ImageArtifact(data=PNG_BYTES, mime_type="image/png")
    messages = _build(TextArtifact(content="Baseline rubric"), image)

    parts = messages[1]["content"]
    image_parts = [p for p in parts if p["type"] == "image_url"]
    assert len(image_parts) == 1

    encoded = base64.b64encode(PNG_BYTES).decode("utf-8")
    assert image_parts[0]["image_url"]["url"] == f"data:image/png;base64,{encoded}"
    assert encoded not in _user_text(messages)
    assert "fake-image-payload" not in _user_text(messages)

    # Image follows the compare header, after the baseline text
    kinds = [(p["type"], p.get("text", "")) for p in parts]
    compare_header_index = next(i for i, (_, t) in enumerate(kinds) if t.startswith(COMPARE_HEADER))
    assert parts.index(image_parts[0]) == compare_header_index + 1


def test_image_baseline_precedes_text_compare() -> None:
    image = ImageArtifact(data=PNG_BYTES, mime_type="image/jpeg")
    messages = _build(image, TextArtifact(content="Student answer"))

    parts = messages[1]["content"]
    image_index = next(i for i, p in enumerate(parts) if p["type"] == "image_url")
    compare_index = next(
        i for i, p in enumerate(parts) if p["type"] == "text" and p["text"].startswith(COMPARE_HEADER)
    )
    assert image_index < compare_index
    assert parts[image_index]["image_url"]["url"].startswith("data:image/jpeg;base64,")


def test_two_images_produce_two_ordered_parts() -> None:
    baseline = ImageArtifact(data=b"baseline", mime_type="image/png")
    compare = ImageArtifact(data=b"compare", mime_type="image/webp")
    messages = _build(baseline, compare)

    urls = [p["image_url"]["url"] for p in messages[1]["content"] if p["type"] == "image_url"]
    assert urls == [
        "data:image/png;base64," + base64.b64encode(b"baseline").decode(),
        "data:image/webp;base64," + base64.b64encode(b"compare").decode(),
    ]
