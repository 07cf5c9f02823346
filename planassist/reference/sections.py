"""Static section classification tables and the field-to-section resolver.

Per plan type, sections are listed in lookup order; each section names the
plan field keys it covers. A field key belongs to at most one section of a
plan type. Tags that only bucket reference material (e.g. ``goals_reading``)
live in ``SECTION_TAG_VOCABULARY`` and can still be requested directly as a
caller-supplied section key.
"""

from planassist.models.common import PlanTypeCode

SECTION_FIELD_MAP: dict[PlanTypeCode, dict[str, tuple[str, ...]]] = {
    PlanTypeCode.IEP: {
        "present_levels": ("academic_performance", "functional_performance"),
        "goals": ("goals_list",),
        "accommodations": ("supplementary_aids",),
        "services": ("special_education_services",),
        "services_related": ("related_services",),
        "placement": ("placement_decision",),
        "placement_lre": ("lre_justification",),
        "transition": ("transition",),
        "esy": ("extended_school_year", "esy_justification"),
        "parent_concerns": ("parent_concerns",),
    },
    PlanTypeCode.FIVE_OH_FOUR: {
        "disability": ("disability_description",),
        "major_life_activities": ("major_life_activities",),
        "accommodations": ("accommodations",),
        "accommodations_classroom": ("classroom_accommodations",),
        "accommodations_testing": ("testing_accommodations",),
        "accommodations_physical": ("physical_accommodations",),
        "health_plan": ("health_plan",),
        "emergency_plan": ("emergency_plan",),
        "medication": ("medication",),
    },
    PlanTypeCode.BEHAVIOR_PLAN: {
        "target_behavior": ("target_behavior", "behavior_description"),
        "function_analysis": ("function_of_behavior",),
        "antecedents": ("antecedents", "triggers"),
        "consequences": ("consequences",),
        "replacement_behavior": ("replacement_behavior",),
        "prevention_strategies": ("prevention_strategies",),
        "teaching_strategies": ("teaching_strategies",),
        "response_strategies": ("response_plan",),
        "reinforcement": ("reinforcement_strategies",),
        "crisis_plan": ("crisis_plan",),
        "deescalation": ("deescalation_strategies",),
        "data_collection": ("data_collection",),
        "progress_monitoring": ("progress_monitoring",),
    },
}

# Closed tag vocabulary the ingestion tagger assigns to reference chunks.
SECTION_TAG_VOCABULARY: dict[PlanTypeCode, tuple[str, ...]] = {
    PlanTypeCode.IEP: (
        "present_levels",
        "present_levels_academic",
        "present_levels_functional",
        "goals",
        "goals_reading",
        "goals_math",
        "goals_writing",
        "goals_communication",
        "goals_social_emotional",
        "goals_behavior",
        "objectives",
        "accommodations",
        "modifications",
        "services",
        "services_related",
        "supplementary_aids",
        "placement_lre",
        "placement",
        "transition",
        "esy",
        "parent_concerns",
    ),
    PlanTypeCode.FIVE_OH_FOUR: (
        "disability",
        "major_life_activities",
        "accommodations",
        "accommodations_classroom",
        "accommodations_testing",
        "accommodations_physical",
        "health_plan",
        "emergency_plan",
        "medication",
        "review",
    ),
    PlanTypeCode.BEHAVIOR_PLAN: (
        "target_behavior",
        "function_analysis",
        "antecedents",
        "consequences",
        "replacement_behavior",
        "prevention_strategies",
        "teaching_strategies",
        "response_strategies",
        "reinforcement",
        "crisis_plan",
        "deescalation",
        "data_collection",
        "progress_monitoring",
    ),
}


def _coerce_plan_type(plan_type_code: PlanTypeCode | str) -> PlanTypeCode | None:
    try:
        return PlanTypeCode(plan_type_code)
    except ValueError:
        return None


def resolve_section_tag(plan_type_code: PlanTypeCode | str, field_key: str) -> str | None:
    """Return the section tag covering ``field_key`` for a plan type.

    Sections are scanned in table order and the first match wins. Unknown
    plan types and unmapped fields return None; callers fall back to their
    own section key.
    """
    plan_type = _coerce_plan_type(plan_type_code)
    if plan_type is None:
        return None

    for section_tag, field_keys in SECTION_FIELD_MAP.get(plan_type, {}).items():
        if field_key in field_keys:
            return section_tag

    return None


def generic_section_tag(section_tag: str) -> str:
    """Topic-level form of a tag: everything before the first underscore.

    ``goals_reading`` -> ``goals``; a tag without an underscore is its own
    generic form.
    """
    head = section_tag.split("_", 1)[0]
    return head or section_tag


def section_tags_for_plan_type(plan_type_code: PlanTypeCode | str) -> list[str]:
    """Sorted, de-duplicated tag vocabulary; unknown codes use the IEP vocabulary."""
    plan_type = _coerce_plan_type(plan_type_code) or PlanTypeCode.IEP
    return sorted(set(SECTION_TAG_VOCABULARY[plan_type]))
