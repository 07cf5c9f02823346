"""Common types and enums shared across all models."""

from enum import Enum


class PlanTypeCode(str, Enum):
    """Plan family a student record is being prepared for."""

    IEP = "IEP"
    FIVE_OH_FOUR = "FIVE_OH_FOUR"
    BEHAVIOR_PLAN = "BEHAVIOR_PLAN"


class GradeBand(str, Enum):
    """Coarse grade grouping used to pick age-appropriate reference examples."""

    K_2 = "K-2"
    G3_5 = "3-5"
    G6_8 = "6-8"
    G9_12 = "9-12"


class IngestionStatus(str, Enum):
    """Ingestion state of a reference document."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
