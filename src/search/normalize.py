"""Normalization of loosely-specified search parameters.

Turns a validated SearchCriteria into a ResolvedCriteria the pipeline can run:
- Age group precedence: explicit age_group > parsed stage label > derived from months
- Language inferred from the script of query/meal_type when not given
- Limit defaulted
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.models.models import AgeGroup, SearchCriteria

DEFAULT_SEARCH_LIMIT = 12

_ELEVEN_PLUS = re.compile(r"\b11\s*\+")
_STAGE_WORD = re.compile(r"\bstage[\s_\-]*([1-4])(?!\d)", re.IGNORECASE)
_LEADING_DIGIT = re.compile(r"^\s*([1-4])(?!\d)")
_CJK = re.compile(r"[\u1100-\u11ff\u3040-\u30ff\u3130-\u318f\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af\uf900-\ufaff]")
_LATIN = re.compile(r"[A-Za-z\u00c0-\u024f]")


def derive_age_group(months: Optional[int]) -> Optional[AgeGroup]:
    """Map a baby age in months to its stage. No age means no stage."""
    if months is None:
        return None
    if months <= 6:
        return AgeGroup.STAGE_1
    if months <= 8:
        return AgeGroup.STAGE_2
    if months <= 10:
        return AgeGroup.STAGE_3
    return AgeGroup.STAGE_4


def parse_stage_label(text: Optional[str]) -> Optional[AgeGroup]:
    """Parse a free-text stage label.

    Accepts "11+" (stage 4), "stage N" in any case and separator ("Stage 2",
    "STAGE_3", "stage-4") and a leading digit 1-4 ("2", "3 (9-10 months)").
    Anything else yields None.
    """
    if not text:
        return None
    if _ELEVEN_PLUS.search(text):
        return AgeGroup.STAGE_4
    match = _STAGE_WORD.search(text) or _LEADING_DIGIT.match(text)
    if match:
        return AgeGroup(f"STAGE_{match.group(1)}")
    return None


def infer_language(*texts: Optional[str]) -> Optional[str]:
    """Guess the content language from the script used in free text.

    Any CJK character (Han, kana or Hangul) means "zh"; Latin letters without CJK mean "en";
    otherwise None so the upstream default applies.
    """
    combined = " ".join(text for text in texts if text)
    if not combined:
        return None
    if _CJK.search(combined):
        return "zh"
    if _LATIN.search(combined):
        return "en"
    return None


class ResolvedCriteria(BaseModel):
    """Search criteria after precedence rules and defaults were applied."""

    model_config = ConfigDict(frozen=True)

    age_group: Optional[AgeGroup] = None
    # Stage the caller asked for explicitly (enum or label), re-imposed by the local filter
    requested_stage: Optional[AgeGroup] = None
    meal_type: Optional[str] = None
    query: Optional[str] = None
    allergens_to_avoid: tuple[str, ...] = ()
    difficulty: Optional[str] = None
    max_total_time_minutes: Optional[int] = None
    max_cook_time_minutes: Optional[int] = None
    max_prep_time_minutes: Optional[int] = None
    limit: int = DEFAULT_SEARCH_LIMIT
    offset: Optional[int] = None
    language: Optional[str] = None


def resolve_criteria(criteria: SearchCriteria, default_limit: int = DEFAULT_SEARCH_LIMIT) -> ResolvedCriteria:
    """Apply age-group precedence, language inference and the default limit."""
    requested_stage = criteria.age_group or parse_stage_label(criteria.stage)
    age_group = requested_stage or derive_age_group(criteria.baby_age_months)
    language = criteria.language or infer_language(criteria.query, criteria.meal_type)

    return ResolvedCriteria(
        age_group=age_group,
        requested_stage=requested_stage,
        meal_type=criteria.meal_type,
        query=criteria.query,
        allergens_to_avoid=tuple(criteria.allergens_to_avoid),
        difficulty=criteria.difficulty,
        max_total_time_minutes=criteria.max_total_time_minutes,
        max_cook_time_minutes=criteria.max_cook_time_minutes,
        max_prep_time_minutes=criteria.max_prep_time_minutes,
        limit=criteria.limit or default_limit,
        offset=criteria.offset,
        language=language,
    )
