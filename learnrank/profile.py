from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from learnrank import config
from learnrank.core.text_processing import normalize_terms, tokenize_stream
from learnrank.models import (
    ActivityEvent,
    Background,
    PreferenceRecord,
    ProfileRecord,
    UserContext,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

# Metadata keys whose values are topic labels (kept as whole phrases).
_LABEL_KEYS = ("category", "related_skills", "skills", "tags", "topic", "topics", "technologies")
# Metadata keys holding free text (split into content tokens).
_TEXT_KEYS = ("query", "search_query")


def _coerce_profile(profile: Any) -> Optional[ProfileRecord]:
    if profile is None or isinstance(profile, ProfileRecord):
        return profile
    if isinstance(profile, Mapping):
        return ProfileRecord.from_dict(profile)
    logger.debug("Ignoring profile of unsupported type %s", type(profile).__name__)
    return None


def _coerce_preferences(preferences: Any) -> Optional[PreferenceRecord]:
    if preferences is None or isinstance(preferences, PreferenceRecord):
        return preferences
    if isinstance(preferences, Mapping):
        return PreferenceRecord.from_dict(preferences)
    logger.debug("Ignoring preferences of unsupported type %s", type(preferences).__name__)
    return None


def derive_background(profile: ProfileRecord) -> Optional[Background]:
    """
    Explicit background wins. Otherwise infer from job title/company, but only
    when at least one of them is present; an empty profile stays unknown.
    """
    if profile.background is not None:
        return profile.background

    title = profile.job_title.lower()
    company = profile.company.lower()
    if not title and not company:
        return None
    if "student" in title or "university" in company or "college" in company:
        return Background.STUDENT
    if title and company:
        return Background.PROFESSIONAL
    return Background.SELF_LEARNER


def derive_learning_goals(profile: Optional[ProfileRecord], preferences: Optional[PreferenceRecord]) -> Set[str]:
    goals: Set[str] = set()
    if profile is not None:
        for text in (profile.goals, profile.bio, profile.job_title):
            goals.update(tokenize_stream(text))
    if preferences is not None:
        # stated interests are kept as whole phrases ("machine learning")
        goals.update(preferences.interests)
    return {g for g in goals if len(g) > 3}


def _event_terms(event: ActivityEvent) -> List[str]:
    meta = event.metadata or {}
    terms: List[str] = []
    for key in _LABEL_KEYS:
        terms.extend(normalize_terms(meta.get(key)))
    for key in _TEXT_KEYS:
        value = meta.get(key)
        if isinstance(value, str):
            terms.extend(tokenize_stream(value))
    # one contribution per term per event
    return list(dict.fromkeys(terms))


def _recency_factor(created_at: Optional[datetime], reference: Optional[datetime], half_life_hours: float) -> float:
    if created_at is None or reference is None:
        return config.ACTIVITY_UNDATED_FACTOR
    age_hours = max(0.0, (reference - created_at).total_seconds() / 3600.0)
    return 0.5 ** (age_hours / half_life_hours)


def fold_recent_activity(
        events: Optional[Iterable[Any]],
        *,
        now: Optional[datetime] = None,
        half_life_hours: Optional[float] = None,
        max_events: Optional[int] = None,
) -> Dict[str, float]:
    """
    Fold an activity log (newest first) into term -> weight.

    weight(term) = sum over events mentioning term of
                   type_multiplier(event) * 0.5 ** (age_hours / half_life)

    Age is measured from `now` when given, else from the newest dated event,
    so the result depends only on the inputs. Every contribution is positive,
    which makes weights grow with both recency and repetition.
    """
    if not events or isinstance(events, (str, bytes, Mapping)) or not isinstance(events, Iterable):
        return {}

    half_life = half_life_hours if half_life_hours and half_life_hours > 0 else config.ACTIVITY_HALF_LIFE_HOURS
    limit = config.ACTIVITY_MAX_EVENTS if max_events is None else max(0, max_events)

    parsed: List[ActivityEvent] = []
    for idx, raw in enumerate(events):
        if len(parsed) >= limit:
            break
        if isinstance(raw, ActivityEvent):
            parsed.append(raw)
        elif isinstance(raw, Mapping):
            parsed.append(ActivityEvent.from_dict(raw))
        else:
            logger.debug("Skipping activity event #%d of unsupported type %s", idx, type(raw).__name__)

    reference = parse_timestamp(now) if now is not None else None
    if reference is None:
        dated = [e.created_at for e in parsed if e.created_at is not None]
        reference = max(dated) if dated else None

    weights: Dict[str, float] = {}
    for event in parsed:
        terms = _event_terms(event)
        if not terms:
            continue
        multiplier = config.ACTIVITY_TYPE_MULTIPLIERS.get(event.activity_type, config.ACTIVITY_DEFAULT_MULTIPLIER)
        contribution = multiplier * _recency_factor(event.created_at, reference, half_life)
        for term in terms:
            weights[term] = weights.get(term, 0.0) + contribution

    return {term: round(w, 4) for term, w in sorted(weights.items()) if w > 0}


def build_user_context(
        profile: Any = None,
        preferences: Any = None,
        recent_activity: Optional[Sequence[Any]] = None,
        *,
        now: Optional[datetime] = None,
) -> UserContext:
    """
    Normalize profile + preferences + recent activity into one scoring context.

    Any input may be missing or oddly shaped; the result then falls back to the
    least-informative context (no skills, no goals, unknown level, prefers_free=False).
    """
    prof = _coerce_profile(profile)
    prefs = _coerce_preferences(preferences)

    experience_level = prof.experience_level if prof else None
    background = derive_background(prof) if prof else None
    education_level = (prefs.education_level if prefs else None) or (prof.education_level if prof else None)
    country = (prefs.country if prefs else None) or (prof.country if prof else None)

    return UserContext(
        experience_level=experience_level,
        background=background,
        education_level=education_level,
        country=country,
        skills=frozenset(prof.skills) if prof else frozenset(),
        learning_goals=frozenset(derive_learning_goals(prof, prefs)),
        prefers_free=prefs.prefers_free if prefs else False,
        recent_activity_weight=fold_recent_activity(recent_activity, now=now),
    )
