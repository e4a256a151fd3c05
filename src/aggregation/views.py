"""
View selection: which observation or aggregate is on display for a given
view mode and selection.

Teacher eligibility for the by-teacher view is computed here for callers
building selectors, but select_display itself does not enforce it.
"""

from collections import Counter
from typing import List, Optional, Sequence

from models import (
    DisplayData,
    Observation,
    RecordId,
    Selection,
    TeacherOption,
    ViewMode,
)
from .engine import aggregate


MIN_TEACHER_OBSERVATIONS = 2

VIEW_CAPTIONS = {
    ViewMode.BY_TEACHER: "Promedio Histórico Docente",
    ViewMode.INSTITUTION: "Promedio General Institucional",
}


def find_by_id(observations: Sequence[Observation], observation_id: Optional[RecordId]) -> Optional[Observation]:
    if observation_id is None:
        return None
    return next((o for o in observations if o.observation_id == observation_id), None)


def observations_for_teacher(observations: Sequence[Observation], teacher_id: Optional[RecordId]) -> List[Observation]:
    return [o for o in observations if o.teacher_id == teacher_id]


def select_display(
    observations: Sequence[Observation],
    view_mode: ViewMode,
    observation_id: Optional[RecordId] = None,
    teacher_id: Optional[RecordId] = None,
) -> Optional[DisplayData]:
    """
    Pick or compute the display data for a view.

    - single: the observation with observation_id, or None if absent
    - by-teacher: aggregate over the teacher's observations
    - institution: aggregate over every observation passed in
    """
    if view_mode == ViewMode.SINGLE:
        return find_by_id(observations, observation_id)
    if view_mode == ViewMode.BY_TEACHER:
        return aggregate(observations_for_teacher(observations, teacher_id))
    return aggregate(observations)


def eligible_teachers(
    observations: Sequence[Observation],
    min_observations: int = MIN_TEACHER_OBSERVATIONS,
) -> List[TeacherOption]:
    """Teachers with at least `min_observations`, in first-appearance order."""
    counts = Counter(o.teacher_id for o in observations if o.teacher_id is not None)
    options: List[TeacherOption] = []
    seen = set()

    for observation in observations:
        teacher_id = observation.teacher_id
        if teacher_id is None or teacher_id in seen:
            continue
        seen.add(teacher_id)
        if counts[teacher_id] >= min_observations:
            options.append(TeacherOption(
                teacher_id=teacher_id,
                teacher_name=observation.teacher_name,
                observation_count=counts[teacher_id],
            ))

    return options


def default_selection(
    observations: Sequence[Observation],
    view_mode: ViewMode = ViewMode.SINGLE,
    min_observations: int = MIN_TEACHER_OBSERVATIONS,
) -> Selection:
    """First observation in load order, and the first eligible teacher if any."""
    first_teacher = next(iter(eligible_teachers(observations, min_observations)), None)
    return Selection(
        view_mode=view_mode,
        observation_id=observations[0].observation_id if observations else None,
        teacher_id=first_teacher.teacher_id if first_teacher else None,
    )


def reconcile_selection(
    selection: Selection,
    observations: Sequence[Observation],
    min_observations: int = MIN_TEACHER_OBSERVATIONS,
) -> Selection:
    """
    Keep a selection valid after a reload.

    Ids that still exist are kept; ids that disappeared fall back to the
    defaults for the new collection.
    """
    defaults = default_selection(observations, selection.view_mode, min_observations)
    updates = {}

    if find_by_id(observations, selection.observation_id) is None:
        updates["observation_id"] = defaults.observation_id
    if selection.teacher_id is None or not observations_for_teacher(observations, selection.teacher_id):
        updates["teacher_id"] = defaults.teacher_id

    return selection.model_copy(update=updates) if updates else selection


def find_observation(observations: Sequence[Observation], term: str) -> Optional[Observation]:
    """First observation whose teacher name or subject contains `term`, ignoring case."""
    needle = (term or "").strip().lower()
    if not needle:
        return None
    for observation in observations:
        if needle in observation.teacher_name.lower() or needle in observation.subject.lower():
            return observation
    return None


def apply_search(selection: Selection, observations: Sequence[Observation], term: str) -> Selection:
    """Select the first match and switch to the single view; unchanged when nothing matches."""
    match = find_observation(observations, term)
    if match is None:
        return selection
    return selection.model_copy(update={
        "view_mode": ViewMode.SINGLE,
        "observation_id": match.observation_id,
    })


def view_caption(view_mode: ViewMode) -> Optional[str]:
    return VIEW_CAPTIONS.get(view_mode)
