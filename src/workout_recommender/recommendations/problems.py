"""
Problem Matching

Maps tracked injuries/conditions to the exercises that address them.
Muscle matching is a loose heuristic: case-insensitive
substring containment in either direction, so "back" matches both
"Upper Back" and "Lower Back".
"""

from typing import Dict, List, Optional

from ..models.catalog import Exercise
from ..models.profile import Problem, ProblemType


def muscle_matches(muscle_name: str, affected: str) -> bool:
    """True when either name contains the other, ignoring case."""
    muscle = muscle_name.strip().lower()
    fragment = affected.strip().lower()
    if not muscle or not fragment:
        return False
    return fragment in muscle or muscle in fragment


def exercise_targets_problem(exercise: Exercise, problem: Problem) -> bool:
    """True when any of the exercise's target muscles matches an affected muscle."""
    return any(
        muscle_matches(target.muscle.name, affected)
        for target in exercise.muscle_targets
        for affected in problem.affected_muscles
    )


def exercises_for_problem(problem: Problem, catalog: List[Exercise]) -> List[Exercise]:
    """
    Exercises that address a problem, in catalog order.

    Explicit ``recommended_exercise_ids`` take over completely: matching is
    then by id only. Otherwise any exercise with one target muscle matching an
    affected muscle qualifies.
    """
    if problem.recommended_exercise_ids:
        wanted = set(problem.recommended_exercise_ids)
        return [exercise for exercise in catalog if exercise.id in wanted]

    return [exercise for exercise in catalog if exercise_targets_problem(exercise, problem)]


def all_problem_exercises(problems: List[Problem], catalog: List[Exercise]) -> List[Exercise]:
    """Deduplicated union of exercises for every active problem, in catalog order."""
    matched = set()
    for problem in problems:
        if not problem.is_active:
            continue
        matched.update(exercise.id for exercise in exercises_for_problem(problem, catalog))
    return [exercise for exercise in catalog if exercise.id in matched]


# Known problems offered during profile set-up
PROBLEM_TEMPLATES: Dict[str, Problem] = {
    "wrist_pain": Problem(
        type=ProblemType.INJURY,
        name="Wrist Pain",
        affected_muscles=["forearms", "wrists"],
        priority=4,
    ),
    "tms": Problem(
        type=ProblemType.CONDITION,
        name="TMS (Temporomandibular Joint Syndrome)",
        affected_muscles=["neck", "shoulders", "jaw", "upper back"],
        priority=4,
    ),
    "lower_back_pain": Problem(
        type=ProblemType.INJURY,
        name="Lower Back Pain",
        affected_muscles=["lower back", "core", "glutes", "hip flexors"],
        priority=5,
    ),
    "forearm_weakness": Problem(
        type=ProblemType.WEAKNESS,
        name="Forearm Weakness",
        affected_muscles=["forearms"],
        priority=3,
    ),
}


def create_problem_from_description(description: str) -> Optional[Problem]:
    """
    Build a Problem from a free-text description using keyword matching.

    Known templates are tried first (by key or by name), then a couple of
    generic wrist/forearm keywords.

    Returns:
        A new Problem carrying the description, or None if nothing matched
    """
    text = description.lower()

    for key, template in PROBLEM_TEMPLATES.items():
        if key.replace("_", " ") in text or template.name.lower() in text:
            return template.model_copy(update={"description": description}, deep=True)

    if "wrist" in text and ("pain" in text or "crack" in text):
        return Problem(
            type=ProblemType.INJURY,
            name="Wrist Issue",
            description=description,
            affected_muscles=["forearms", "wrists"],
            priority=4,
        )

    if "forearm" in text:
        return Problem(
            type=ProblemType.WEAKNESS,
            name="Forearm Focus",
            description=description,
            affected_muscles=["forearms"],
            priority=3,
        )

    return None
