# genetic_scheduler/evaluation.py
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Mapping
from collections import defaultdict
import numpy as np

from .errors import ConfigurationError
from .model import FitnessScore, ProblemDefinition, Timetable


@dataclass
class EvaluationResult:
    pairwise: int
    qualification: int
    curriculum: int
    overload: int
    teacher_hours: Dict[str, int]
    violations: List[str] = field(default_factory=list)

    @property
    def conflicts(self) -> int:
        return self.pairwise + self.qualification + self.curriculum + self.overload

    @property
    def fitness(self) -> FitnessScore:
        return score_from_conflicts(self.conflicts)


def score_from_conflicts(conflicts: int) -> FitnessScore:
    return 1.0 / (1.0 + conflicts)


def _clash_matrix(ttable: Timetable, include_audience: bool) -> np.ndarray:
    """Matriz triangular superior: True si el par (i, j) choca en la misma hora."""
    times = np.array([lesson.time for lesson in ttable], dtype=int)
    teachers = np.array([str(lesson.teacher) for lesson in ttable])
    groups = np.array([str(lesson.group) for lesson in ttable])

    same_time = times[:, None] == times[None, :]
    shared = (groups[:, None] == groups[None, :]) | (teachers[:, None] == teachers[None, :])
    if include_audience:
        # Una clase sin aula (None) nunca choca por aula
        audiences = np.array([str(lesson.audience) for lesson in ttable])
        placed = np.array([lesson.audience is not None for lesson in ttable], dtype=bool)
        shared |= (audiences[:, None] == audiences[None, :]) & placed[:, None] & placed[None, :]
    return np.triu(same_time & shared, k=1)


def count_pairwise_conflicts(ttable: Timetable, include_audience: bool = False) -> int:
    if len(ttable) < 2:
        return 0
    return int(_clash_matrix(ttable, include_audience).sum())


def _allowed(mapping: Mapping[str, FrozenSet[str]], key: str, what: str) -> FrozenSet[str]:
    try:
        return mapping[key]
    except KeyError:
        raise ConfigurationError(f"{what} '{key}' no tiene entrada en el mapa de restricciones") from None


def evaluate_conflicts(ttable: Timetable, problem: ProblemDefinition) -> EvaluationResult:
    violations: List[str] = []

    # Choques por pares (misma hora y mismo grupo/docente/aula)
    pairwise = 0
    if len(ttable) >= 2:
        clashes = _clash_matrix(ttable, problem.audiences_modeled)
        pairwise = int(clashes.sum())
        for i, j in np.argwhere(clashes):
            a, b = ttable[int(i)], ttable[int(j)]
            violations.append(f"Choque en hora {a.time}: '{a.subject}' y '{b.subject}'")

    qualification = curriculum = 0
    teacher_hours: Dict[str, int] = defaultdict(int)
    for lesson in ttable:
        if lesson.subject not in _allowed(problem.teacher_subjects, lesson.teacher, "Docente"):
            qualification += 1
            violations.append(f"Docente {lesson.teacher} no dicta '{lesson.subject}'")
        if lesson.subject not in _allowed(problem.group_subjects, lesson.group, "Grupo"):
            curriculum += 1
            violations.append(f"Grupo {lesson.group} no cursa '{lesson.subject}'")
        # Se suma el índice de hora, no la cantidad de clases (comportamiento heredado)
        teacher_hours[lesson.teacher] += lesson.time

    # Exceso de horas: un conflicto por docente, sin importar cuántas clases tenga
    overload = 0
    for teacher, hours in teacher_hours.items():
        limit = problem.teacher_max_hours.get(teacher)
        if limit is not None and hours > limit:
            overload += 1
            violations.append(f"Horas excedidas para docente {teacher}: {hours} > {limit}")

    return EvaluationResult(
        pairwise=pairwise,
        qualification=qualification,
        curriculum=curriculum,
        overload=overload,
        teacher_hours=dict(teacher_hours),
        violations=violations,
    )


def evaluate(ttable: Timetable, problem: ProblemDefinition) -> FitnessScore:
    return evaluate_conflicts(ttable, problem).fitness


def evaluate_pairwise(ttable: Timetable, problem: ProblemDefinition) -> FitnessScore:
    """
    Fitness de la variante simple: solo choques de grupo o docente en la
    misma hora. Ignora aulas, habilitación, plan de estudios y horas máximas.
    """
    return score_from_conflicts(count_pairwise_conflicts(ttable, include_audience=False))


FitnessFunction = Callable[[Timetable, ProblemDefinition], FitnessScore]

FITNESS_FUNCTIONS: Dict[str, FitnessFunction] = {
    "full": evaluate,
    "pairwise": evaluate_pairwise,
}


def get_fitness_function(name: str) -> FitnessFunction:
    try:
        return FITNESS_FUNCTIONS[name]
    except KeyError:
        raise ConfigurationError(f"fitness_mode desconocido: {name!r}") from None
