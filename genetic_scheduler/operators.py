from typing import Tuple
import numpy as np

from .errors import InvalidConfiguration
from .initial_population import random_lesson
from .model import ProblemDefinition, Timetable

CROSSOVER_MIN_SUBJECTS = 3
GENE_MUTATION_RATE = 0.1


def choose_cut_points(n_subjects: int, rng: np.random.Generator) -> Tuple[int, int]:
    """Puntos de corte 1 <= p1 < p2 <= n-1."""
    if n_subjects < CROSSOVER_MIN_SUBJECTS:
        raise InvalidConfiguration(
            f"El cruce de dos puntos necesita al menos {CROSSOVER_MIN_SUBJECTS} materias, hay {n_subjects}"
        )
    p1 = int(rng.integers(1, n_subjects - 1))
    p2 = int(rng.integers(p1 + 1, n_subjects))
    return p1, p2


def two_point_crossover(
    parent_a: Timetable,
    parent_b: Timetable,
    p1: int,
    p2: int,
) -> Tuple[Timetable, Timetable]:
    """Intercambia el segmento [p1, p2) entre ambos padres."""
    if len(parent_a) != len(parent_b):
        raise InvalidConfiguration("Los padres deben tener la misma cantidad de clases")
    if not 0 < p1 < p2 <= len(parent_a):
        raise InvalidConfiguration(f"Puntos de corte inválidos: ({p1}, {p2})")
    child_a = parent_a[:p1] + parent_b[p1:p2] + parent_a[p2:]
    child_b = parent_b[:p1] + parent_a[p1:p2] + parent_b[p2:]
    return Timetable(child_a), Timetable(child_b)


def crossover(
    parent_a: Timetable,
    parent_b: Timetable,
    problem: ProblemDefinition,
    rng: np.random.Generator,
) -> Tuple[Timetable, Timetable]:
    p1, p2 = choose_cut_points(problem.n_subjects, rng)
    return two_point_crossover(parent_a, parent_b, p1, p2)


def mutate(
    ttable: Timetable,
    problem: ProblemDefinition,
    rng: np.random.Generator,
    rate: float = GENE_MUTATION_RATE,
) -> Timetable:
    """Remuestrea docente, grupo, hora y aula de cada gen con probabilidad `rate`."""
    return Timetable(tuple(
        random_lesson(lesson.subject, problem, rng) if rng.random() < rate else lesson
        for lesson in ttable
    ))
