# genetic_scheduler/initial_population.py
import numpy as np

from .errors import ConfigurationError
from .model import Lesson, Population, ProblemDefinition, Timetable


def random_lesson(subject: str, problem: ProblemDefinition, rng: np.random.Generator) -> Lesson:
    # Sin conocimiento de restricciones: las violaciones las penaliza el fitness
    teacher = problem.teachers[rng.integers(len(problem.teachers))]
    group = problem.groups[rng.integers(len(problem.groups))]
    time = int(rng.integers(1, problem.classes_per_day + 1))
    audience = None
    if problem.audiences_modeled:
        audience = problem.audiences[rng.integers(len(problem.audiences))]
    return Lesson(subject=subject, teacher=teacher, group=group, time=time, audience=audience)


def generate_random_timetable(problem: ProblemDefinition, rng: np.random.Generator) -> Timetable:
    return Timetable(tuple(random_lesson(subject, problem, rng) for subject in problem.subjects))


def generate_random_population(
    problem: ProblemDefinition,
    size: int,
    rng: np.random.Generator,
) -> Population:
    if size < 1:
        raise ConfigurationError("El tamaño de población debe ser positivo")
    return tuple(generate_random_timetable(problem, rng) for _ in range(size))
