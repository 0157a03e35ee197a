import logging
from dataclasses import dataclass, field, asdict
from typing import Callable, Dict, List, Optional, Tuple
import numpy as np

from .config import GAConfig
from .errors import ConfigurationError
from .evaluation import get_fitness_function
from .initial_population import generate_random_population
from .model import FitnessScore, Population, ProblemDefinition, Timetable
from .operators import CROSSOVER_MIN_SUBJECTS, crossover, mutate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationReport:
    generation: int         # 1-based
    best_fitness: float     # mejor de esta generación
    best_so_far: float
    avg_fitness: float


@dataclass
class SolveResult:
    best: Timetable
    fitness: FitnessScore
    history: List[Dict] = field(default_factory=list)

    @property
    def generations_ran(self) -> int:
        return len(self.history)


class GeneticScheduler:
    def __init__(
        self,
        problem: ProblemDefinition,
        cfg: Optional[GAConfig] = None,
        rng: Optional[np.random.Generator] = None,
        on_generation: Optional[Callable[[GenerationReport], None]] = None,
    ):
        self.problem = problem
        self.cfg = (cfg or GAConfig()).validate()
        self.rng = rng if rng is not None else np.random.default_rng(self.cfg.seed)
        self.on_generation = on_generation
        self.fitness = get_fitness_function(self.cfg.fitness_mode)

        # Con menos de 3 materias no hay cruce de dos puntos posible
        self.crossover_enabled = problem.n_subjects >= CROSSOVER_MIN_SUBJECTS
        if not self.crossover_enabled:
            logger.warning(
                "Cruce deshabilitado: %d materias (mínimo %d)",
                problem.n_subjects,
                CROSSOVER_MIN_SUBJECTS,
            )
        logger.debug(
            "GeneticScheduler: %d materias, fitness=%s, reproducción=%s",
            problem.n_subjects,
            self.cfg.fitness_mode,
            self.cfg.reproduction,
        )

    def _pick_parents(self, population: Population) -> Tuple[Timetable, Timetable]:
        p1 = population[self.rng.integers(len(population))]
        p2 = population[self.rng.integers(len(population))]
        return p1, p2

    def _mutate(self, ttable: Timetable) -> Timetable:
        return mutate(ttable, self.problem, self.rng, self.cfg.gene_mutation_rate)

    def _offspring_gated(self, p1: Timetable, p2: Timetable) -> List[Timetable]:
        if self.crossover_enabled and self.rng.random() < self.cfg.crossover_probability:
            children = list(crossover(p1, p2, self.problem, self.rng))
        else:
            # Sin cruce, los padres pasan tal cual
            children = [p1, p2]

        if self.rng.random() < self.cfg.mutation_general_probability:
            for i in range(len(children)):
                if self.rng.random() < self.cfg.mutation_probability:
                    children[i] = self._mutate(children[i])
        return children

    def _offspring_legacy(self, p1: Timetable, p2: Timetable) -> List[Timetable]:
        children = [p1, p2]
        if self.crossover_enabled:
            children = list(crossover(p1, p2, self.problem, self.rng))
        return [self._mutate(child) for child in children]

    def next_population(self, population: Population, population_size: int) -> Population:
        breed = self._offspring_legacy if self.cfg.reproduction == "legacy" else self._offspring_gated
        new_pop: List[Timetable] = []
        while len(new_pop) < population_size:
            p1, p2 = self._pick_parents(population)
            new_pop.extend(breed(p1, p2))
        return tuple(new_pop[:population_size])

    def _report(self, report: GenerationReport, generations: int, history: List[Dict]) -> None:
        history.append(asdict(report))
        if report.generation % self.cfg.log_every == 0 or report.generation in (1, generations):
            logger.info(
                "Gen %d: Mejor fitness=%.5f Mejor global=%.5f Promedio=%.5f",
                report.generation,
                report.best_fitness,
                report.best_so_far,
                report.avg_fitness,
            )
        if self.on_generation is not None:
            self.on_generation(report)

    def solve(
        self,
        population_size: Optional[int] = None,
        generations: Optional[int] = None,
    ) -> SolveResult:
        population_size = self.cfg.population_size if population_size is None else population_size
        generations = self.cfg.generations if generations is None else generations
        for name, value in (("population_size", population_size), ("generations", generations)):
            if value < 1:
                raise ConfigurationError(f"{name} debe ser positivo, no {value!r}")

        history: List[Dict] = []
        population = generate_random_population(self.problem, population_size, self.rng)
        best_global: Optional[Timetable] = None
        best_fitness = 0.0

        for gen in range(generations):
            scores = [self.fitness(ind, self.problem) for ind in population]
            # max + index: ante empate gana el primero
            best_idx = int(np.argmax(scores))
            if scores[best_idx] > best_fitness:
                best_fitness = scores[best_idx]
                best_global = population[best_idx]

            self._report(
                GenerationReport(
                    generation=gen + 1,
                    best_fitness=scores[best_idx],
                    best_so_far=best_fitness,
                    avg_fitness=float(np.mean(scores)),
                ),
                generations,
                history,
            )

            population = self.next_population(population, population_size)

        return SolveResult(best=best_global, fitness=best_fitness, history=history)


def solve_timetable(
    problem: ProblemDefinition,
    population_size: int,
    generations: int,
    **kwargs,
) -> Tuple[Timetable, FitnessScore]:
    result = GeneticScheduler(problem, **kwargs).solve(population_size, generations)
    return result.best, result.fitness
