import unittest
import numpy as np

from genetic_scheduler.config import GAConfig
from genetic_scheduler.errors import ConfigurationError
from genetic_scheduler.evaluation import evaluate, evaluate_pairwise
from genetic_scheduler.ga import GeneticScheduler, solve_timetable
from genetic_scheduler.initial_population import generate_random_population
from genetic_scheduler.model import ProblemDefinition
from genetic_scheduler.operators import two_point_crossover


def disjoint_problem(n: int = 6) -> ProblemDefinition:
    subjects = [f"S{i}" for i in range(n)]
    teachers = [f"T{i}" for i in range(n)]
    groups = [f"G{i}" for i in range(n)]
    return ProblemDefinition(
        subjects=subjects,
        teachers=teachers,
        groups=groups,
        audiences=[f"A{i}" for i in range(n)],
        classes_per_day=5,
        teacher_subjects={t: [s] for t, s in zip(teachers, subjects)},
        group_subjects={g: [s] for g, s in zip(groups, subjects)},
        teacher_max_hours={t: 20 for t in teachers},
    )


def single_choice_problem(subjects) -> ProblemDefinition:
    return ProblemDefinition(
        subjects=subjects,
        teachers=["T"],
        groups=["G"],
        audiences=["A"],
        classes_per_day=1,
        teacher_subjects={"T": subjects},
        group_subjects={"G": subjects},
    )


class EngineScenarioTests(unittest.TestCase):
    def test_single_assignment_problem(self):
        # Una sola asignación posible: todos los candidatos son idénticos
        problem = single_choice_problem(["Analisis", "Algebra"])
        solver = GeneticScheduler(problem, GAConfig(seed=1))
        result = solver.solve(population_size=10, generations=3)
        self.assertEqual(result.best.subjects(), ("Analisis", "Algebra"))
        # Misma hora y mismo grupo/docente/aula: un choque por el único par
        self.assertEqual(result.fitness, 0.5)
        self.assertEqual(result.fitness, evaluate(result.best, problem))

    def test_single_subject_problem_is_conflict_free(self):
        problem = single_choice_problem(["Analisis"])
        best, fitness = solve_timetable(problem, population_size=4, generations=2, cfg=GAConfig(seed=0))
        self.assertEqual(fitness, 1.0)
        self.assertEqual(len(best), 1)

    def test_best_so_far_never_regresses(self):
        problem = disjoint_problem()
        reports = []
        solver = GeneticScheduler(problem, GAConfig(seed=7), on_generation=reports.append)
        result = solver.solve(population_size=50, generations=10)

        self.assertEqual([r.generation for r in reports], list(range(1, 11)))
        best_seen = [r.best_so_far for r in reports]
        self.assertEqual(best_seen, sorted(best_seen))
        self.assertEqual(result.fitness, best_seen[-1])
        self.assertEqual(result.fitness, max(r.best_fitness for r in reports))
        self.assertEqual(result.fitness, evaluate(result.best, problem))
        self.assertEqual(result.generations_ran, 10)
        self.assertEqual(len(result.best), len(problem.subjects))

    def test_seeded_runs_are_reproducible(self):
        problem = disjoint_problem()
        r1 = GeneticScheduler(problem, GAConfig(seed=11)).solve(30, 5)
        r2 = GeneticScheduler(problem, GAConfig(seed=11)).solve(30, 5)
        self.assertEqual(r1.best, r2.best)
        self.assertEqual(r1.history, r2.history)

    def test_injected_rng_is_used(self):
        problem = disjoint_problem()
        r1 = GeneticScheduler(problem, rng=np.random.default_rng(3)).solve(20, 4)
        r2 = GeneticScheduler(problem, rng=np.random.default_rng(3)).solve(20, 4)
        self.assertEqual(r1.best, r2.best)


class EngineMechanicsTests(unittest.TestCase):
    def test_next_population_has_exact_size(self):
        problem = disjoint_problem()
        solver = GeneticScheduler(problem, GAConfig(seed=2))
        population = generate_random_population(problem, 7, solver.rng)
        new_pop = solver.next_population(population, 7)
        self.assertEqual(len(new_pop), 7)
        for ttable in new_pop:
            self.assertEqual(ttable.subjects(), problem.subjects)

    def test_no_crossover_no_mutation_copies_parents(self):
        problem = disjoint_problem()
        cfg = GAConfig(seed=4, crossover_probability=0.0, mutation_general_probability=0.0)
        solver = GeneticScheduler(problem, cfg)
        population = generate_random_population(problem, 10, solver.rng)
        for ttable in solver.next_population(population, 10):
            self.assertIn(ttable, population)

    def test_forced_mutation_replaces_every_offspring(self):
        problem = disjoint_problem()
        cfg = GAConfig(
            seed=4,
            crossover_probability=0.0,
            mutation_general_probability=1.0,
            mutation_probability=1.0,
            gene_mutation_rate=1.0,
        )
        solver = GeneticScheduler(problem, cfg)
        population = generate_random_population(problem, 10, solver.rng)
        for child in solver.next_population(population, 10):
            self.assertFalse(any(child is parent for parent in population))
            self.assertEqual(child.subjects(), problem.subjects)

    def test_open_gate_without_offspring_mutation_keeps_parents(self):
        problem = disjoint_problem()
        cfg = GAConfig(
            seed=4,
            crossover_probability=0.0,
            mutation_general_probability=1.0,
            mutation_probability=0.0,
        )
        solver = GeneticScheduler(problem, cfg)
        population = generate_random_population(problem, 10, solver.rng)
        for child in solver.next_population(population, 10):
            self.assertTrue(any(child is parent for parent in population))

    def test_forced_crossover_yields_segment_swaps(self):
        problem = disjoint_problem()
        cfg = GAConfig(seed=6, crossover_probability=1.0, mutation_general_probability=0.0)
        solver = GeneticScheduler(problem, cfg)
        n = problem.n_subjects
        cuts = [(p1, p2) for p1 in range(1, n - 1) for p2 in range(p1 + 1, n)]
        for _ in range(20):
            p1, p2 = generate_random_population(problem, 2, solver.rng)
            children = tuple(solver._offspring_gated(p1, p2))
            self.assertTrue(any(two_point_crossover(p1, p2, a, b) == children for a, b in cuts))

    def test_solve_keeps_no_history_between_runs(self):
        solver = GeneticScheduler(disjoint_problem(), GAConfig(seed=8))
        first = solver.solve(population_size=10, generations=3)
        second = solver.solve(population_size=10, generations=2)
        self.assertEqual(len(first.history), 3)
        self.assertEqual(len(second.history), 2)
        self.assertFalse(hasattr(solver, "history"))

    def test_crossover_disabled_for_two_subjects(self):
        problem = single_choice_problem(["Analisis", "Algebra"])
        solver = GeneticScheduler(problem, GAConfig(seed=0, crossover_probability=1.0))
        self.assertFalse(solver.crossover_enabled)
        population = generate_random_population(problem, 6, solver.rng)
        self.assertEqual(len(solver.next_population(population, 6)), 6)

    def test_legacy_variant(self):
        problem = disjoint_problem()
        cfg = GAConfig(seed=9, fitness_mode="pairwise", reproduction="legacy")
        result = GeneticScheduler(problem, cfg).solve(20, 5)
        self.assertEqual(result.fitness, evaluate_pairwise(result.best, problem))
        self.assertGreater(result.fitness, 0.0)

    def test_invalid_sizes(self):
        solver = GeneticScheduler(disjoint_problem(), GAConfig(seed=0))
        with self.assertRaises(ConfigurationError):
            solver.solve(population_size=0, generations=1)
        with self.assertRaises(ConfigurationError):
            solver.solve(population_size=5, generations=0)

    def test_invalid_config_rejected_at_construction(self):
        with self.assertRaises(ConfigurationError):
            GeneticScheduler(disjoint_problem(), GAConfig(crossover_probability=1.5))
        with self.assertRaises(ConfigurationError):
            GeneticScheduler(disjoint_problem(), GAConfig(fitness_mode="otro"))


if __name__ == "__main__":
    unittest.main()
