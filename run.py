import argparse
import logging
import time
from pathlib import Path
import pandas as pd

from genetic_scheduler.config import load_config
from genetic_scheduler.data_loader import load_problem
from genetic_scheduler.evaluation import EvaluationResult, evaluate_conflicts
from genetic_scheduler.ga import GeneticScheduler
from genetic_scheduler.model import Timetable


def timetable_to_dataframe(ttable: Timetable) -> pd.DataFrame:
    data = [
        {
            "Materia": lesson.subject,
            "Docente": lesson.teacher,
            "Grupo": lesson.group,
            "Hora": lesson.time,
            "Aula": lesson.audience,
        }
        for lesson in ttable
    ]
    return pd.DataFrame(data, columns=["Materia", "Docente", "Grupo", "Hora", "Aula"])


def export_outputs(df_schedule: pd.DataFrame, eval_res: EvaluationResult, out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    df_schedule.to_csv(out_dir / "schedule.csv", index=False)
    conflicts = pd.DataFrame(
        [
            {"tipo": "pares", "valor": eval_res.pairwise},
            {"tipo": "habilitacion_docente", "valor": eval_res.qualification},
            {"tipo": "plan_grupo", "valor": eval_res.curriculum},
            {"tipo": "exceso_horas", "valor": eval_res.overload},
            {"tipo": "total", "valor": eval_res.conflicts},
        ]
    )
    conflicts.to_csv(out_dir / "conflicts.csv", index=False)


def main():
    parser = argparse.ArgumentParser(description="Búsqueda genética de un horario con pocos conflictos")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--problem", default="data/sample_problem.yaml", help="Archivo YAML con catálogos y restricciones")
    parser.add_argument("--out_dir", default="outputs", help="Directorio de salida de los CSV")
    parser.add_argument("--seed", type=int, default=None, help="Semilla (sobrescribe la del config)")
    parser.add_argument("--log-level", default="INFO", help="Nivel de logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args.config)
    if args.seed is not None:
        cfg.seed = args.seed

    print("Cargando problema...")
    problem = load_problem(args.problem)
    solver = GeneticScheduler(problem, cfg)

    print(f"Generaciones: {cfg.generations} | Población: {cfg.population_size}")
    start = time.perf_counter()
    result = solver.solve()
    elapsed = time.perf_counter() - start

    eval_res = evaluate_conflicts(result.best, problem)
    df_schedule = timetable_to_dataframe(result.best)

    print("\n--- MEJOR HORARIO ---")
    print(df_schedule.to_string(index=False))
    print(f"Fitness: {result.fitness:.5f} | Conflictos: {eval_res.conflicts} | Tiempo: {elapsed:.2f}s")
    print(
        f"pares={eval_res.pairwise} habilitacion={eval_res.qualification} "
        f"plan={eval_res.curriculum} exceso_horas={eval_res.overload}"
    )

    out_dir = Path(args.out_dir)
    export_outputs(df_schedule, eval_res, out_dir)
    if result.history:
        pd.DataFrame(result.history).to_csv(out_dir / "history.csv", index=False)
    metrics = {
        "best_fitness": result.fitness,
        "conflicts": eval_res.conflicts,
        "time_sec": elapsed,
        "generations_ran": result.generations_ran,
    }
    pd.DataFrame([metrics]).to_csv(out_dir / "metrics.csv", index=False)
    print(f"Se guardaron resultados en {out_dir}/schedule.csv y {out_dir}/conflicts.csv")


if __name__ == "__main__":
    main()
