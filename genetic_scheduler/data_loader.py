# genetic_scheduler/data_loader.py
from pathlib import Path
from typing import Any, Dict
import yaml

from .errors import ConfigurationError
from .model import ProblemDefinition

REQUIRED_KEYS = ("subjects", "teachers", "groups", "classes_per_day", "teacher_subjects", "group_subjects")


def problem_from_dict(data: Dict[str, Any]) -> ProblemDefinition:
    if not isinstance(data, dict):
        raise ConfigurationError("El problema debe ser un objeto mapeo")
    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        raise ConfigurationError(f"Faltan claves en el problema: {missing}")
    for key in ("teacher_subjects", "group_subjects", "teacher_max_hours"):
        # teacher_max_hours es opcional y puede venir vacío
        if key == "teacher_max_hours" and data.get(key) is None:
            continue
        if not isinstance(data[key], dict):
            raise ConfigurationError(f"'{key}' debe ser un objeto mapeo")

    return ProblemDefinition(
        subjects=[str(s) for s in data["subjects"]],
        teachers=[str(t) for t in data["teachers"]],
        groups=[str(g) for g in data["groups"]],
        audiences=[str(a) for a in data.get("audiences") or []],
        classes_per_day=data["classes_per_day"],
        teacher_subjects={str(k): [str(s) for s in v] for k, v in data["teacher_subjects"].items()},
        group_subjects={str(k): [str(s) for s in v] for k, v in data["group_subjects"].items()},
        teacher_max_hours={str(k): v for k, v in (data.get("teacher_max_hours") or {}).items()},
    )


def load_problem(path: str) -> ProblemDefinition:
    problem_path = Path(path)
    if not problem_path.exists():
        raise ConfigurationError(f"No existe el archivo de problema: {path}")
    data = yaml.safe_load(problem_path.read_text(encoding="utf-8"))
    return problem_from_dict(data)
