"""
Configuración del algoritmo genético.

Incluye un cargador desde YAML para dejar los parámetros reproducibles y
configurables sin tocar el código.
"""
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError

FITNESS_MODES = ("full", "pairwise")
REPRODUCTION_MODES = ("gated", "legacy")


@dataclass
class GAConfig:
    # Algoritmo genético
    population_size: int = 500
    generations: int = 100
    seed: Optional[int] = None  # None -> corrida no reproducible

    # Probabilidades
    crossover_probability: float = 0.8
    mutation_probability: float = 0.1          # por descendiente
    mutation_general_probability: float = 0.8  # puerta de la etapa de mutación
    gene_mutation_rate: float = 0.1            # por gen dentro de mutate()

    # Variantes
    fitness_mode: str = "full"       # "full" | "pairwise" (variante simple)
    reproduction: str = "gated"      # "gated" | "legacy"

    # Observabilidad
    log_every: int = 10

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        return cls(**merged)

    def validate(self) -> "GAConfig":
        for name in ("population_size", "generations", "log_every"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} debe ser un entero positivo, no {value!r}")
        for name in (
            "crossover_probability",
            "mutation_probability",
            "mutation_general_probability",
            "gene_mutation_rate",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} debe estar en [0, 1], no {value!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigurationError(f"seed debe ser un entero o None, no {self.seed!r}")
        if self.fitness_mode not in FITNESS_MODES:
            raise ConfigurationError(f"fitness_mode desconocido: {self.fitness_mode!r}")
        if self.reproduction not in REPRODUCTION_MODES:
            raise ConfigurationError(f"reproduction desconocido: {self.reproduction!r}")
        return self


def _load_yaml(path: Path) -> Any:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


def load_config(path: str = "config.yaml") -> GAConfig:
    cfg_path = Path(path)
    data = _load_yaml(cfg_path)
    if not isinstance(data, dict):
        raise ConfigurationError("config.yaml debe contener un objeto mapeo")
    return GAConfig.from_dict(data).validate()
