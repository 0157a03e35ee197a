# genetic_scheduler/model.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError

FitnessScore = float


@dataclass(frozen=True)
class Lesson:
    # Un gen: la materia es posicional, el resto se asigna
    subject: str
    teacher: str
    group: str
    time: int                       # 1..classes_per_day
    audience: Optional[str] = None  # None si no se modelan aulas


@dataclass(frozen=True)
class Timetable:
    lessons: Tuple[Lesson, ...]

    def __len__(self) -> int:
        return len(self.lessons)

    def __iter__(self) -> Iterator[Lesson]:
        return iter(self.lessons)

    def __getitem__(self, idx: Union[int, slice]):
        return self.lessons[idx]

    def subjects(self) -> Tuple[str, ...]:
        return tuple(lesson.subject for lesson in self.lessons)


Population = Tuple[Timetable, ...]


def _as_catalog(name: str, values: Iterable[str]) -> Tuple[str, ...]:
    items = tuple(values)
    if len(set(items)) != len(items):
        raise ConfigurationError(f"'{name}' contiene valores duplicados")
    return items


@dataclass(frozen=True)
class ProblemDefinition:
    """
    Instancia del problema compartida por todos los operadores de una corrida.

    Los catálogos se guardan como tuplas (el orden de ``subjects`` fija la
    posición de cada gen). Los mapas de restricciones quedan de solo lectura.
    Se valida al construir: cada docente y cada grupo del catálogo debe tener
    su entrada en teacher_subjects / group_subjects.
    """

    subjects: Tuple[str, ...]
    teachers: Tuple[str, ...]
    groups: Tuple[str, ...]
    classes_per_day: int
    teacher_subjects: Mapping[str, FrozenSet[str]]
    group_subjects: Mapping[str, FrozenSet[str]]
    teacher_max_hours: Mapping[str, int] = field(default_factory=dict)
    audiences: Tuple[str, ...] = ()

    def __post_init__(self):
        # dataclass congelada: normalizamos con object.__setattr__
        for name in ("subjects", "teachers", "groups", "audiences"):
            object.__setattr__(self, name, _as_catalog(name, getattr(self, name)))
        for name in ("subjects", "teachers", "groups"):
            if not getattr(self, name):
                raise ConfigurationError(f"'{name}' no puede estar vacío")

        if isinstance(self.classes_per_day, bool) or not isinstance(self.classes_per_day, int):
            raise ConfigurationError("classes_per_day debe ser un entero")
        if self.classes_per_day < 1:
            raise ConfigurationError("classes_per_day debe ser positivo")

        teacher_subjects = {k: frozenset(v) for k, v in self.teacher_subjects.items()}
        group_subjects = {k: frozenset(v) for k, v in self.group_subjects.items()}
        missing_teachers = [t for t in self.teachers if t not in teacher_subjects]
        if missing_teachers:
            raise ConfigurationError(f"Docentes sin teacher_subjects: {missing_teachers}")
        missing_groups = [g for g in self.groups if g not in group_subjects]
        if missing_groups:
            raise ConfigurationError(f"Grupos sin group_subjects: {missing_groups}")

        max_hours: Dict[str, int] = {}
        for teacher, hours in self.teacher_max_hours.items():
            if isinstance(hours, bool) or not isinstance(hours, int) or hours < 0:
                raise ConfigurationError(f"teacher_max_hours inválido para {teacher}: {hours!r}")
            max_hours[teacher] = hours

        object.__setattr__(self, "teacher_subjects", MappingProxyType(teacher_subjects))
        object.__setattr__(self, "group_subjects", MappingProxyType(group_subjects))
        object.__setattr__(self, "teacher_max_hours", MappingProxyType(max_hours))

    @property
    def audiences_modeled(self) -> bool:
        return bool(self.audiences)

    @property
    def n_subjects(self) -> int:
        return len(self.subjects)
