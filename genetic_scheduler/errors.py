# genetic_scheduler/errors.py


class SchedulerError(Exception):
    """Base error for the timetable optimizer."""


class ConfigurationError(SchedulerError, ValueError):
    """The problem definition or the GA parameters are not usable."""


class InvalidConfiguration(ConfigurationError):
    """An operator was asked to work on a problem it is undefined for."""
