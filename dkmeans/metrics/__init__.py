from .timers import StepTimings, Timer

__all__ = [
    "Timer",
    "StepTimings",
]
