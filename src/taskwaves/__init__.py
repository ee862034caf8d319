"""taskwaves: dependency-aware parallelization planner for task lists."""

from taskwaves.config import VERSION

__version__ = VERSION
