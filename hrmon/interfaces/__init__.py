from .batch_listener import BatchListener
from .reading_sink import ReadingSink
from .backend import ActivityConfiguration, WorkoutBackend, Completion

__all__ = ["BatchListener", "ReadingSink", "ActivityConfiguration", "WorkoutBackend", "Completion"]
