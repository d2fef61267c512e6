from .simulated import SimulatedWorkoutBackend

__all__ = ["SimulatedWorkoutBackend"]
