"""Trial module - Setup, population and teardown of one sweep point."""

from roadbench_core.trial.orchestrator import TRIAL_PREFIX, Trial, TrialState

__all__ = ["TRIAL_PREFIX", "Trial", "TrialState"]
