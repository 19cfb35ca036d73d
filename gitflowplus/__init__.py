"""gitflowplus - a git branching workflow with feature, test, release and hotfix branches.

Moves work from feature branches through a shared test branch into develop
and finally into a tagged master, checking local and remote state before
every step.
"""

__version__ = "0.3.0"

from gitflowplus.config import ConfigStore, FlowSettings, WorkflowConfig
from gitflowplus.constants import BranchType, Bump, MergeDetection
from gitflowplus.exceptions import GitflowError, RecoveryAction
from gitflowplus.flow import WorkflowEngine, guess_new_version
from gitflowplus.interaction import Interaction, RichInteraction
from gitflowplus.markers import MergeConflictMarker
from gitflowplus.recovery import Outcome, run_wrapped

__all__ = [
    "__version__",
    "BranchType",
    "Bump",
    "MergeDetection",
    "GitflowError",
    "RecoveryAction",
    # Configuration
    "ConfigStore",
    "FlowSettings",
    "WorkflowConfig",
    # Engine
    "WorkflowEngine",
    "guess_new_version",
    "MergeConflictMarker",
    # Front end
    "Interaction",
    "RichInteraction",
    "Outcome",
    "run_wrapped",
]
