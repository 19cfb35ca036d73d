"""Workflow roles and the engine composing them."""

from gitflowplus.flow.core import FlowCore
from gitflowplus.flow.engine import WorkflowEngine, WorkflowStatus
from gitflowplus.flow.feature import FeatureFlow
from gitflowplus.flow.hotfix import HotfixFlow
from gitflowplus.flow.release import ReleaseFlow
from gitflowplus.flow.versioning import guess_new_version

__all__ = [
    "FeatureFlow",
    "FlowCore",
    "HotfixFlow",
    "ReleaseFlow",
    "WorkflowEngine",
    "WorkflowStatus",
    "guess_new_version",
]
