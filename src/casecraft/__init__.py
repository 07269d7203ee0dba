"""
Casecraft - convention-driven test execution engine.

This package provides tools to:
- Discover test classes and cases by pluggable, data-driven conventions
- Run each class's cases under a pluggable lifecycle strategy
- Record pass/fail/skip outcomes, captured output and every raised fault
- Stream structured events to any number of listeners
"""

__version__ = "0.1.0"
__author__ = "Casecraft Team"

from casecraft.core import (
    AssertionLibraryFilter,
    CaseInvocation,
    CaseStatus,
    Convention,
    CreateInstancePerCase,
    DiscoveryConfig,
    ExecutionConfig,
    ExecutionSummary,
    Lifecycle,
    Runner,
    TestName,
    TestPool,
    default_convention,
)
from casecraft.markers import cases, skip
from casecraft.messaging import Bus, Listener

__all__ = [
    "AssertionLibraryFilter",
    "Bus",
    "CaseInvocation",
    "CaseStatus",
    "Convention",
    "CreateInstancePerCase",
    "DiscoveryConfig",
    "ExecutionConfig",
    "ExecutionSummary",
    "Lifecycle",
    "Listener",
    "Runner",
    "TestName",
    "TestPool",
    "cases",
    "default_convention",
    "skip",
]
