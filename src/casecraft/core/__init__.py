"""Core discovery and execution engine."""

from casecraft.core.models import CaseExecution, CaseStatus, ExecutionSummary
from casecraft.core.exceptions import (
    AssertionLibraryFilter,
    CaseFailure,
    CasecraftError,
    CompoundException,
    ConfigurationError,
    DiscoveryError,
    ListenerError,
    classify,
)
from casecraft.core.case import Case, CaseInvocation, Method, UncallableParameterizedCase
from casecraft.core.convention import (
    Convention,
    CreateInstancePerCase,
    DiscoveryConfig,
    ExecutionConfig,
    Lifecycle,
    default_convention,
)
from casecraft.core.discovery import ClassDiscoverer, TestClass
from casecraft.core.class_runner import ClassRunner
from casecraft.core.runner import Runner, TestName, TestPool

__all__ = [
    "AssertionLibraryFilter",
    "Case",
    "CaseExecution",
    "CaseFailure",
    "CaseInvocation",
    "CaseStatus",
    "CasecraftError",
    "ClassDiscoverer",
    "ClassRunner",
    "CompoundException",
    "ConfigurationError",
    "Convention",
    "CreateInstancePerCase",
    "DiscoveryConfig",
    "DiscoveryError",
    "ExecutionConfig",
    "ExecutionSummary",
    "Lifecycle",
    "ListenerError",
    "Method",
    "Runner",
    "TestClass",
    "TestName",
    "TestPool",
    "UncallableParameterizedCase",
    "classify",
    "default_convention",
]
