"""Core modules for seedkit.

This package contains the bootstrap pipeline:
- config: Configuration loading and saving
- workspace: Clone candidate resolution
- acquire: Clone cascade
- vendor: Core package vendoring
- materialize: Post-clone project pipeline
- bootstrap: Orchestration state machine
"""

from seedkit.core.config import (
    ConfigError,
    SeedConfig,
    ConfigManager,
    check_value,
)

from seedkit.core.workspace import (
    CandidateKind,
    CloneCandidate,
    RepositoryIdentifier,
    WorkspaceLocator,
    resolve_workspace_root,
)

from seedkit.core.acquire import (
    AcquisitionError,
    AcquisitionResult,
    CloneAttempt,
    SourceAcquirer,
)

from seedkit.core.vendor import (
    VendorError,
    vendor_core_packages,
)

from seedkit.core.materialize import (
    MaterializeError,
    MaterializeReport,
    OverrideBlock,
    ProjectMaterializer,
)

from seedkit.core.bootstrap import (
    BootstrapError,
    BootstrapOutcome,
    BootstrapState,
    ProjectBootstrapper,
    build_bootstrapper,
)

__all__ = [
    # Config
    "ConfigError",
    "SeedConfig",
    "ConfigManager",
    "check_value",
    # Workspace
    "CandidateKind",
    "CloneCandidate",
    "RepositoryIdentifier",
    "WorkspaceLocator",
    "resolve_workspace_root",
    # Acquisition
    "AcquisitionError",
    "AcquisitionResult",
    "CloneAttempt",
    "SourceAcquirer",
    # Vendoring
    "VendorError",
    "vendor_core_packages",
    # Materialization
    "MaterializeError",
    "MaterializeReport",
    "OverrideBlock",
    "ProjectMaterializer",
    # Bootstrap
    "BootstrapError",
    "BootstrapOutcome",
    "BootstrapState",
    "ProjectBootstrapper",
    "build_bootstrapper",
]
