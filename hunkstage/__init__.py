"""hunkstage - stage, unstage and discard git changes one hunk at a time.

A small layered package following:
- Domain Modeling: Parse-once pattern with type-safe models
- Services Pattern: Core services with dependency injection
- CLI Architecture: Single entry point dispatcher with explicit parameters

Usage:
    python -m hunkstage <command> [options]
    hunkstage <command> [options]

Structure:
    hunkstage/
    ├── __main__.py          # Entry point dispatcher
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── diff.py          # DiffDocument, Hunk, build_patch
    │   ├── status.py        # RepositoryState, FileChange
    │   ├── view.py          # ViewData, ViewMessage
    │   └── config.py        # StagingConfig (.hunkstage.yml)
    ├── services/            # Staging logic
    │   ├── change_applier.py
    │   ├── refresh_coordinator.py
    │   ├── staging_controller.py
    │   └── view_loader.py
    ├── infrastructure/      # External system interactions
    │   ├── git/             # Command runner, repository backend, errors
    │   └── output.py        # Text and JSON formatting
    └── commands/            # Thin command orchestrators
"""

__version__ = "0.1.0"
