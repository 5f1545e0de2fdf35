"""Roggler Selection Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.selection.machine import (
    SelectionState,
    SelectionStateMachine,
    SelectionCommit,
    PendingSelection,
    ExpandedGroup,
)

__all__ = [
    "SelectionState",
    "SelectionStateMachine",
    "SelectionCommit",
    "PendingSelection",
    "ExpandedGroup",
]
