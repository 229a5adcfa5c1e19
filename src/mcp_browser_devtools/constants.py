"""
Global constants and configuration defaults.
No dependencies - safe to import from anywhere.
"""

import os

# ============================================================================
# Script Evaluation
# ============================================================================

SCRIPT_TIMEOUT_MS = 30_000
"""Upper bound for compiling and, separately, for running an evaluate_script function."""


# ============================================================================
# Post-action Settling (WaitForHelper)
# ============================================================================

STABLE_DOM_TIMEOUT_MS = int(os.getenv("MBD_STABLE_DOM_TIMEOUT_MS", "3000"))
"""Give up waiting for a quiet DOM after this many milliseconds."""

STABLE_DOM_FOR_MS = int(os.getenv("MBD_STABLE_DOM_FOR_MS", "100"))
"""The DOM counts as stable once no mutation was observed for this long."""

EXPECT_NAVIGATION_IN_MS = int(os.getenv("MBD_EXPECT_NAVIGATION_IN_MS", "100"))
"""How long after an action a navigation may start and still be awaited."""

NAVIGATION_TIMEOUT_MS = int(os.getenv("MBD_NAVIGATION_TIMEOUT_MS", "3000"))
"""How long to wait for a navigation triggered by an action to load."""


# ============================================================================
# Snapshot Rendering
# ============================================================================

SNAPSHOT_MAX_NAME_CHARS = int(os.getenv("MBD_SNAPSHOT_MAX_NAME_CHARS", "100"))
"""Accessible names longer than this are truncated in snapshots."""


__all__ = [
    "SCRIPT_TIMEOUT_MS",
    "STABLE_DOM_TIMEOUT_MS",
    "STABLE_DOM_FOR_MS",
    "EXPECT_NAVIGATION_IN_MS",
    "NAVIGATION_TIMEOUT_MS",
    "SNAPSHOT_MAX_NAME_CHARS",
]
