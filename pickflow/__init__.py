"""
Pickflow - Action Selection Resolution Engine

Walks a player through the parameters ("selections") a game declares for an
action at runtime, then submits the completed arguments. The engine provides:
- A tri-state argument store (unset / skipped / set)
- Deterministic next-selection cursor with single-choice auto-fill
- Choice filtering (filterBy, dependsOn, cross-selection exclusion)
- Multi-select accumulation and server-coordinated repeating selections
- A single owned action session with start / cancel / submit transitions
"""

__version__ = "0.1.0"
