"""Schema migration for stored progress documents.

Version 1 is the original browser-storage layout: word stats use
``correct``/``incorrect`` keys, per-mode session counters live directly in
``stats`` and there is no ``schemaVersion`` key. Version 2 is the current
:class:`LearnerProgress` layout.
"""

import copy
from typing import Any

import structlog
from pydantic import ValidationError

from vocab_drill.exceptions import MalformedDocument
from vocab_drill.models.progress import SCHEMA_VERSION, LearnerProgress

logger = structlog.get_logger()

# Per-mode counters the first layout kept at the top of ``stats``
_V1_MODE_COUNTERS = {
    "flashcardSessions": "flashcard",
    "quizSessions": "quiz",
    "matchingSessions": "matching",
    "typingSessions": "typing",
    "pronunciationSessions": "pronunciation",
}


def detect_version(raw: dict[str, Any]) -> int:
    """Schema version of a raw progress document.

    Documents without a usable ``schemaVersion`` predate versioning and are
    treated as the first layout.
    """
    version = raw.get("schemaVersion")
    if isinstance(version, int) and not isinstance(version, bool) and version >= 1:
        return version
    return 1


def _migrate_v1(raw: dict[str, Any]) -> dict[str, Any]:
    doc = copy.deepcopy(raw)
    doc.pop("reviewQueue", None)

    # Fields of the wrong JSON type are left as they are for validation to reject
    word_stats = doc.get("wordStats")
    if word_stats is None:
        doc["wordStats"] = word_stats = {}
    if isinstance(word_stats, dict):
        for word_id, stat in list(word_stats.items()):
            if not isinstance(stat, dict):
                del word_stats[word_id]
                continue
            if "correct" in stat:
                stat["correctCount"] = stat.pop("correct") or 0
            if "incorrect" in stat:
                stat["incorrectCount"] = stat.pop("incorrect") or 0
            if stat.get("timesReviewed") is None:
                stat["timesReviewed"] = 0

    stats = doc.get("stats")
    if isinstance(stats, dict):
        by_mode = stats.get("sessionsByMode")
        if by_mode is None:
            by_mode = {}
        if isinstance(by_mode, dict):
            for old_key, mode in _V1_MODE_COUNTERS.items():
                count = stats.pop(old_key, None)
                if isinstance(count, int) and isinstance(by_mode.get(mode, 0), int):
                    by_mode[mode] = by_mode.get(mode, 0) + count
            stats["sessionsByMode"] = by_mode

    # The first layout stored the achievement definitions themselves
    entries = doc.get("achievements")
    if entries is None:
        entries = []
    if isinstance(entries, list):
        achievements = []
        for entry in entries:
            if isinstance(entry, dict) and "id" in entry and "unlockedAt" in entry:
                achievements.append({
                    "id": entry["id"],
                    "name": entry.get("name", entry["id"]),
                    "description": entry.get("description", ""),
                    "icon": entry.get("icon", ""),
                    "unlockedAt": entry["unlockedAt"],
                })
        doc["achievements"] = achievements

    doc["schemaVersion"] = 2
    return doc


_MIGRATIONS = {
    1: _migrate_v1,
}


def _normalise(doc: dict[str, Any]) -> dict[str, Any]:
    """Repair values that are out of range but otherwise usable."""
    word_stats = doc.get("wordStats")
    if isinstance(word_stats, dict):
        for stat in word_stats.values():
            if isinstance(stat, dict) and isinstance(stat.get("difficulty"), (int, float)):
                stat["difficulty"] = max(0, min(5, int(stat["difficulty"])))
    if isinstance(doc.get("streak"), int) and doc["streak"] < 0:
        doc["streak"] = 0
    return doc


def migrate(raw: dict[str, Any]) -> LearnerProgress:
    """Upgrade a raw progress document to the current schema.

    Missing fields take their defaults.

    Raises:
        MalformedDocument: The document cannot be validated even after migration.
    """
    version = detect_version(raw)
    doc = raw
    while version < SCHEMA_VERSION:
        step = _MIGRATIONS[version]
        doc = step(doc)
        logger.info("progress_migrated", from_version=version, to_version=version + 1)
        version += 1
    if version > SCHEMA_VERSION:
        logger.warning("progress_schema_newer", found=version, supported=SCHEMA_VERSION)

    doc = _normalise(copy.deepcopy(doc))
    doc["schemaVersion"] = SCHEMA_VERSION
    try:
        return LearnerProgress.model_validate(doc)
    except ValidationError as e:
        raise MalformedDocument("progress", str(e)) from e
