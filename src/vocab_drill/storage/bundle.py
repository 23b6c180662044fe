"""Export and import of progress + settings bundles."""

import json
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from vocab_drill.exceptions import InvalidImportBundle, MalformedDocument
from vocab_drill.models.bundle import BUNDLE_VERSION, ExportBundle
from vocab_drill.models.progress import LearnerProgress
from vocab_drill.models.settings import LearnerSettings
from vocab_drill.storage.migration import migrate

REQUIRED_FIELDS = ("progress", "settings")


def build_bundle(progress: LearnerProgress, settings: LearnerSettings, now: datetime) -> ExportBundle:
    return ExportBundle(
        progress=progress,
        settings=settings,
        export_date=now,
        version=BUNDLE_VERSION,
    )


def parse_bundle(data: str | bytes | dict[str, Any]) -> ExportBundle:
    """Validate an import bundle.

    Accepts the JSON text of an export or its decoded dict. Older progress
    layouts inside the bundle are migrated.

    Raises:
        InvalidImportBundle: With a message suitable for the learner.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise InvalidImportBundle(f"The file is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise InvalidImportBundle("The file does not contain a progress export.")

    missing = [name for name in REQUIRED_FIELDS if not isinstance(data.get(name), dict)]
    if missing:
        raise InvalidImportBundle(
            f"The export is missing required sections: {', '.join(missing)}."
        )

    try:
        progress = migrate(data["progress"])
    except MalformedDocument as e:
        raise InvalidImportBundle("The progress section could not be read.") from e
    try:
        settings = LearnerSettings.model_validate(data["settings"])
    except ValidationError as e:
        raise InvalidImportBundle("The settings section could not be read.") from e

    fields: dict[str, Any] = {
        "progress": progress,
        "settings": settings,
        "version": str(data.get("version") or BUNDLE_VERSION),
    }
    if data.get("exportDate"):
        fields["exportDate"] = data["exportDate"]
    try:
        return ExportBundle.model_validate(fields)
    except ValidationError as e:
        raise InvalidImportBundle("The export date is not a valid timestamp.") from e
