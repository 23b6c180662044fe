"""Export/import bundle combining progress and settings."""

from datetime import datetime

from pydantic import Field

from vocab_drill.models.base import DocumentModel, LocalDatetime
from vocab_drill.models.progress import LearnerProgress
from vocab_drill.models.settings import LearnerSettings

BUNDLE_VERSION = "1.0"


class ExportBundle(DocumentModel):
    """Everything needed to move a learner profile elsewhere."""

    progress: LearnerProgress
    settings: LearnerSettings
    export_date: LocalDatetime = Field(default_factory=datetime.now)
    version: str = BUNDLE_VERSION
