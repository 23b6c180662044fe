"""Error taxonomy for the drilling engine."""


class VocabDrillError(Exception):
    """Base class for all engine errors."""


class StorageUnavailable(VocabDrillError):
    """The persistence medium could not be read or written."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"storage unavailable for {key!r}: {reason}")
        self.key = key
        self.reason = reason


class MalformedDocument(VocabDrillError):
    """A stored document could not be parsed into a JSON object."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"malformed document {key!r}: {reason}")
        self.key = key
        self.reason = reason


class ConditionEvaluationError(VocabDrillError):
    """An achievement condition raised while being evaluated."""

    def __init__(self, achievement_id: str, cause: BaseException):
        super().__init__(f"condition for {achievement_id!r} failed: {cause}")
        self.achievement_id = achievement_id
        self.cause = cause


class InvalidImportBundle(VocabDrillError):
    """An import bundle is missing required fields or fails validation.

    The message is meant to be shown to the learner.
    """
