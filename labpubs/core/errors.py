"""Error taxonomy for the publication export run."""


class LabPubsError(Exception):
    """Base class for all errors raised by labpubs."""


# ── Validation (fatal) ───────────────────────────────────────────────


class ItemValidationError(LabPubsError, ValueError):
    """An upstream record does not match the expected item schema."""


class SchemaViolation(ItemValidationError):
    """A required field is missing or malformed."""


class InvalidDateRange(ItemValidationError):
    """The CSL-JSON issued date holds more (or fewer) than one date range."""


# ── Fetching ─────────────────────────────────────────────────────────


class FetchError(LabPubsError):
    """A single item could not be fetched, even after a retry."""

    def __init__(self, key: str, cause: Exception):
        super().__init__(f"Failed to fetch item {key}: {cause}")
        self.key = key
        self.cause = cause


# ── Invariants (fatal) ───────────────────────────────────────────────


class CollectionOverlapError(LabPubsError, AssertionError):
    """The publications and preprints collections share item keys."""

    def __init__(self, keys: set[str]):
        super().__init__(
            f"{len(keys)} item(s) appear in both collections: {', '.join(sorted(keys))}"
        )
        self.keys = keys
