"""GovContracts — Error types raised across the ingestion run."""


class IngestError(Exception):
    """Base class for classified ingestion failures."""

    kind = "IngestError"

    def __str__(self) -> str:
        return f"{self.kind}: {super().__str__()}"


class ConfigError(IngestError):
    """Required configuration is missing or unsafe. Fatal before the run starts."""

    kind = "ConfigError"


class SchemaError(IngestError):
    """Table bootstrap or migration failed. Aborts the run before fetching."""

    kind = "SchemaError"


class StoreWriteError(IngestError):
    """An insert into the raw store or the audit log failed."""

    kind = "StoreWriteError"

    def __init__(self, message: str, table: str = ""):
        self.table = table
        super().__init__(message)


class ReadError(IngestError):
    """A read-only diagnostic query failed."""

    kind = "ReadError"
