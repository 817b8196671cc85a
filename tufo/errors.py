"""Error taxonomy shared by the services, the importer and the API."""


class TufoError(Exception):
    """Base class for catalog errors."""


class NotFoundError(TufoError):
    """A requested area, climb or name does not exist."""


class ValidationFailure(TufoError):
    """Malformed input: blank field, bad media type, video too long, ..."""


class TransientFetchError(TufoError):
    """Network error, timeout, non-success status or malformed payload from OpenBeta.

    These are retried by the client before being surfaced.
    """


class GraphQLError(TufoError):
    """OpenBeta answered, but with a GraphQL ``errors`` list."""

    def __init__(self, errors: list):
        self.errors = errors
        messages = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
        super().__init__(f"GraphQL error: {'; '.join(messages)}")
