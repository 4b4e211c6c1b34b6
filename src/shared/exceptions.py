"""Error kinds shared by the ordering and catalogue domains.

Not-found and validation failures use Protean's own exceptions
(``ObjectNotFoundError`` and ``ValidationError``). The two kinds below
specialise Protean exceptions so callers can catch either the specific kind or
the Protean base.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class InvalidStateError(InvalidOperationError):
    """The operation is not permitted from the aggregate's current state."""


class ConflictError(ValidationError):
    """A uniqueness rule (SKU, barcode, order number) was violated."""


# Status codes the HTTP collaborator is expected to return for each kind.
# Order matters: subclasses before their Protean bases.
HTTP_STATUS_FOR = (
    (ConflictError, 409),
    (ObjectNotFoundError, 404),
    (InvalidStateError, 400),
    (ValidationError, 400),
)


def http_status_for(exc: Exception) -> int | None:
    for exc_cls, status in HTTP_STATUS_FOR:
        if isinstance(exc, exc_cls):
            return status
    return None
