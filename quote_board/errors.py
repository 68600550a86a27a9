"""Errors raised by the quote store."""


class QuoteBoardError(Exception):
    """Base class for recoverable, per-operation failures."""


class ValidationError(QuoteBoardError):
    """A write was rejected before commit.

    ``errors`` maps an attribute name to its messages, e.g.
    ``{"name": ["can't be blank"], "company": ["must exist"]}``.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__("; ".join(self.full_messages))

    @property
    def full_messages(self) -> list[str]:
        return [
            f"{attribute.replace('_', ' ').capitalize()} {message}"
            for attribute, messages in self.errors.items()
            for message in messages
        ]


class NotFoundError(QuoteBoardError):
    def __init__(self, model: str, record_id: object) -> None:
        self.model = model
        self.record_id = record_id
        super().__init__(f"{model} with id={record_id} not found")
