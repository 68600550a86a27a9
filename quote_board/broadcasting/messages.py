"""Wire format of live list updates."""

from enum import StrEnum
from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from quote_board.broadcasting.renderer import render_turbo_stream
from quote_board.events import CommitKind

# DOM id of the list container that new quotes are prepended to
LIST_TARGET = "quotes"


class Insertion(StrEnum):
    """How a subscriber applies a message to its list."""

    PREPEND = "prepend"
    REPLACE = "replace"
    REMOVE = "remove"


INSERTION_BY_KIND: dict[CommitKind, Insertion] = {
    CommitKind.CREATED: Insertion.PREPEND,
    CommitKind.UPDATED: Insertion.REPLACE,
    CommitKind.DELETED: Insertion.REMOVE,
}


class BroadcastMessage(BaseModel):
    """One committed write, as published to a channel.

    ``target_id`` is the quote id; ``html_fragment`` is None only for deletes.
    """

    model_config = ConfigDict(frozen=True)

    kind: CommitKind
    target_id: str
    html_fragment: str | None
    insertion: Insertion

    @model_validator(mode="after")
    def _check_directive(self) -> Self:
        if self.insertion != INSERTION_BY_KIND[self.kind]:
            expected = INSERTION_BY_KIND[self.kind]
            raise ValueError(f"{self.kind} messages must use insertion={expected}")
        if self.kind == CommitKind.DELETED and self.html_fragment is not None:
            raise ValueError("deleted messages carry no html_fragment")
        if self.kind != CommitKind.DELETED and self.html_fragment is None:
            raise ValueError(f"{self.kind} messages require an html_fragment")
        return self

    @property
    def dom_id(self) -> str:
        return f"quote_{self.target_id}"

    def to_turbo_stream(self, list_target: str = LIST_TARGET) -> str:
        """Render as a ``<turbo-stream>`` element.

        Prepends target the list container; replace and remove target the
        quote's own element.
        """
        target = list_target if self.insertion == Insertion.PREPEND else self.dom_id
        return render_turbo_stream(str(self.insertion), target, self.html_fragment)
