"""Composite external identifiers.

A resource is tracked locally by a single string built from its remote key parts.
The layout of each kind is an ordered list of part names, e.g. a Neptune cluster
endpoint is ``CLUSTER-ID:CLUSTER-ENDPOINT-ID``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .errors import MalformedIdentifierError

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_SEPARATOR: Final[str] = ":"


@dataclass(frozen=True, slots=True)
class IdentifierFormat:
    """Ordered part names plus the separator joining them."""

    parts: tuple[str, ...]
    separator: str = DEFAULT_SEPARATOR

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError("identifier format needs at least one part")

    @property
    def arity(self) -> int:
        return len(self.parts)

    @property
    def layout(self) -> str:
        return self.separator.join(self.parts)

    def encode(self, parts: Sequence[str]) -> str:
        """Join ``parts`` into an identifier.

        Precondition: no part contains the separator. This is not checked here;
        remote key parts of the supported kinds cannot contain it.
        """

        if len(parts) != self.arity:
            raise ValueError(f"expected {self.arity} identifier parts, got {len(parts)}")
        return self.separator.join(parts)

    def decode(self, identifier: str) -> tuple[str, ...]:
        # Single-part identifiers (ARNs) may legitimately contain the separator.
        parts = (identifier,) if self.arity == 1 else tuple(identifier.split(self.separator))
        if len(parts) != self.arity or not all(parts):
            raise MalformedIdentifierError(
                f"unexpected format for ID ({identifier}), expected {self.layout}",
                identifier=identifier,
            )
        return parts
