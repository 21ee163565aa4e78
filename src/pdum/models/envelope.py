"""
Envelope record — the signed unit exchanged with nodes.

Transport form: {"content": <base64>, "refs": [<signature>...], "signature": <string>}
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError


class Envelope(BaseModel):
    """Signed envelope. Identity is the signature; content and refs are covered by it.

    Fields cannot be reassigned once built: changing content or refs means
    signing again, not patching. Two envelopes with the same signature are the
    same envelope even when their content differs, so consumer caches keyed by
    envelope collapse them.
    """

    content: str = Field(min_length=1)
    references: tuple[str, ...] = Field(default=(), alias="refs")
    signature: str = Field(min_length=1)

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def id(self) -> str:
        return self.signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Envelope):
            return NotImplemented
        return self.signature == other.signature

    def __hash__(self) -> int:
        return hash(self.signature)

    def to_wire(self) -> dict[str, Any]:
        return {"content": self.content, "refs": list(self.references), "signature": self.signature}


def parse_envelope(raw: Any) -> Optional[Envelope]:
    """Parse a transport object. Returns None if invalid."""
    if not isinstance(raw, dict):
        return None
    if raw.get("refs") is None and "refs" in raw:
        raw = {**raw, "refs": []}
    try:
        return Envelope.model_validate(raw)
    except ValidationError:
        return None
