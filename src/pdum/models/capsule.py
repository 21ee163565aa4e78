"""
Capsule and body models — the two JSON layers nested inside Envelope.content.

content (base64) -> {"t": int, "v": int, "d": base64}
d (base64)       -> {"text": str, "quote": str|null, "resources": [...]}
"""

from typing import Optional

from pydantic import BaseModel, Field

CAPSULE_VERSION = 1


class CapsuleType:
    INFO = 0
    BORN = 1
    PROFILE = 2


class ResourceFormat:
    """Known resource format tags. Unknown integers are kept as they are."""
    IMAGE = 1


class Capsule(BaseModel):
    t: int
    v: int
    d: str


class Resource(BaseModel):
    format: int
    data: Optional[bytes] = None  # None means fetch it from url
    url: str
    cs: str

    @property
    def inline(self) -> bool:
        return self.data is not None


class Body(BaseModel):
    text: str = ""
    quote: Optional[str] = None
    resources: list[Resource] = Field(default_factory=list)


class Born(BaseModel):
    """Body of a BORN capsule: the new individual's address and its parents' signatures."""
    addr: str
    sigs: list[str] = Field(default_factory=list)


class Profile(BaseModel):
    """Body of a PROFILE capsule."""
    name: str = ""
    email: str = ""
    bio: str = ""
    url: str = ""
    location: str = ""
    avatar: Optional[Resource] = None
    extra: str = ""
