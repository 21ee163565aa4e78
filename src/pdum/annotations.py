"""
Local annotations attached to envelopes after verification.

Provenance and profile are not part of the signed payload, so they are kept
here keyed by signature instead of on the immutable Envelope.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from pdum.models.capsule import Born, Profile
from pdum.models.envelope import Envelope


class Origin(BaseModel):
    """Author provenance: address plus the parent signatures that created it."""
    address: str
    signatures: list[str] = Field(default_factory=list)

    @classmethod
    def from_born(cls, born: Born) -> "Origin":
        return cls(address=born.addr, signatures=list(born.sigs))


def _key(envelope: Union[Envelope, str]) -> str:
    return envelope.signature if isinstance(envelope, Envelope) else envelope


class AnnotationStore:
    def __init__(self) -> None:
        self._provenance: dict[str, Origin] = {}
        self._profiles: dict[str, Profile] = {}

    def set_provenance(self, envelope: Union[Envelope, str], origin: Origin) -> None:
        self._provenance[_key(envelope)] = origin

    def set_profile(self, envelope: Union[Envelope, str], profile: Profile) -> None:
        self._profiles[_key(envelope)] = profile

    def provenance(self, envelope: Union[Envelope, str]) -> Optional[Origin]:
        return self._provenance.get(_key(envelope))

    def profile(self, envelope: Union[Envelope, str]) -> Optional[Profile]:
        return self._profiles.get(_key(envelope))

    def discard(self, envelope: Union[Envelope, str]) -> None:
        key = _key(envelope)
        self._provenance.pop(key, None)
        self._profiles.pop(key, None)

    def __contains__(self, envelope: Union[Envelope, str]) -> bool:
        key = _key(envelope)
        return key in self._provenance or key in self._profiles
