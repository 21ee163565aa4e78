"""
Layered payload codec for Envelope.content.

Decoding runs in two stages, content -> Capsule -> Body, and each stage raises
a DecodeError subclass instead of returning partial data. Encoding writes
compact JSON with a fixed key order so the same body always yields the same
content string.
"""

import base64
import binascii
import json
import logging
from typing import Any, Optional, Union

from pdum.errors import (
    CapsuleTypeMismatch,
    DecodeError,
    InvalidBase64,
    InvalidJson,
    MissingField,
    ResourceDecodeError,
    TypeMismatch,
)
from pdum.models.capsule import CAPSULE_VERSION, Body, Born, Capsule, CapsuleType, Profile, Resource
from pdum.models.envelope import Envelope

logger = logging.getLogger(__name__)

_MISSING = object()


def _b64decode(value: str, field: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidBase64(field) from exc


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _load_object(value: Any, field: str) -> dict[str, Any]:
    if not isinstance(value, str):
        raise TypeMismatch(field, "a base64 string")
    raw = _b64decode(value, field)
    try:
        obj = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # deeply nested arrays exhaust the parser's recursion limit
        raise InvalidJson(field) from exc
    if not isinstance(obj, dict):
        raise InvalidJson(field)
    return obj


def _dump(obj: dict[str, Any]) -> str:
    return _b64encode(json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))


def _require(obj: dict[str, Any], name: str) -> Any:
    value = obj.get(name, _MISSING)
    if value is _MISSING:
        raise MissingField(name)
    return value


def _int(obj: dict[str, Any], name: str) -> int:
    value = _require(obj, name)
    # JSON true/false must not pass as 1/0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatch(name, "an integer")
    return value


def _str(obj: dict[str, Any], name: str) -> str:
    value = _require(obj, name)
    if not isinstance(value, str):
        raise TypeMismatch(name, "a string")
    return value


def _optional_str(obj: dict[str, Any], name: str) -> Optional[str]:
    value = obj.get(name)
    if value is not None and not isinstance(value, str):
        raise TypeMismatch(name, "a string or null")
    return value


def _content_of(source: Union[Envelope, str]) -> str:
    return source.content if isinstance(source, Envelope) else source


# --- decoding -----------------------------------------------------------------


def decode_capsule(content: Union[Envelope, str]) -> Capsule:
    """Stage 1: content -> Capsule. Tags are not interpreted here."""
    obj = _load_object(_content_of(content), "content")
    return Capsule(t=_int(obj, "t"), v=_int(obj, "v"), d=_str(obj, "d"))


def decode_resource(obj: Any) -> Resource:
    if not isinstance(obj, dict):
        raise TypeMismatch("resource", "an object")
    fmt = _int(obj, "format")
    data = obj.get("data")
    if data is not None:
        if not isinstance(data, str):
            raise TypeMismatch("data", "a base64 string or null")
        data = _b64decode(data, "data")
    return Resource(format=fmt, data=data, url=_str(obj, "url"), cs=_str(obj, "cs"))


def decode_body(capsule: Union[Capsule, str]) -> Body:
    """Stage 2: Capsule.d -> Body.

    Any malformed resource fails the whole body with ResourceDecodeError; a
    shortened resource list is never returned.
    """
    d = capsule.d if isinstance(capsule, Capsule) else capsule
    obj = _load_object(d, "d")
    text = _str(obj, "text")
    quote = _optional_str(obj, "quote")
    entries = _require(obj, "resources")
    if not isinstance(entries, list):
        raise TypeMismatch("resources", "an array")

    resources = []
    for index, entry in enumerate(entries):
        try:
            resources.append(decode_resource(entry))
        except DecodeError as e:
            logger.debug("resource %d rejected: %s", index, e)
            raise ResourceDecodeError(index, e) from e
    return Body(text=text, quote=quote, resources=resources)


def decode_resources(content: Union[Envelope, str]) -> list[Resource]:
    return decode_body(decode_capsule(content)).resources


def _expect_type(capsule: Capsule, expected: int) -> None:
    if capsule.t != expected:
        raise CapsuleTypeMismatch(expected, capsule.t)


def decode_born(capsule: Capsule) -> Born:
    _expect_type(capsule, CapsuleType.BORN)
    obj = _load_object(capsule.d, "d")
    sigs = obj.get("sigs")
    if sigs is None:
        sigs = []
    if not isinstance(sigs, list) or not all(isinstance(s, str) for s in sigs):
        raise TypeMismatch("sigs", "an array of strings")
    return Born(addr=_str(obj, "addr"), sigs=sigs)


def decode_profile(capsule: Capsule) -> Profile:
    _expect_type(capsule, CapsuleType.PROFILE)
    obj = _load_object(capsule.d, "d")
    fields = {}
    for name in ("name", "email", "bio", "url", "location", "extra"):
        fields[name] = _optional_str(obj, name) or ""
    avatar = obj.get("avatar")
    return Profile(avatar=decode_resource(avatar) if avatar is not None else None, **fields)


# --- encoding -----------------------------------------------------------------


def _resource_object(resource: Resource) -> dict[str, Any]:
    return {
        "format": resource.format,
        "data": _b64encode(resource.data) if resource.data is not None else None,
        "url": resource.url,
        "cs": resource.cs,
    }


def body_object(body: Body) -> dict[str, Any]:
    """Wire form of a body, before the base64 step. Key order: text, quote, resources."""
    return {
        "text": body.text,
        "quote": body.quote,
        "resources": [_resource_object(r) for r in body.resources],
    }


def encode_body(body: Body) -> str:
    """Body -> base64 blob for Capsule.d."""
    return _dump(body_object(body))


def encode_born(born: Born) -> str:
    return _dump({"addr": born.addr, "sigs": list(born.sigs)})


def encode_profile(profile: Profile) -> str:
    return _dump({
        "name": profile.name,
        "email": profile.email,
        "bio": profile.bio,
        "url": profile.url,
        "location": profile.location,
        "avatar": _resource_object(profile.avatar) if profile.avatar is not None else None,
        "extra": profile.extra,
    })


def encode_capsule(capsule: Capsule) -> str:
    """Capsule -> content string. Key order: t, v, d."""
    return _dump({"t": capsule.t, "v": capsule.v, "d": capsule.d})


def build_content(
    body: Union[Body, Born, Profile],
    t: Optional[int] = None,
    v: int = CAPSULE_VERSION,
) -> str:
    """Wrap a body in a capsule and return the content string ready for signing."""
    if isinstance(body, Born):
        d, default_t = encode_born(body), CapsuleType.BORN
    elif isinstance(body, Profile):
        d, default_t = encode_profile(body), CapsuleType.PROFILE
    else:
        d, default_t = encode_body(body), CapsuleType.INFO
    return encode_capsule(Capsule(t=default_t if t is None else t, v=v, d=d))


# --- cached view --------------------------------------------------------------


class DecodedEnvelope:
    """Read-side view over one envelope; each layer is decoded at most once.

    Failures are not cached, so a malformed envelope raises on every access.
    Two threads racing on first access may both decode; the results are equal.
    Results are memoised per instance, so no lock is shared between views.
    """

    def __init__(self, envelope: Envelope):
        self.envelope = envelope
        self._capsule: Optional[Capsule] = None
        self._body: Optional[Body] = None

    @property
    def signature(self) -> str:
        return self.envelope.signature

    @property
    def capsule(self) -> Capsule:
        if self._capsule is None:
            self._capsule = decode_capsule(self.envelope.content)
        return self._capsule

    @property
    def body(self) -> Body:
        if self._body is None:
            self._body = decode_body(self.capsule)
        return self._body

    @property
    def resources(self) -> list[Resource]:
        return self.body.resources

    def try_body(self) -> Optional[Body]:
        """Body, or None when the envelope does not decode."""
        try:
            return self.body
        except DecodeError as e:
            logger.debug("envelope %s does not decode: %s", self.envelope.signature, e)
            return None
