"""
pdum — signed pdu envelopes for Python.

Decode and encode the layered base64/JSON content of signed envelopes,
and exchange them with a pdu node over HTTP.
"""

from pdum.models.envelope import Envelope, parse_envelope
from pdum.models.capsule import (
    CAPSULE_VERSION,
    Body,
    Born,
    Capsule,
    CapsuleType,
    Profile,
    Resource,
    ResourceFormat,
)
from pdum.codec import (
    DecodedEnvelope,
    build_content,
    decode_body,
    decode_born,
    decode_capsule,
    decode_profile,
    decode_resources,
    encode_body,
    encode_capsule,
)
from pdum.annotations import AnnotationStore, Origin
from pdum.signer import Signer, compose_envelope
from pdum.errors import (
    PdumError,
    DecodeError,
    InvalidBase64,
    InvalidJson,
    MissingField,
    TypeMismatch,
    ResourceDecodeError,
    CapsuleTypeMismatch,
    EnvelopeError,
    SigningError,
    HttpError,
    ConnectionError,
)

__version__ = "0.1.0"
__all__ = [
    "Envelope",
    "parse_envelope",
    "CAPSULE_VERSION",
    "Body",
    "Born",
    "Capsule",
    "CapsuleType",
    "Profile",
    "Resource",
    "ResourceFormat",
    "DecodedEnvelope",
    "build_content",
    "decode_body",
    "decode_born",
    "decode_capsule",
    "decode_profile",
    "decode_resources",
    "encode_body",
    "encode_capsule",
    "AnnotationStore",
    "Origin",
    "Signer",
    "compose_envelope",
    "PdumError",
    "DecodeError",
    "InvalidBase64",
    "InvalidJson",
    "MissingField",
    "TypeMismatch",
    "ResourceDecodeError",
    "CapsuleTypeMismatch",
    "EnvelopeError",
    "SigningError",
    "HttpError",
    "ConnectionError",
]
