"""
Signing collaborator contract.

The cryptography lives outside this package (the mobile build links it from
the node library). Anything implementing Signer can be handed to
compose_envelope.
"""

import logging
from typing import Protocol, Union

from pdum.codec import build_content
from pdum.errors import SigningError
from pdum.models.capsule import Body, Born, Profile
from pdum.models.envelope import Envelope

logger = logging.getLogger(__name__)


class Signer(Protocol):
    def sign(self, private_key_hex: str, message: str, reference: str) -> str: ...

    def derive_address(self, private_key_hex: str) -> str: ...

    def generate_key_pair(self) -> str: ...

    def create_keystore(self, private_key_hex: str, password: str) -> str: ...

    def open_keystore(self, keystore_json: str, password: str) -> str: ...

    def recover_address(self, signed_payload: str) -> str: ...


def compose_envelope(
    signer: Signer,
    private_key_hex: str,
    body: Union[Body, Born, Profile],
    reference: str = "",
) -> Envelope:
    """Encode body into content and sign it together with an optional reference.

    Raises SigningError when the signer returns an empty signature.
    """
    content = build_content(body)
    signature = signer.sign(private_key_hex, content, reference)
    if not signature:
        raise SigningError("signer returned no signature; check the private key")
    refs = (reference,) if reference else ()
    logger.debug("composed envelope %s with %d refs", signature, len(refs))
    return Envelope(content=content, refs=refs, signature=signature)
