"""Envelope identity, transport parsing, annotations and composition."""

import pytest
from pydantic import ValidationError

from pdum import (
    AnnotationStore,
    Body,
    Born,
    Envelope,
    Origin,
    Profile,
    SigningError,
    compose_envelope,
    decode_body,
    decode_capsule,
    parse_envelope,
)


class FakeSigner:
    def __init__(self, signature: str = "c2ln"):
        self.signature = signature
        self.calls = []

    def sign(self, private_key_hex, message, reference):
        self.calls.append((private_key_hex, message, reference))
        return self.signature

    def derive_address(self, private_key_hex):
        return "0xAF040ed5498F9808550402ebB6C193E2a73b860a"

    def generate_key_pair(self):
        return "00" * 32

    def create_keystore(self, private_key_hex, password):
        return "{}"

    def open_keystore(self, keystore_json, password):
        return "00" * 32

    def recover_address(self, signed_payload):
        return "0xAF040ed5498F9808550402ebB6C193E2a73b860a"


class TestEnvelope:
    def test_identity_is_signature(self, hello_content):
        a = Envelope(content=hello_content, refs=["r1"], signature="same")
        b = Envelope(content="b3RoZXI=", refs=[], signature="same")
        # same signature, different content: one envelope for caches
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1
        assert a.id == "same"

    def test_different_signature(self, hello_content):
        a = Envelope(content=hello_content, signature="one")
        b = Envelope(content=hello_content, signature="two")
        assert a != b

    def test_fields_cannot_be_reassigned(self, hello_content):
        env = Envelope(content=hello_content, refs=["r1"], signature="sig")
        with pytest.raises(ValidationError):
            env.content = "eA=="
        with pytest.raises(ValidationError):
            env.signature = "other"
        assert env.references == ("r1",)

    def test_content_and_signature_required(self):
        with pytest.raises(ValidationError):
            Envelope(content="", signature="sig")
        with pytest.raises(ValidationError):
            Envelope(content="eA==", signature="")

    def test_wire_form(self, hello_content):
        env = Envelope(content=hello_content, references=["a", "b"], signature="sig")
        assert env.to_wire() == {"content": hello_content, "refs": ["a", "b"], "signature": "sig"}


class TestParseEnvelope:
    def test_valid(self, hello_content):
        env = parse_envelope({"content": hello_content, "refs": ["a"], "signature": "sig"})
        assert env is not None
        assert env.references == ("a",)

    def test_null_refs(self, hello_content):
        env = parse_envelope({"content": hello_content, "refs": None, "signature": "sig"})
        assert env.references == ()

    @pytest.mark.parametrize("raw", [
        None,
        [],
        {"refs": [], "signature": "sig"},
        {"content": "eA==", "refs": []},
        {"content": 5, "refs": [], "signature": "sig"},
    ])
    def test_invalid(self, raw):
        assert parse_envelope(raw) is None


class TestAnnotations:
    def test_side_table_keyed_by_signature(self, hello_content):
        env = Envelope(content=hello_content, signature="sig")
        store = AnnotationStore()
        assert env not in store
        assert store.provenance(env) is None

        origin = Origin.from_born(Born(addr="0xabc", sigs=["p1"]))
        store.set_provenance(env, origin)
        store.set_profile("sig", Profile(name="alice"))

        assert env in store
        assert store.provenance("sig") == Origin(address="0xabc", signatures=["p1"])
        assert store.profile(env).name == "alice"

        store.discard(env)
        assert env not in store
        assert store.profile(env) is None


class TestCompose:
    def test_compose_signs_encoded_content(self):
        signer = FakeSigner()
        env = compose_envelope(signer, "aa" * 32, Body(text="Hello World!!"), reference="cmVm")
        assert env.signature == "c2ln"
        assert env.references == ("cmVm",)
        assert signer.calls == [("aa" * 32, env.content, "cmVm")]
        assert decode_body(decode_capsule(env)).text == "Hello World!!"

    def test_without_reference(self):
        env = compose_envelope(FakeSigner(), "aa" * 32, Body(text="x"))
        assert env.references == ()

    def test_empty_signature(self):
        with pytest.raises(SigningError):
            compose_envelope(FakeSigner(signature=""), "bad", Body(text="x"))
