import base64
import json

import pytest


def b64json(obj) -> str:
    return base64.b64encode(json.dumps(obj).encode("utf-8")).decode("ascii")


def make_content(body_obj, t: int = 0, v: int = 1) -> str:
    return b64json({"t": t, "v": v, "d": b64json(body_obj)})


@pytest.fixture
def hello_content() -> str:
    return make_content({"text": "hi", "quote": None, "resources": []}, t=1)
