from __future__ import annotations

import httpx
import pytest
from pydantic import BaseModel

from coreclient.decoder import decode_body, decode_response
from coreclient.exceptions import APIResponseError, DecodeError


class Item(BaseModel):
    name: str
    count: int


#################################
#     Tests for decode_body     #
#################################


def test_decode_body_model() -> None:
    assert decode_body('{"name": "a", "count": 2}', Item) == Item(name="a", count=2)


def test_decode_body_container() -> None:
    assert decode_body(b'{"x": {"name": "a", "count": 1}}', dict[str, Item]) == {
        "x": Item(name="a", count=1)
    }


def test_decode_body_invalid_json() -> None:
    with pytest.raises(DecodeError, match=r"failed to decode Item from /items") as exc_info:
        decode_body("{not json", Item, path="/items")
    assert exc_info.value.body == "{not json"


def test_decode_body_wrong_shape() -> None:
    with pytest.raises(DecodeError, match=r"failed to decode list"):
        decode_body('{"a": 1}', list[str])


#####################################
#     Tests for decode_response     #
#####################################


def test_decode_response_success() -> None:
    response = httpx.Response(200, json={"name": "a", "count": 3})
    assert decode_response(response, Item, path="/items") == Item(name="a", count=3)


def test_decode_response_without_shape_returns_response() -> None:
    response = httpx.Response(200, text="raw")
    assert decode_response(response) is response


def test_decode_response_failure_raises() -> None:
    response = httpx.Response(500, text="boom", headers={"Response-Code": "501"})
    with pytest.raises(APIResponseError, match=r"request to /items failed with boom") as exc_info:
        decode_response(response, Item, path="/items")
    assert exc_info.value.status_code == 500
    assert exc_info.value.response_code == 501


def test_decode_response_failure_not_raising_decodes() -> None:
    response = httpx.Response(404, json=["a"])
    assert decode_response(response, list[str], raises=False) == ["a"]


def test_decode_response_failure_not_raising_without_shape() -> None:
    response = httpx.Response(404)
    assert decode_response(response, raises=False) is response


def test_decode_response_malformed_success_is_decode_error() -> None:
    response = httpx.Response(200, text="[1, 2")
    with pytest.raises(DecodeError):
        decode_response(response, list[int], path="/numbers")
