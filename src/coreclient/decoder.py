r"""Decode raw Core responses into typed values.

A response is either decoded into the requested shape, returned as-is,
or turned into an ``APIResponseError``. A body that does not match the
requested shape raises ``DecodeError``, which is a local error and not
part of the remote failure taxonomy.
"""

from __future__ import annotations

__all__ = ["decode_body", "decode_response"]

import functools
import logging
from typing import Any, TypeVar, overload

import httpx
from pydantic import TypeAdapter, ValidationError

from coreclient.exceptions import APIResponseError, DecodeError

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=128)
def _type_adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def decode_body(body: str | bytes, shape: type[T] | Any, path: str = "") -> T:
    r"""Parse a JSON body into ``shape``.

    Args:
        body: The JSON document.
        shape: The target type, e.g. a pydantic model, ``list[str]`` or
            ``dict[str, Model]``.
        path: The request path, used in the error message.

    Returns:
        The decoded value.

    Raises:
        DecodeError: If the body is not valid JSON or does not match the
            shape.

    Example:
        ```pycon
        >>> from coreclient.decoder import decode_body
        >>> decode_body('["a", "b"]', list[str])
        ['a', 'b']

        ```
    """
    try:
        return _type_adapter(shape).validate_json(body)
    except ValidationError as exc:
        text = body.decode(errors="replace") if isinstance(body, bytes) else body
        location = f" from {path}" if path else ""
        msg = f"failed to decode {_shape_name(shape)}{location}: {exc}"
        logger.debug(msg)
        raise DecodeError(msg, body=text) from exc


@overload
def decode_response(
    response: httpx.Response, shape: None = None, *, raises: bool = True, path: str = ""
) -> httpx.Response: ...


@overload
def decode_response(
    response: httpx.Response, shape: type[T] | Any, *, raises: bool = True, path: str = ""
) -> T: ...


def decode_response(
    response: httpx.Response,
    shape: type[T] | Any | None = None,
    *,
    raises: bool = True,
    path: str = "",
) -> T | httpx.Response:
    r"""Turn a response into a decoded value or an error.

    Args:
        response: The response.
        shape: Optional target type. If ``None``, the response is
            returned untouched.
        raises: If ``True``, a non-success response raises instead of
            being decoded.
        path: The request path, used in error messages.

    Returns:
        The decoded value, or the response if ``shape`` is ``None``.

    Raises:
        APIResponseError: If the response is not a success and
            ``raises`` is ``True``.
        DecodeError: If the body does not match ``shape``.

    Example:
        ```pycon
        >>> import httpx
        >>> from coreclient.decoder import decode_response
        >>> decode_response(httpx.Response(200, json={"a": 1}), dict[str, int])
        {'a': 1}
        >>> decode_response(httpx.Response(404), raises=False).status_code
        404

        ```
    """
    if not response.is_success and raises:
        response.read()
        raise APIResponseError.from_response(path, response)
    if shape is None:
        return response
    return decode_body(response.read(), shape, path=path)


def _shape_name(shape: Any) -> str:
    return getattr(shape, "__name__", None) or repr(shape)
