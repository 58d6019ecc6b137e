"""Classification of provider failures into ``ErrorKind``."""

import json

import httpx
import openai
from pydantic import ValidationError

from src.models.instructions import TokenUsage
from src.models.provider_result import ErrorKind
from src.parsing.json_extract import JsonExtractionError


class ProviderError(Exception):
    """Failure raised inside an adapter with an explicit kind.

    ``token_usage`` is set when the provider billed the call before it failed.
    """

    def __init__(self, kind: ErrorKind, message: str, token_usage: TokenUsage | None = None):
        super().__init__(message)
        self.kind = kind
        self.token_usage = token_usage


def classify_exception(exc: BaseException) -> ErrorKind:
    """Map an exception raised during a provider call to an error kind.

    Unrecognised exceptions are treated as transport failures.
    """
    if isinstance(exc, ProviderError):
        return exc.kind

    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ErrorKind.AUTH
    if isinstance(exc, openai.RateLimitError):
        return ErrorKind.RATE_LIMITED
    if isinstance(exc, openai.APIError):
        return ErrorKind.TRANSPORT

    if isinstance(exc, httpx.HTTPStatusError):
        return classify_status_code(exc.response.status_code)
    if isinstance(exc, httpx.HTTPError):
        return ErrorKind.TRANSPORT

    if isinstance(exc, (JsonExtractionError, json.JSONDecodeError, ValidationError)):
        return ErrorKind.MALFORMED_RESPONSE

    return ErrorKind.TRANSPORT


def classify_status_code(status_code: int) -> ErrorKind:
    if status_code in (401, 403):
        return ErrorKind.AUTH
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    return ErrorKind.TRANSPORT
