"""
Response envelope normalization.

Upstream endpoints (and the proxy's own error bodies) wrap payloads in one of
a few sibling conventions. Everything is folded into a single ApiResult.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from config.system_constants import INVALID_RESPONSE_MESSAGE, REQUEST_FAILED_MESSAGE


class EnvelopeKind(str, Enum):
    """Known envelope shapes"""
    INVALID = "invalid"  # not a JSON object
    ERRNO = "errno"  # {errno, errmsg, result}
    CODE = "code"  # {code, msg, data}
    RESULT = "result"  # {result}
    DATA = "data"  # {data}
    BARE = "bare"  # the object itself is the payload


@dataclass(frozen=True)
class ApiResult:
    """Canonical {ok, error?, result?} record"""
    ok: bool
    error: Optional[str] = None
    result: Any = None

    @classmethod
    def failure(cls, error: str) -> "ApiResult":
        return cls(ok=False, error=error)

    def to_dict(self) -> dict:
        out = {"ok": self.ok}
        if self.error is not None:
            out["error"] = self.error
        if self.result is not None:
            out["result"] = self.result
        return out


def detect_envelope(payload: Any) -> EnvelopeKind:
    """Classify a parsed JSON value into one of the known envelope shapes."""
    if not isinstance(payload, dict):
        return EnvelopeKind.INVALID
    if "errno" in payload:
        return EnvelopeKind.ERRNO
    if "code" in payload:
        return EnvelopeKind.CODE
    if "result" in payload:
        return EnvelopeKind.RESULT
    if "data" in payload:
        return EnvelopeKind.DATA
    return EnvelopeKind.BARE


def _message(payload: dict, *keys: str) -> str:
    for key in keys:
        value = payload.get(key)
        if value:
            return str(value)
    return REQUEST_FAILED_MESSAGE


def _first_present(payload: dict, *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def normalize_api(payload: Any) -> ApiResult:
    """
    Normalize an upstream JSON value.

    Args:
        payload: Parsed JSON (any type)

    Returns:
        ApiResult; failures carry the envelope's message or "Request failed"
    """
    kind = detect_envelope(payload)

    if kind is EnvelopeKind.INVALID:
        return ApiResult.failure(INVALID_RESPONSE_MESSAGE)

    if kind is EnvelopeKind.ERRNO:
        if payload["errno"] == 0:
            return ApiResult(ok=True, result=_first_present(payload, "result", "data"))
        return ApiResult.failure(_message(payload, "errmsg", "error", "msg"))

    if kind is EnvelopeKind.CODE:
        if payload["code"] == 0:
            return ApiResult(ok=True, result=_first_present(payload, "data", "result"))
        return ApiResult.failure(_message(payload, "msg", "message", "error"))

    if kind is EnvelopeKind.RESULT:
        return ApiResult(ok=True, result=payload["result"])

    if kind is EnvelopeKind.DATA:
        return ApiResult(ok=True, result=payload["data"])

    return ApiResult(ok=True, result=payload)


def safe_list(result: Any) -> List[dict]:
    """Pull a record list out of a result: bare list or {list: [...]}"""
    if not result:
        return []
    if isinstance(result, list):
        return [r for r in result if isinstance(r, dict)]
    if isinstance(result, dict) and isinstance(result.get("list"), list):
        return [r for r in result["list"] if isinstance(r, dict)]
    return []
