from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from olt_graph.domain.pipeline.models import FailureKind, PipelineFailure

ERROR_REGISTRY: dict[str, dict[str, Any]] = {
    "INVALID_INPUT": {
        "status": 400,
        "message": "Image reference is required",
    },
    "IMAGE_NOT_FOUND": {
        "status": 404,
        "message": "Image not found on SmartOLT",
    },
    "UPSTREAM_UNAUTHORIZED": {
        "status": 500,
        "message": "SmartOLT API key is missing, invalid or expired",
    },
    "UPSTREAM_RATE_LIMITED": {
        "status": 429,
        "message": "SmartOLT hourly request limit reached. Try again later.",
    },
    "UPSTREAM_MALFORMED_CONTENT": {
        "status": 502,
        "message": "SmartOLT response is not an image",
    },
    "UPSTREAM_ERROR": {
        "status": 502,
        "message": "Failed to fetch image from SmartOLT",
    },
}

FAILURE_CODES: dict[FailureKind, str] = {
    FailureKind.INVALID_INPUT: "INVALID_INPUT",
    FailureKind.NOT_FOUND: "IMAGE_NOT_FOUND",
    FailureKind.UNAUTHORIZED: "UPSTREAM_UNAUTHORIZED",
    FailureKind.RATE_LIMITED: "UPSTREAM_RATE_LIMITED",
    FailureKind.MALFORMED_CONTENT: "UPSTREAM_MALFORMED_CONTENT",
    FailureKind.UPSTREAM_ERROR: "UPSTREAM_ERROR",
}


def to_http_error(code: str, *, message: str | None = None, status: int | None = None) -> HTTPException:
    meta = ERROR_REGISTRY.get(code, {"status": 500, "message": code})
    status_code = int(status or meta.get("status", 500))
    detail_msg = message or str(meta.get("message", code))
    return HTTPException(status_code=status_code, detail={"code": code, "message": detail_msg})


def failure_to_http_error(failure: PipelineFailure) -> HTTPException:
    return to_http_error(FAILURE_CODES.get(failure.kind, "UPSTREAM_ERROR"), message=failure.message)
