"""Construction of the outgoing /fetch response."""

from fastapi import Response

from core.classify import CDN_CACHE_CONTROL
from core.request_types import AssemblyFailure, ClassificationResult


def assemble_response(
    status_code: int,
    classification: ClassificationResult,
    body: str | bytes,
) -> Response | AssemblyFailure:
    """Mirror the upstream status with the classified headers and body."""
    try:
        return Response(
            content=body,
            status_code=status_code,
            headers={
                "content-type": classification.content_type,
                "cache-control": classification.cache_control,
                CDN_CACHE_CONTROL: classification.cdn_cache_control,
            },
        )
    except UnicodeEncodeError as e:
        return AssemblyFailure(detail=str(e))
