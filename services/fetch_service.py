"""Fetch pipeline orchestration for /fetch requests."""

from fastapi import Response

from core.classify import ResponseClassifier
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import (
    AssemblyFailure,
    FetchRequest,
    PreparedRequest,
    ResourceKind,
    UpstreamResponse,
)
from core.rewrite import ManifestRewriter
from services.assembler import assemble_response


class FetchService:
    """Prepare upstream requests and turn upstream responses into proxy responses."""

    def __init__(
        self,
        logger: RequestLogger,
        header_builder: HeaderBuilder,
        classifier: ResponseClassifier,
        rewriter: ManifestRewriter,
    ) -> None:
        self._logger = logger
        self._headers = header_builder
        self._classifier = classifier
        self._rewriter = rewriter

    def prepare(self, request: FetchRequest) -> PreparedRequest:
        """Attach outbound headers to the validated target."""
        return PreparedRequest(request.target, self._headers.build_upstream_headers(request))

    def render(
        self,
        request: FetchRequest,
        upstream: UpstreamResponse,
    ) -> Response | AssemblyFailure:
        """Classify, rewrite playlists, and assemble the outgoing response."""
        if upstream.status_code == 410:
            self._logger.log_gone(str(upstream.url), dict(upstream.headers))

        classification = self._classifier.classify(request.target, upstream.headers)
        self._logger.log_fetch(str(request.target), classification.kind, upstream.status_code)

        body: str | bytes
        if classification.kind is ResourceKind.PLAYLIST:
            # Resolve against the final URL so redirected playlists keep working
            body = self._rewriter.render(upstream.text(), upstream.url)
        else:
            body = upstream.content

        return assemble_response(upstream.status_code, classification, body)
