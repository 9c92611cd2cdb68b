"""Rewriting of HLS playlists so every reference routes back through /fetch.

The playlist is handled as plain text, line by line. Directives other than
#EXT-X-KEY are copied through untouched, so unknown or malformed tags survive
the rewrite exactly as the upstream sent them.
"""

from urllib.parse import quote

import httpx

FETCH_PATH = "/fetch"
KEY_DIRECTIVE = "#EXT-X-KEY"
URI_ATTRIBUTE = 'URI="'


def proxied_reference(url: str) -> str:
    """Build a /fetch link carrying url as a single query value."""
    return f"{FETCH_PATH}?url={quote(url, safe='')}"


def split_lines(text: str) -> list[str]:
    """Split on LF, dropping a trailing CR per line and a final empty line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class ManifestRewriter:
    """Rewrite playlist lines relative to the playlist's own URL."""

    def rewrite(self, text: str, base: httpx.URL) -> list[str]:
        """Return the rewritten lines, one per input line, in order."""
        return [self.rewrite_line(line, base) for line in split_lines(text)]

    def render(self, text: str, base: httpx.URL) -> str:
        return "\n".join(self.rewrite(text, base))

    def rewrite_line(self, line: str, base: httpx.URL) -> str:
        if line.startswith(KEY_DIRECTIVE):
            return self._rewrite_key(line, base)
        if line.startswith("#") or not line.strip():
            return line

        resolved = _resolve(base, line.strip())
        if resolved is None:
            return line
        return proxied_reference(resolved)

    def _rewrite_key(self, line: str, base: httpx.URL) -> str:
        """Replace only the quoted URI value of a key directive."""
        start = line.find(URI_ATTRIBUTE)
        if start == -1:
            return line
        start += len(URI_ATTRIBUTE)
        end = line.find('"', start)
        if end == -1:
            end = len(line)

        resolved = _resolve(base, line[start:end])
        if resolved is None:
            return line
        return line[:start] + proxied_reference(resolved) + line[end:]


def _resolve(base: httpx.URL, reference: str) -> str | None:
    """Resolve reference against base; None if it is not a usable URL."""
    try:
        return str(base.join(reference))
    except httpx.InvalidURL:
        return None
