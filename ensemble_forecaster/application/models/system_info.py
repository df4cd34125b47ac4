"""Static deployment facts handed to the system use cases by the container."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit


@dataclass(frozen=True)
class SystemInfo:
    title: str
    description: str
    version: str
    environment: str
    git_commit: str
    build_time: str
    history_source_url: str

    @property
    def public_source_url(self) -> str:
        """The history source URL without any user info it may embed."""
        if not self.history_source_url:
            return self.history_source_url

        parts = urlsplit(self.history_source_url)
        if not (parts.username or parts.password):
            return self.history_source_url

        netloc = parts.hostname or ""
        if parts.port:
            netloc = f"{netloc}:{parts.port}"
        return urlunsplit(
            (parts.scheme, netloc, parts.path, parts.query, parts.fragment)
        )
