"""
Pagecache — Request Context

The HTTP request collaborator consumed by key construction and targeted
invalidation. Built by the host application, usually from a WSGI environ.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

HTTP = "http"
HTTPS = "https"


def is_https(environ: Mapping[str, Any]) -> bool:
    """Resolve the request scheme, honoring a forwarded-protocol header."""
    if environ.get("HTTP_X_FORWARDED_PROTO") == HTTPS:
        return True
    https = str(environ.get("HTTPS", "")).lower()
    if https in ("on", "1"):
        return True
    return environ.get("wsgi.url_scheme") == HTTPS


@dataclass(frozen=True)
class RequestContext:
    """Scheme, host and path of the request being cached."""

    scheme: str = HTTP
    host: str = ""
    path: str = "/"

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> RequestContext:
        """
        Build a context from a WSGI/CGI style environ.

        Path is REQUEST_URI when the server provides it, otherwise
        PATH_INFO plus the query string.
        """
        scheme = HTTPS if is_https(environ) else HTTP
        host = environ.get("HTTP_HOST") or environ.get("SERVER_NAME", "")

        path = environ.get("REQUEST_URI")
        if not path:
            path = environ.get("PATH_INFO") or "/"
            query = environ.get("QUERY_STRING")
            if query:
                path = f"{path}?{query}"

        return cls(scheme=scheme, host=host, path=path)

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"
