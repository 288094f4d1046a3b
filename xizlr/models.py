"""
Core HTTP message models for the dispatcher.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass
class Request:
    """Represents an HTTP request."""

    method: HTTPMethod
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    query_params: Optional[Dict[str, str]] = None
    path_params: Optional[Dict[str, str]] = None

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a header value using a case-insensitive name lookup."""
        name_lower = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name_lower:
                return value
        return default

    def get_accept_header(self) -> str:
        """Get the Accept header, defaulting to */* if not present."""
        return self.get_header("Accept", "*/*") or "*/*"

    def get_content_type(self) -> Optional[str]:
        """Get the Content-Type header."""
        return self.get_header("Content-Type")

    def get_json(self) -> Any:
        """Decode the body as JSON, returning None for an empty body."""
        if not self.body:
            return None
        return json.loads(self.body)


@dataclass
class Response:
    """Represents an HTTP response.

    Controllers receive a fresh response for every dispatch and either fill it
    in and return it, or return a response of their own.
    """

    status_code: int = 200
    body: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    content_type: Optional[str] = None
    request: Optional[Request] = None

    def __post_init__(self):
        if self.headers is None:
            self.headers = {}

        if self.content_type:
            self.headers["Content-Type"] = self.content_type

    def set_header(self, name: str, value: str) -> None:
        if self.headers is None:
            self.headers = {}
        self.headers[name] = value

    def set_content_type(self, content_type: str) -> None:
        self.content_type = content_type
        self.set_header("Content-Type", content_type)

    def set_json(self, data: Any, status_code: Optional[int] = None) -> "Response":
        """Serialize data as the JSON body of this response.

        Args:
            data: Any JSON serializable value
            status_code: Optional status code to set at the same time

        Returns:
            This response, so controllers can ``return response.set_json(...)``
        """
        self.body = json.dumps(data)
        self.set_content_type("application/json")
        if status_code is not None:
            self.status_code = status_code
        return self

    def get_body_bytes(self) -> bytes:
        """Encode the body for the wire."""
        if self.body is None:
            return b""
        if isinstance(self.body, bytes):
            return self.body
        return str(self.body).encode("utf-8")
