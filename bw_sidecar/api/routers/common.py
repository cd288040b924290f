"""Shared constants for router composition."""

from typing import Final

ALL_HTTP_METHODS: Final[list[str]] = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
