"""Exception hierarchy for harvest runs."""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for errors that abort a harvest run."""


class TransportError(HarvestError):
    """Network or HTTP failure while talking to an upstream source."""

    def __init__(self, url: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status_code = status_code


class DecodeError(HarvestError):
    """The dashboard response could not be decoded without misaligning columns."""
