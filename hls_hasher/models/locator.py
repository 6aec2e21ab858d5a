"""Locators name a playlist or segment either on disk or on the network."""

from __future__ import annotations

import os
import posixpath
from enum import Enum
from urllib.parse import urlsplit, urlunsplit
from urllib.request import url2pathname

from pydantic import BaseModel

from ..errors import ResolveFailure

NETWORK_SCHEMES = ("http://", "https://")
FILE_SCHEME = "file://"


class LocatorKind(str, Enum):
    NETWORK = "network"
    FILESYSTEM = "filesystem"


class Locator(BaseModel):
    """A path or URL whose kind is fixed when the root locator is parsed."""

    kind: LocatorKind
    value: str

    @classmethod
    def parse(cls, value: str | Locator) -> Locator:
        """Builds a locator from user input, sniffing the scheme prefix once."""

        if isinstance(value, Locator):
            return value
        raw = (value or "").strip()
        if not raw:
            raise ResolveFailure("Empty locator")
        lowered = raw.lower()
        if lowered.startswith(NETWORK_SCHEMES):
            _split_url(raw)
            return cls(kind=LocatorKind.NETWORK, value=raw)
        if lowered.startswith(FILE_SCHEME):
            return cls(kind=LocatorKind.FILESYSTEM, value=url2pathname(urlsplit(raw).path))
        return cls(kind=LocatorKind.FILESYSTEM, value=raw)

    @property
    def is_network(self) -> bool:
        return self.kind is LocatorKind.NETWORK

    @property
    def name(self) -> str:
        """Last path segment, used in log messages."""

        if self.is_network:
            return posixpath.basename(_split_url(self.value).path)
        return os.path.basename(self.value)

    def directory(self) -> Locator:
        """Returns the locator of the folder that contains this one."""

        if self.is_network:
            parts = _split_url(self.value)
            path = parts.path.rsplit("/", 1)[0] + "/" if "/" in parts.path else "/"
            return Locator(
                kind=self.kind,
                value=urlunsplit((parts.scheme, parts.netloc, path, "", "")),
            )
        return Locator(kind=self.kind, value=os.path.dirname(self.value) or ".")

    def resolve(self, reference: str) -> Locator:
        """Joins a reference found in a playlist onto this (directory) locator."""

        if not reference or not reference.strip():
            raise ResolveFailure(f"Empty reference relative to {self.value}")
        reference = reference.strip()
        if reference.lower().startswith(NETWORK_SCHEMES):
            _split_url(reference)
            return Locator(kind=LocatorKind.NETWORK, value=reference)

        if self.is_network:
            base = _split_url(self.value)
            try:
                ref = urlsplit(reference)
            except ValueError as exc:
                raise ResolveFailure(f"Malformed reference {reference!r}: {exc}") from exc
            if ref.netloc:
                return Locator(
                    kind=self.kind,
                    value=urlunsplit((base.scheme, ref.netloc, ref.path or "/", ref.query, "")),
                )
            joined = posixpath.normpath(posixpath.join(base.path or "/", ref.path))
            if joined.startswith("//"):
                joined = "/" + joined.lstrip("/")
            return Locator(
                kind=self.kind,
                value=urlunsplit((base.scheme, base.netloc, joined, ref.query, "")),
            )
        return Locator(kind=self.kind, value=os.path.normpath(os.path.join(self.value, reference)))

    def __str__(self) -> str:
        return self.value


def _split_url(value: str):
    try:
        parts = urlsplit(value)
    except ValueError as exc:
        raise ResolveFailure(f"Malformed URL {value!r}: {exc}") from exc
    if not parts.netloc:
        raise ResolveFailure(f"URL {value!r} has no host")
    return parts
