"""Contributor records and the id-keyed contributor directory."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel


class Contributor(BaseModel):
    """An author or reviewer, keyed by ``id`` in the data directory."""

    model_config = {"frozen": True}

    id: str
    name: str
    title: str = ""
    country: str = ""
    homepage: str | None = None
    twitter: str | None = None
    github: str | None = None
    image: str | None = None
    description: str = ""

    @property
    def href(self) -> str:
        """Site-relative profile URL."""
        return f"/authors/{self.id}/"


class ContributorDirectory(Mapping[str, Contributor]):
    """Read-only mapping of contributor id to :class:`Contributor`."""

    def __init__(self, contributors: Mapping[str, Contributor] | None = None) -> None:
        self._by_id: dict[str, Contributor] = dict(contributors or {})

    @classmethod
    def from_data(cls, raw: Mapping[str, Any] | None) -> ContributorDirectory:
        """Build a directory from ``contributors.yaml``-style data.

        The data maps ids to records; an explicit ``id`` inside a record is
        ignored in favor of the key.
        """
        contributors: dict[str, Contributor] = {}
        for contributor_id, record in (raw or {}).items():
            fields = {k: v for k, v in dict(record or {}).items() if k != "id"}
            if "name" not in fields:
                fields["name"] = str(contributor_id)
            contributors[str(contributor_id)] = Contributor(id=str(contributor_id), **fields)
        return cls(contributors)

    def __getitem__(self, key: str) -> Contributor:
        return self._by_id[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)
