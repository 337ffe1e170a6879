"""ExportService — write the search-export collection as JSON."""

from __future__ import annotations

from pathlib import Path

from leafpress.domain.errors import LeafpressError
from leafpress.infrastructure.filesystem import write_json
from leafpress.services.base import BaseService
from leafpress.services.result import ServiceResult
from leafpress.services.telemetry import traced


class ExportService(BaseService):
    """Search-index export.

    Publishing (uploading the records to a search provider) is left to an
    external step; this only produces the records.
    """

    @traced
    def export_search(self, *, output: Path | None = None) -> ServiceResult:
        """Build the ``algolia`` collection; write it to *output* when given.

        Without *output* the records are returned in ``data["records"]``.
        """
        try:
            site = self._prepare_site()
        except LeafpressError as exc:
            return ServiceResult.failure("export_search", exc)

        records = list(site.collections.algolia)
        export_env = self._settings.collections.export_env
        warnings: list[str] = []
        if self._settings.env != export_env:
            warnings.append(
                f"Search export is empty unless env={export_env!r} "
                f"(current: {self._settings.env!r})"
            )

        data: dict[str, object] = {
            "count": len(records),
            "env": self._settings.env,
        }
        if output is not None:
            data["output"] = str(write_json(output, records))
        else:
            data["records"] = records
        return ServiceResult(ok=True, op="export_search", data=data, warnings=warnings)
