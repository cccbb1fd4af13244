"""Run directories holding the outputs of one route optimization."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from ..config import settings
from ..models.domain import RouteResult
from ..services.export.geojson import route_to_feature_collection, save_geojson
from ..services.outputs.routing_formatter import route_result_to_csv, route_result_to_json

logger = logging.getLogger(__name__)

SUMMARY_FILE = "summary.json"
STOPS_FILE = "stops.csv"
GEOJSON_FILE = "route.geojson"


class FileStorage:
    """Writes optimized routes under ``<data_root>/outputs/<label>_<timestamp>/``."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"

    def _new_run_directory(self, label: str) -> Path:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        run_dir = self.output_root / f"{label}_{stamp}"
        run_dir.mkdir(parents=True, exist_ok=False)
        return run_dir

    def write_route_run(self, result: RouteResult, *, label: str = "route") -> Path:
        """Store ``result`` as summary JSON, a per-stop CSV and a GeoJSON map layer.

        Returns the run directory. The directory name carries ``label`` and a
        microsecond UTC timestamp, so repeated runs never overwrite each other.
        """
        run_dir = self._new_run_directory(label)

        summary = json.dumps(route_result_to_json(result), ensure_ascii=False, indent=2)
        (run_dir / SUMMARY_FILE).write_text(summary, encoding="utf-8")
        with (run_dir / STOPS_FILE).open("w", encoding="utf-8", newline="") as handle:
            handle.write(route_result_to_csv(result))
        save_geojson(route_to_feature_collection(result, name=label), run_dir / GEOJSON_FILE)

        logger.info(f"Wrote {len(result.points)} stop(s) to {run_dir}")
        return run_dir
