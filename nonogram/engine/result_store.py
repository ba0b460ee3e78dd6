"""Persistent solve result store.

Every solving session (solved or stuck) can be saved as a JSON document
under ``local_db/collections/solves/``. Documents carry the clues, the final
grid state, the unresolved lines and a few stats.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from ..core.constants import CellState
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .grid import Grid
    from .solver import SolveResult, SolverConfig


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/collections/solves")


class SolveStore:
    """Save solve results as structured JSON documents."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def save(
        self,
        result: "SolveResult",
        config: Optional["SolverConfig"] = None,
        puzzle_name: Optional[str] = None,
        validation: Optional[List[str]] = None,
    ) -> str:
        """Persist a solve result and return its document ID."""
        doc_id = self._new_id()
        doc = {
            "id": doc_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "puzzle": puzzle_name,
            "config": self._serialize_config(config),
            "validation": validation or [],
            "stats": self._compute_stats(result.grid),
            "history": [
                {
                    "iteration": record.iteration,
                    "mutations": record.mutations,
                    "resolved_lines": [str(ref) for ref in record.resolved_lines],
                    "unresolved_count": record.unresolved_count,
                }
                for record in result.history
            ],
        }
        doc.update(result.to_jsonable())

        path = self.store_dir / f"{doc_id}.json"
        path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
        LOGGER.info("Solve result saved: %s (%s)", doc_id, result.status.value)
        return doc_id

    def load(self, doc_id: str) -> dict:
        path = self.store_dir / f"{doc_id}.json"
        return json.loads(path.read_text(encoding="utf-8"))

    def list_ids(self) -> List[str]:
        return sorted(path.stem for path in self.store_dir.glob("*.json"))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _compute_stats(grid: "Grid") -> dict:
        counts = {state: 0 for state in CellState}
        for row in grid.rows():
            for state in row:
                counts[state] += 1
        total = grid.width * grid.height
        return {
            "total_cells": total,
            "filled_cells": counts[CellState.FILLED],
            "crossed_cells": counts[CellState.CROSSED],
            "unknown_cells": counts[CellState.UNKNOWN],
            "resolved_pct": round((total - counts[CellState.UNKNOWN]) / total * 100, 1),
        }

    @staticmethod
    def _serialize_config(config: Optional["SolverConfig"]) -> Optional[dict]:
        if config is None:
            return None
        return {
            "max_iterations": config.max_iterations,
            "completion_passes": config.completion_passes,
            "record_history": config.record_history,
        }

    @staticmethod
    def _new_id() -> str:
        ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        short_uuid = uuid.uuid4().hex[:8]
        return f"{ts}_{short_uuid}"
