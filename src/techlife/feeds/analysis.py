"""Reader for the episode analysis side file.

The file is produced by an external tagging job and looks like::

    {"episodeAnalyses": [{"episodeNumber": 5, "tags": [...], "summary": "..."}]}
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from techlife.feeds.models import AnalysisRecord
from techlife.utils.errors import AnalysisLoadError
from techlife.utils.result import LoadResult

logger = logging.getLogger(__name__)


def parse_analysis(data: dict) -> dict[int, AnalysisRecord]:
    """Build the episode number -> record lookup from decoded JSON.

    Invalid records are skipped with a warning. When an episode number
    appears twice the later record wins.
    """
    records: dict[int, AnalysisRecord] = {}
    for raw in data.get("episodeAnalyses") or []:
        try:
            record = AnalysisRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning("Skipping invalid analysis record %r: %s", raw, e)
            continue
        records[record.episode_number] = record
    return records


def load_analysis(path: Path) -> LoadResult[dict[int, AnalysisRecord]]:
    """Load analysis records keyed by episode number.

    Args:
        path: Path to the analysis JSON file

    Returns:
        LoadResult with the lookup table, or an AnalysisLoadError
    """
    if not path.exists():
        return LoadResult.fail(AnalysisLoadError(f"Analysis file not found: {path}"))

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        return LoadResult.fail(AnalysisLoadError(f"Cannot read analysis file {path}: {e}"))

    if not isinstance(data, dict):
        return LoadResult.fail(AnalysisLoadError(f"Unexpected analysis file shape in {path}"))

    return LoadResult.ok(parse_analysis(data))
