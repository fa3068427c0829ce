"""Run statistics and outcome reports."""

import json
import math
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from .exceptions import ReportExportError
from .models import BatchOutcome, PipelineConfig, RunStatistics
from .protocols import S3ClientProtocol


def get_run_statistics(outcomes: List[BatchOutcome]) -> RunStatistics:
    """
    Summarize a run from its outcomes.

    ``success_rate`` is a percentage; an empty run reports zeros.
    """
    total = len(outcomes)
    successful = sum(1 for outcome in outcomes if outcome.success)
    total_images = sum(outcome.image_count for outcome in outcomes)
    total_time = sum(outcome.processing_time_ms for outcome in outcomes)

    return RunStatistics(
        total=total,
        successful=successful,
        failed=total - successful,
        success_rate=(successful / total) * 100 if total else 0.0,
        total_images=total_images,
        avg_processing_time_ms=round(total_time / total) if total else 0,
    )


def locations_needing_curation(outcomes: List[BatchOutcome]) -> List[BatchOutcome]:
    """Outcomes whose location still has no usable imagery."""
    return [o for o in outcomes if not o.success or o.image_count == 0]


def estimate_run(location_count: int, config: PipelineConfig) -> Tuple[int, float]:
    """Return (batch count, minimum total inter-batch pause in seconds)."""
    batches = math.ceil(location_count / config.batch_size) if location_count else 0
    pause_seconds = max(batches - 1, 0) * config.inter_batch_delay_ms / 1000
    return batches, pause_seconds


def report_filename(run_date: Optional[date] = None) -> str:
    run_date = run_date or date.today()
    return f"batch-processing-results-{run_date.isoformat()}.json"


def build_report(outcomes: List[BatchOutcome]) -> Dict[str, Any]:
    """Serializable report with statistics and per-location outcomes."""
    return {
        "statistics": get_run_statistics(outcomes).model_dump(),
        "needs_curation": [o.location_name for o in locations_needing_curation(outcomes)],
        "results": [o.model_dump() for o in outcomes],
    }


def write_report_file(outcomes: List[BatchOutcome], path: Union[str, Path]) -> Path:
    """Write the JSON report for a run to a local file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(build_report(outcomes), indent=2), encoding="utf-8")
    except OSError as e:
        raise ReportExportError(f"Could not write report to {path}: {e}") from e
    return path


def load_outcomes(path: Union[str, Path]) -> List[BatchOutcome]:
    """Read outcomes back from a report file (or a bare list of outcomes)."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        records = data["results"] if isinstance(data, dict) else data
        return [BatchOutcome.model_validate(record) for record in records]
    except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
        raise ReportExportError(f"Could not read report {path}: {e}") from e


class S3ReportExporter:
    """Upload run reports to an S3 bucket."""

    def __init__(self, s3_client: S3ClientProtocol, bucket: str, prefix: str = ""):
        self._s3_client = s3_client
        self._bucket = bucket
        self._prefix = prefix.strip("/")

    def report_key(self, run_date: Optional[date] = None) -> str:
        filename = report_filename(run_date)
        return f"{self._prefix}/{filename}" if self._prefix else filename

    def export(
        self, outcomes: List[BatchOutcome], run_date: Optional[date] = None
    ) -> str:
        """Upload the report and return the S3 URI it was written to."""
        key = self.report_key(run_date)
        body = json.dumps(build_report(outcomes), indent=2).encode("utf-8")
        try:
            self._s3_client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType="application/json",
            )
        except Exception as e:
            raise ReportExportError(
                f"Failed to upload report to s3://{self._bucket}/{key}: {e}"
            ) from e
        return f"s3://{self._bucket}/{key}"
