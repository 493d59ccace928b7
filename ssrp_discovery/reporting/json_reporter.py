"""Report generator for discovery scans.

Generates structured reports from scan results and serializes them as
JSON or YAML.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from ..protocol.schema import ScanStats, SqlInstance


class ScanReporter:
    """Generates reports from discovered SQL Server instances."""

    def generate(
        self,
        instances: Iterable[SqlInstance],
        stats: Optional[ScanStats] = None,
        target: Optional[str] = None,
        error: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate a report from scan results.

        Args:
            instances: Instances in the order they were discovered.
            stats: Counters of the scan.
            target: Probe destination as ``address:port``.
            error: Error message if the scan failed.

        Returns:
            Report dictionary ready for serialization.
        """
        instances = list(instances)
        stats = stats or ScanStats(records=len(instances))

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "target": target,
            "status": "failed" if error else "completed",
            "summary": {
                "instances": len(instances),
                "servers": len({i.server_name for i in instances}),
                "clustered": sum(1 for i in instances if i.is_clustered),
                **stats.to_dict(),
            },
            "instances": [i.to_dict() for i in instances],
            "error": error,
        }

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Save report to a JSON file.

        Args:
            report: Report dictionary.
            path: Output file path.

        Returns:
            Path to the saved file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return path

    def to_json_string(self, report: dict[str, Any], pretty: bool = True) -> str:
        """Convert report to JSON string."""
        if pretty:
            return json.dumps(report, indent=2, ensure_ascii=False)
        return json.dumps(report, ensure_ascii=False)

    def to_yaml_string(self, report: dict[str, Any]) -> str:
        """Convert report to YAML string."""
        return yaml.safe_dump(report, sort_keys=False, allow_unicode=True)

    def generate_envelope(
        self,
        report: dict[str, Any],
        report_path: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate the JSON envelope printed by the CLI.

        {
            "success": bool,
            "command": "scan",
            "data": { ... },
            "message": str
        }
        """
        summary = report["summary"]
        success = report["status"] == "completed"

        data: dict[str, Any] = {
            "target": report["target"],
            "instances": report["instances"],
            "summary": summary,
        }

        if report_path:
            data["report_path"] = report_path

        if not success:
            message = f"Scan failed: {report['error']}"
        elif summary["instances"] == 0:
            message = "No SQL Server instances responded"
        else:
            message = (
                f"Found {summary['instances']} instance(s) "
                f"on {summary['servers']} server(s)"
            )

        return {
            "success": success,
            "command": "scan",
            "data": data,
            "message": message,
        }
