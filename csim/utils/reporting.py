from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Any, List
from ..config import Geometry, SimConfig
from ..runtime.simulator import SimResult
from . import viz


def _rate(part: int, total: int) -> str:
    return f"{(part / total):.2%}" if total > 0 else "0.00%"


def print_summary(result: SimResult):
    """Prints the final counters in the cachelab summary format."""
    print(f"hits:{result.hits} misses:{result.misses} evictions:{result.evictions}")


def set_rows(set_stats: Dict[int, SimResult]) -> List[Dict[str, int]]:
    """Flattens per-set counters into rows ordered by set index."""
    return [
        {"set": index, **stats.to_dict()}
        for index, stats in sorted(set_stats.items())
    ]


def generate_report_json(result: SimResult, geometry: Geometry, set_stats: Dict[int, SimResult]) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary describing a finished run."""
    rows = set_rows(set_stats)
    busiest = max(rows, key=lambda r: r["misses"], default=None)

    report_data = {
        **result.to_dict(),
        "accesses": result.accesses,
        "hit_rate": _rate(result.hits, result.accesses),
        "miss_rate": _rate(result.misses, result.accesses),
        "geometry": geometry.to_dict(),
        "sets_touched": len(rows),
        "busiest_set": busiest["set"] if busiest and busiest["misses"] > 0 else None,
        "sets": rows,
    }
    return report_data


def generate_report(result: SimResult, geometry: Geometry, set_stats: Dict[int, SimResult], config: SimConfig):
    """Generates all report artifacts."""
    report_data = generate_report_json(result, geometry, set_stats)

    if config.report_dir:
        output_dir = Path(config.report_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        with open(output_dir / "report.json", "w") as f:
            json.dump(report_data, f, indent=4)

        viz.export_set_activity(report_data["sets"], str(output_dir / "report.html"))
        print(f"\nReports generated in {output_dir.absolute()}")

    if config.ascii_chart:
        print(viz.export_set_activity_ascii(report_data["sets"]))

    print(f"Hit rate: {report_data['hit_rate']}  Miss rate: {report_data['miss_rate']}")
    return report_data
