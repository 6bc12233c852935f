"""Chart-ready points for a visualization hint"""
from typing import Any, Dict, List, Optional

from ingest.models import Dataset, Visualization
from ingest.schema import to_number


def _first_numeric(dataset: Dataset) -> Optional[str]:
    cols = dataset.summary.numeric_columns
    return cols[0] if cols else None


def _num(value: Any, default: float) -> float:
    # zero is treated like a missing value, so it falls back too
    number = to_number(value)
    return number if number else default


def chart_data(dataset: Dataset, visualization: Optional[Visualization] = None) -> List[Dict[str, Any]]:
    """One point per row.

    With xAxis and yAxis configured: {name, value, x, y}; x falls back to the
    row index when the axis is not a numeric column (e.g. "index").
    Otherwise {name, value} over the configured or first numeric column.
    """
    if not dataset.rows:
        return []

    config = visualization.config if visualization else {}
    x_axis, y_axis = config.get("xAxis"), config.get("yAxis")

    if x_axis and y_axis:
        points = []
        for index, row in enumerate(dataset.rows):
            label = row.get(x_axis)
            points.append({
                "name": label if label not in (None, "") else f"Item {index + 1}",
                "value": _num(row.get(y_axis), 0.0),
                "x": _num(row.get(x_axis), float(index)),
                "y": _num(row.get(y_axis), 0.0),
            })
        return points

    column = config.get("column") or y_axis or _first_numeric(dataset)
    if not column:
        return []
    return [
        {"name": f"Item {index + 1}", "value": _num(row.get(column), 0.0)}
        for index, row in enumerate(dataset.rows)
    ]
