"""
Side-by-side product comparison helpers
"""
from typing import Any, Dict, List, Sequence, Tuple

from supermall.utils.filters import get_value

MISSING = "N/A"

DEFAULT_ATTRIBUTES: List[Tuple[str, str]] = [
    ("price", "Price"),
    ("discount", "Discount (%)"),
    ("brand", "Brand"),
    ("category_name", "Category"),
    ("avg_rating", "Rating"),
    ("reviews_count", "Reviews"),
    ("stock", "Stock"),
]


def _display(value: Any) -> Any:
    return MISSING if value is None or value == "" else value


def compare_attributes(products: Sequence[Any], keys: Sequence[str]) -> Dict[str, dict]:
    """For every key, the per-product values and whether they are all equal"""
    comparison = {}
    for key in keys:
        values = [_display(get_value(p, key)) for p in products]
        comparison[key] = {
            "values": values,
            "all_equal": all(v == values[0] for v in values),
        }
    return comparison


def get_difference_highlights(comparison: Dict[str, dict]) -> List[str]:
    """Keys whose values differ between products"""
    return [key for key, data in comparison.items() if not data["all_equal"]]


def render_stars(rating: Any) -> str:
    """Five-character star bar, rating rounded half up"""
    try:
        filled = int(float(rating) + 0.5)
    except (TypeError, ValueError):
        filled = 0
    filled = max(0, min(5, filled))
    return "★" * filled + "☆" * (5 - filled)


def build_comparison_table(
    products: Sequence[Any],
    attributes: Sequence[Tuple[str, str]] = DEFAULT_ATTRIBUTES,
) -> dict:
    """
    Table the client renders as-is

    Returns:
        {"columns": [product names], "rows": [{"key", "label", "values", "equal"}]}
    """
    columns = [get_value(p, "name") or "Unknown" for p in products]
    rows = []
    for key, label in attributes:
        values = [_display(get_value(p, key)) for p in products]
        equal = all(v == values[0] for v in values)
        if key in ("avg_rating", "rating"):
            values = [render_stars(v) if v != MISSING else MISSING for v in values]
        else:
            values = [float(v) if hasattr(v, "quantize") else v for v in values]
        rows.append({"key": key, "label": label, "values": values, "equal": equal})
    return {"columns": columns, "rows": rows}
