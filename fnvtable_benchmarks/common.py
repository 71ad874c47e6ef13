import bisect
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from rich.console import Console
from rich.table import Table

IMPLEMENTATIONS = ("fnvtable", "linear", "bsearch")
KEY_WIDTH = 8


def human_format(num):
    num = float("{:.3g}".format(num))
    magnitude = 0
    while abs(num) >= 1000:
        magnitude += 1
        num /= 1000.0
    return "{}{}".format(
        "{:f}".format(num).rstrip("0").rstrip("."), ["", "K", "M", "B", "T"][magnitude]
    )


def format_key(i: int) -> bytes:
    """Left-justified decimal key, padded with spaces to KEY_WIDTH."""
    return f"{i:<{KEY_WIDTH}d}".encode("ascii")


def make_sorted_pairs(n: int) -> Tuple[List[bytes], List[int]]:
    """Keys 0..n-1 and their values, sorted by key bytes for binary search."""
    pairs = sorted((format_key(i), i) for i in range(n))
    return [k for k, _ in pairs], [v for _, v in pairs]


def linear_lookup(keys: Sequence[bytes], values: Sequence[int], key: bytes) -> Optional[int]:
    for stored, value in zip(keys, values):
        if stored == key:
            return value
    return None


def bsearch_lookup(keys: Sequence[bytes], values: Sequence[int], key: bytes) -> Optional[int]:
    i = bisect.bisect_left(keys, key)
    if i < len(keys) and keys[i] == key:
        return values[i]
    return None


def validate_results_schema(results: Dict[str, Any]) -> None:
    """
    Validates that the results dictionary has consistent shapes and symmetric ops.

    Requirements:
      - keys: batch_sizes and one dict per implementation in IMPLEMENTATIONS
      - every implementation reports the same operations
      - for every operation, list lengths equal len(batch_sizes)
      - entries are either numbers or dicts with {median, iqr}
    Raises AssertionError on violation.
    """
    assert isinstance(results, dict), "results must be a dict"
    assert "batch_sizes" in results and isinstance(
        results["batch_sizes"], list
    ), "results must contain a list 'batch_sizes'"
    batch_sizes = results["batch_sizes"]
    for impl in IMPLEMENTATIONS:
        assert impl in results and isinstance(
            results[impl], dict
        ), f"results must contain dict '{impl}'"

    expected_ops = set(results[IMPLEMENTATIONS[0]].keys())
    for impl in IMPLEMENTATIONS[1:]:
        ops = set(results[impl].keys())
        assert (
            ops == expected_ops
        ), f"operation keys mismatch between {IMPLEMENTATIONS[0]} and {impl}: {expected_ops} vs {ops}"

    def _validate_entry(e: Any) -> None:
        if isinstance(e, (int, float)):
            return
        assert (
            isinstance(e, dict) and "median" in e and "iqr" in e
        ), "each entry must be a number or a dict with 'median' and 'iqr'"

    for impl in IMPLEMENTATIONS:
        for op, entries in results[impl].items():
            assert isinstance(entries, list), f"'{impl}.{op}' entries must be a list"
            assert len(entries) == len(
                batch_sizes
            ), f"{impl}['{op}'] length {len(entries)} != len(batch_sizes) {len(batch_sizes)}"
            for e in entries:
                _validate_entry(e)


def python_timer(func: Callable[[], Any], trials: int = 10) -> Tuple[float, float]:
    """
    A timer for standard Python functions with multiple trials.

    Args:
        func: The Python function to time.
        trials: Number of timing trials to run (default 10).

    Returns:
        Tuple of (median_time, iqr_time) in seconds.
    """
    times = []
    for _ in range(trials):
        start_time = time.perf_counter()
        func()
        end_time = time.perf_counter()
        times.append(end_time - start_time)

    times = np.array(times)
    median_time = np.median(times)
    q75, q25 = np.percentile(times, [75, 25])
    iqr_time = q75 - q25

    return median_time, iqr_time


def ops_per_sec(count: int, median: float, iqr: float) -> Dict[str, float]:
    return {"median": count / median, "iqr": count * iqr / (median**2)}


def print_results_table(results: Dict[str, Any], title: str):
    """
    Displays benchmark results in a formatted table using the rich library.
    """
    console = Console()
    table = Table(title=title, show_header=True, header_style="bold magenta")

    table.add_column("Keys", justify="right", style="cyan")
    table.add_column("Operation", style="green")
    table.add_column("Implementation", style="yellow")
    table.add_column("Ops/Sec (Median)", justify="right", style="bold blue")
    table.add_column("IQR", justify="right", style="dim blue")

    batch_sizes = results.get("batch_sizes", [])
    operations = list(results.get(IMPLEMENTATIONS[0], {}).keys())

    for i, size in enumerate(batch_sizes):
        for op in operations:
            op_name = op.replace("_ops_per_sec", "")
            for j, impl in enumerate(IMPLEMENTATIONS):
                data = results[impl][op][i]
                if isinstance(data, dict):
                    perf, iqr = data["median"], data["iqr"]
                else:
                    perf, iqr = data, 0
                table.add_row(
                    f"{size:,}" if j == 0 else "",
                    op_name if j == 0 else "",
                    impl,
                    human_format(perf),
                    f"±{human_format(iqr)}",
                )
        if i < len(batch_sizes) - 1:
            table.add_row("", "", "", "", "", end_section=True)

    console.print(table)
