import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from fnvtable import HashTable, make_key
from fnvtable_benchmarks.common import (
    bsearch_lookup,
    format_key,
    linear_lookup,
    make_sorted_pairs,
    ops_per_sec,
    print_results_table,
    python_timer,
    validate_results_schema,
)

INITIAL_CAPACITY = 1024


def build_table(n: int) -> HashTable:
    table = HashTable.build(INITIAL_CAPACITY)
    for i in range(n):
        table.put(make_key(format_key(i))).value = i
    return table


def benchmark_hashtable_insert(n: int, trials: int = 10):
    """Benchmarks building a HashTable from n keys, growth included."""
    keys = [format_key(i) for i in range(n)]

    def insert_op():
        table = HashTable.build(INITIAL_CAPACITY)
        for i, key in enumerate(keys):
            table.put(make_key(key)).value = i
        return table

    return python_timer(insert_op, trials)


def benchmark_hashtable_lookup(table: HashTable, queries: List[bytes], trials: int = 10):
    """Benchmarks single-key lookups; key hashing is part of the timed region."""

    def lookup_op():
        results = []
        for query in queries:
            results.append(table.get(make_key(query)))
        return results

    return python_timer(lookup_op, trials)


def benchmark_sorted_insert(n: int, trials: int = 10):
    """Benchmarks building the sorted key/value arrays shared by both baselines."""
    return python_timer(lambda: make_sorted_pairs(n), trials)


def benchmark_sorted_lookup(lookup_fn, keys, values, queries: List[bytes], trials: int = 10):
    def lookup_op():
        results = []
        for query in queries:
            found = lookup_fn(keys, values, query)
            assert found is not None, f"missing key {query!r}"
            results.append(found)
        return results

    return python_timer(lookup_op, trials)


def run_benchmarks(
    trials: int = 10,
    batch_sizes: Optional[List[int]] = None,
    lookups: int = 1000,
    seed: int = 0,
):
    """Runs the HashTable benchmarks against both sorted-array baselines and saves the results."""
    # The linear baseline is O(n) per lookup, so sizes stay modest by default
    if batch_sizes is None:
        batch_sizes = [2**8, 2**10, 2**12]
    results: Dict[str, Any] = {
        "batch_sizes": batch_sizes,
        "fnvtable": {},
        "linear": {},
        "bsearch": {},
    }
    rng = np.random.default_rng(seed)

    print("Running HashTable Benchmarks...")
    for n in batch_sizes:
        print(f"  Keys: {n}, lookups: {lookups}")
        queries = [format_key(int(i)) for i in rng.integers(0, n, size=lookups)]

        # --- fnvtable.HashTable Benchmark ---
        insert_median, insert_iqr = benchmark_hashtable_insert(n, trials=trials)
        table = build_table(n)
        lookup_median, lookup_iqr = benchmark_hashtable_lookup(table, queries, trials=trials)
        results["fnvtable"].setdefault("insert_ops_per_sec", []).append(
            ops_per_sec(n, insert_median, insert_iqr)
        )
        results["fnvtable"].setdefault("lookup_ops_per_sec", []).append(
            ops_per_sec(lookups, lookup_median, lookup_iqr)
        )

        # --- Sorted array baselines ---
        sorted_median, sorted_iqr = benchmark_sorted_insert(n, trials=trials)
        keys, values = make_sorted_pairs(n)
        for impl, lookup_fn in (("linear", linear_lookup), ("bsearch", bsearch_lookup)):
            median, iqr = benchmark_sorted_lookup(
                lookup_fn, keys, values, queries, trials=trials
            )
            results[impl].setdefault("insert_ops_per_sec", []).append(
                ops_per_sec(n, sorted_median, sorted_iqr)
            )
            results[impl].setdefault("lookup_ops_per_sec", []).append(
                ops_per_sec(lookups, median, iqr)
            )

    validate_results_schema(results)
    output_path = Path(__file__).parent / "results" / "hashtable_results.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(results, f, indent=4)

    print(f"HashTable benchmark results saved to {output_path}")
    print_results_table(results, "HashTable Performance Results")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="HashTable benchmarks")
    parser.add_argument("--trials", type=int, default=10)
    parser.add_argument("--lookups", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument(
        "--batch-sizes",
        type=str,
        default="",
        help="Comma-separated key counts (e.g. 256,1024,4096)",
    )
    args = parser.parse_args()

    batch_sizes_arg: Optional[List[int]] = None
    if args.batch_sizes:
        batch_sizes_arg = [int(x.strip()) for x in args.batch_sizes.split(",") if x.strip()]

    run_benchmarks(
        trials=args.trials, batch_sizes=batch_sizes_arg, lookups=args.lookups, seed=args.seed
    )
