import math
from time import sleep, perf_counter
from lazy import Seq

def expensive_transform(x):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) ...")
    sleep(0.2)  # pretend this is expensive
    return x * x

print("\n--- Demo: laziness (no work until a terminal runs) ---")
pipeline = (
    Seq.range(1, math.inf)  # unbounded source
    .map(expensive_transform)
    .filter(lambda v: v % 2 == 0)
    .skip(3)
    .take(5)
)

print("Constructed pipeline. No output yet (nothing computed).")
print("\nCollecting (should compute only what's needed for 5 items):")
t0 = perf_counter()
out = pipeline.collect()
t1 = perf_counter()
print(f"Result: {out}")
print(f"Time: {t1 - t0:.2f}s\n")

print("--- Demo: re-traversal ---")
squares = Seq.from_array([1, 2, 3]).map(lambda x: x * x)
print(f"First pass: {squares.collect()}, second pass: {squares.collect()}\n")

print("--- Demo: windows and running totals ---")
print("pairwise:", Seq.from_array([0, 1, 2, 3, 4]).pairwise().collect())
print("enumerate:", Seq.from_iterable("lazy").enumerate().collect())
print("scan:", Seq.from_array([1, 2, 3]).scan(lambda acc, x: acc + x, 10).collect())
print()

print("--- Demo: partition re-runs the source once per half ---")
evens, odds = (
    Seq.range(0, 6)
    .inspect(lambda x: print(f"  pulled {x}"))
    .partition(lambda x: x % 2 == 0)
)
print("evens:", evens.collect())
print("odds:", odds.collect())
print()

print("--- Demo: short-circuiting ---")
found = Seq.range(0, math.inf).inspect(lambda x: print(f"  checking {x}")).any(lambda x: x > 2)
print(f"any(x > 2) on an unbounded range: {found}")
