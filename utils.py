"""
Pipeline helpers for lazy sequences.

Builds ``Seq`` pipelines from declarative descriptions (see models.py), runs
their terminal operation under a pull budget, and keeps simple timing
metrics for the API.
"""

import os
import time
import gc
import logging
import operator
import tracemalloc
from collections import deque
from typing import Any, Callable, Dict, List, Optional, Tuple

from lazy import Seq
from models import SourceSpec, StepSpec, TerminalSpec, PipelineRequest

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Limits, overridable from the environment
MAX_RESULT_ITEMS = int(os.environ.get("LAZY_MAX_RESULT_ITEMS", "10000"))
MAX_PULLS = int(os.environ.get("LAZY_MAX_PULLS", "1000000"))
DEFAULT_PAGE_SIZE = int(os.environ.get("LAZY_DEFAULT_PAGE_SIZE", "10"))
METRICS_HISTORY = int(os.environ.get("LAZY_METRICS_HISTORY", "100"))

SOURCE_KINDS = ["array", "iterable", "range", "repeat"]
STEP_OPS = ["map", "filter", "reject", "take", "skip", "pairwise", "enumerate", "scan", "batch"]
TERMINAL_OPS = [
    "collect", "reduce", "count", "sum", "min", "max",
    "first", "last", "any", "all", "partition", "page"
]


class PipelineError(Exception):
    """Raised when a pipeline description cannot be built or run."""
    pass


# Named callables a pipeline may reference; value is (function, arity)
CALLABLES: Dict[str, Tuple[Callable, int]] = {
    "identity": (lambda x: x, 1),
    "double": (lambda x: x * 2, 1),
    "square": (lambda x: x * x, 1),
    "negate": (operator.neg, 1),
    "increment": (lambda x: x + 1, 1),
    "upper": (lambda s: str(s).upper(), 1),
    "pair_sum": (lambda pair: pair[0] + pair[1], 1),
    "pair_diff": (lambda pair: pair[1] - pair[0], 1),
    "is_even": (lambda x: x % 2 == 0, 1),
    "is_odd": (lambda x: x % 2 != 0, 1),
    "is_positive": (lambda x: x > 0, 1),
    "is_truthy": (bool, 1),
    "add": (operator.add, 2),
    "multiply": (operator.mul, 2),
    "max_of": (max, 2),
    "min_of": (min, 2),
}


# Global performance tracking; only the most recent runs are kept
_performance_metrics = {
    "operations": deque(maxlen=METRICS_HISTORY),
    "total_time_ms": 0.0,
    "operation_count": 0
}


def resolve_callable(name: str, arity: int) -> Callable:
    """Look up a registered callable, checking it takes ``arity`` arguments."""
    if name not in CALLABLES:
        raise PipelineError(f"Unknown callable: {name}")
    fn, fn_arity = CALLABLES[name]
    if fn_arity != arity:
        raise PipelineError(f"Callable '{name}' takes {fn_arity} argument(s), expected {arity}")
    return fn


def build_source(source: SourceSpec) -> Seq:
    """Create the source sequence for a pipeline."""
    if source.kind == "array":
        return Seq.from_array(list(source.items))
    if source.kind == "iterable":
        return Seq.from_iterable(source.text)
    if source.kind == "range":
        end = source.end if source.end is not None else float("inf")
        return Seq.range(source.start, end)
    if source.kind == "repeat":
        return Seq.repeat(source.item, source.times)
    raise PipelineError(f"Unknown source kind: {source.kind}")


def apply_step(seq: Seq, step: StepSpec) -> Seq:
    """Chain one lazy combinator onto ``seq``."""
    op = step.op
    logger.debug(f"Applying step {op} (fn={step.fn})")

    if op == "map":
        return seq.map(resolve_callable(step.fn, 1))
    elif op == "filter":
        return seq.filter(resolve_callable(step.fn, 1))
    elif op == "reject":
        return seq.reject(resolve_callable(step.fn, 1))
    elif op == "take":
        return seq.take(step.count)
    elif op == "skip":
        return seq.skip(step.count)
    elif op == "pairwise":
        return seq.pairwise()
    elif op == "enumerate":
        return seq.enumerate()
    elif op == "scan":
        return seq.scan(resolve_callable(step.fn, 2), step.initial)
    elif op == "batch":
        return seq.batch(step.size)
    raise PipelineError(f"Unknown op: {op}")


def build_pipeline(request: PipelineRequest, pull_counter: Optional[Dict[str, int]] = None,
                   max_pulls: int = None) -> Seq:
    """
    Build the lazy chain for ``request``. When ``pull_counter`` is given every
    element pulled from the source is counted there, and pulling more than
    ``max_pulls`` raises PipelineError from inside the traversal.
    """
    seq = build_source(request.source)

    if pull_counter is not None:
        limit = MAX_PULLS if max_pulls is None else max_pulls

        def count_pull(_):
            pull_counter["count"] += 1
            if pull_counter["count"] > limit:
                raise PipelineError(f"Pipeline pulled more than {limit} elements from its source")

        seq = seq.inspect(count_pull)

    for step in request.steps:
        seq = apply_step(seq, step)
    return seq


def _bounded_collect(seq: Seq) -> List[Any]:
    items = seq.take(MAX_RESULT_ITEMS + 1).collect()
    if len(items) > MAX_RESULT_ITEMS:
        raise PipelineError(f"Result exceeds {MAX_RESULT_ITEMS} items; add a take step")
    return items


def run_terminal(seq: Seq, terminal: TerminalSpec) -> Any:
    """Force ``seq`` with the requested terminal operation."""
    op = terminal.op

    if op == "collect":
        return _bounded_collect(seq)
    elif op == "reduce":
        return seq.reduce(resolve_callable(terminal.fn, 2), terminal.initial)
    elif op == "count":
        return seq.count()
    elif op == "sum":
        return seq.sum()
    elif op in ("min", "max"):
        try:
            return seq.min() if op == "min" else seq.max()
        except ValueError as e:
            raise PipelineError(f"{op} of an empty sequence") from e
    elif op == "first":
        return seq.first()
    elif op == "last":
        return seq.last()
    elif op == "any":
        return seq.any(resolve_callable(terminal.fn, 1))
    elif op == "all":
        return seq.all(resolve_callable(terminal.fn, 1))
    elif op == "partition":
        matching, rest = seq.partition(resolve_callable(terminal.fn, 1))
        return [_bounded_collect(matching), _bounded_collect(rest)]
    elif op == "page":
        page_size = terminal.page_size or DEFAULT_PAGE_SIZE
        if page_size > MAX_RESULT_ITEMS:
            raise PipelineError(f"Page size exceeds {MAX_RESULT_ITEMS} items")
        return seq.page(terminal.page_number, page_size).collect()
    raise PipelineError(f"Unknown terminal: {op}")


def run_pipeline(request: PipelineRequest) -> Dict[str, Any]:
    """Build and run a pipeline, returning its result and bookkeeping."""
    pulled = {"count": 0}
    seq = build_pipeline(request, pull_counter=pulled)
    steps_applied = [step.op for step in request.steps]

    logger.info(f"Running pipeline: source={request.source.kind} steps={steps_applied} "
                f"terminal={request.terminal.op}")

    info = measure_performance(f"pipeline_{request.terminal.op}", run_terminal, seq, request.terminal)

    logger.info(f"Pipeline finished: pulled {pulled['count']} element(s) "
                f"in {info['execution_time_ms']:.2f} ms")

    return {
        "result": info["result"],
        "steps_applied": steps_applied,
        "terminal": request.terminal.op,
        "elements_pulled": pulled["count"],
        "processing_time_ms": info["execution_time_ms"],
    }


def measure_performance(operation_name: str, func, *args, **kwargs) -> Dict[str, Any]:
    """Measure performance of a function call with memory tracking"""
    tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
        success = True
    except Exception as e:
        result = None
        success = False
        logger.error(f"{operation_name} failed: {e}")
        raise
    finally:
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        _performance_metrics["operations"].append({
            "operation": operation_name,
            "execution_time_ms": execution_time_ms,
            "memory_usage_mb": peak / 1024 / 1024,
            "success": success,
            "timestamp": time.time()
        })
        _performance_metrics["total_time_ms"] += execution_time_ms
        _performance_metrics["operation_count"] += 1

    return {
        "operation": operation_name,
        "result": result,
        "execution_time_ms": execution_time_ms,
        "memory_usage_mb": peak / 1024 / 1024,
        "success": success
    }


def get_performance_summary() -> Dict[str, Any]:
    """Get summary of all performance metrics"""
    count = _performance_metrics["operation_count"]
    if count == 0:
        return {
            "total_operations": 0,
            "total_time_ms": 0.0,
            "avg_time_ms": 0.0,
            "recent_operations": []
        }

    return {
        "total_operations": count,
        "total_time_ms": _performance_metrics["total_time_ms"],
        "avg_time_ms": _performance_metrics["total_time_ms"] / count,
        "recent_operations": list(_performance_metrics["operations"])
    }


def clear_performance_metrics():
    """Clear all performance metrics"""
    global _performance_metrics
    _performance_metrics = {
        "operations": deque(maxlen=METRICS_HISTORY),
        "total_time_ms": 0.0,
        "operation_count": 0
    }
