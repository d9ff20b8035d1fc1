"""FastAPI service that runs described lazy pipelines."""

import datetime
import logging
import math

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from lazy import Seq
from utils import (
    run_pipeline, get_performance_summary, PipelineError,
    CALLABLES, SOURCE_KINDS, STEP_OPS, TERMINAL_OPS
)

from models import (
    PipelineRequest, PipelineResponse, OperationsResponse,
    MetricsResponse, HealthCheckResponse, ErrorResponse
)

logger = logging.getLogger(__name__)

app = FastAPI()


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _error(status_code: int, message: str, error_code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=message,
            error_code=error_code,
            timestamp=_now_iso()
        ).model_dump()
    )


@app.post("/pipelines/run", response_model=PipelineResponse)
def run(request: PipelineRequest) -> PipelineResponse:
    """
    Build a lazy pipeline from its description and force it with the
    requested terminal operation. Only the elements the terminal actually
    needs are pulled from the source, so unbounded ranges are fine as long
    as something (take, first, any, ...) stops the traversal.
    """
    try:
        outcome = run_pipeline(request)
    except PipelineError as e:
        logger.warning(f"Rejected pipeline: {e}")
        return _error(400, str(e), "PIPELINE_ERROR")
    except (TypeError, ValueError, ArithmeticError) as e:
        logger.warning(f"Pipeline evaluation failed: {e}")
        return _error(400, f"Evaluation failed: {e}", "EVALUATION_ERROR")
    except Exception as e:
        logger.error(f"Unexpected pipeline failure: {e}")
        return _error(500, f"Pipeline failed: {e}", "INTERNAL_ERROR")

    return PipelineResponse(ok=True, timestamp=_now_iso(), **outcome)


@app.get("/operations", response_model=OperationsResponse)
def operations() -> OperationsResponse:
    """List source kinds, combinators, terminals and registered callables"""
    return OperationsResponse(
        sources=SOURCE_KINDS,
        steps=STEP_OPS,
        terminals=TERMINAL_OPS,
        callables={name: ("unary" if arity == 1 else "binary") for name, (_, arity) in CALLABLES.items()}
    )


@app.get("/metrics", response_model=MetricsResponse)
def metrics() -> MetricsResponse:
    """Timing summary of pipeline runs so far"""
    return MetricsResponse(**get_performance_summary())


@app.get("/health", response_model=HealthCheckResponse)
def health_check() -> HealthCheckResponse:
    """Health check endpoint"""
    checks = {
        "pipeline_engine": Seq.range(0, math.inf).take(4).sum() == 6
    }
    return HealthCheckResponse(
        status="healthy" if all(checks.values()) else "unhealthy",
        timestamp=_now_iso(),
        checks=checks
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
