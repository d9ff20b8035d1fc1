"""Models describing lazy pipeline requests and their results."""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator


class SourceSpec(BaseModel):
    """Where a pipeline pulls its elements from."""
    kind: Literal["array", "iterable", "range", "repeat"] = Field(
        ...,
        description="Construction helper used to build the source sequence"
    )
    items: Optional[List[Any]] = Field(
        None,
        description="Elements for the 'array' source"
    )
    text: Optional[str] = Field(
        None,
        description="String iterated character by character for the 'iterable' source"
    )
    start: Optional[int] = Field(None, description="First value of a 'range' source")
    end: Optional[int] = Field(
        None,
        description="Exclusive bound of a 'range' source; null means unbounded ascending"
    )
    item: Optional[Any] = Field(None, description="Value repeated by a 'repeat' source")
    times: Optional[int] = Field(
        None,
        description="Repetitions for a 'repeat' source",
        ge=0
    )

    @model_validator(mode='after')
    def validate_kind_fields(self):
        """Each kind needs its own fields."""
        if self.kind == "array" and self.items is None:
            raise ValueError("'array' source requires items")
        if self.kind == "iterable" and self.text is None:
            raise ValueError("'iterable' source requires text")
        if self.kind == "range" and self.start is None:
            raise ValueError("'range' source requires start")
        if self.kind == "repeat" and self.times is None:
            raise ValueError("'repeat' source requires times")
        return self


class StepSpec(BaseModel):
    """One lazy combinator applied to the sequence."""
    op: Literal[
        "map", "filter", "reject", "take", "skip",
        "pairwise", "enumerate", "scan", "batch"
    ] = Field(..., description="Combinator name")
    fn: Optional[str] = Field(
        None,
        description="Name of a registered callable (see GET /operations)"
    )
    count: Optional[int] = Field(None, description="Element count for take/skip", ge=0)
    size: Optional[int] = Field(None, description="Group size for batch", ge=1)
    initial: Optional[Any] = Field(None, description="Initial accumulator for scan")

    @model_validator(mode='after')
    def validate_step_args(self):
        """Enforce the arguments each combinator needs."""
        if self.op in ("map", "filter", "reject", "scan") and not self.fn:
            raise ValueError(f"'{self.op}' step requires fn")
        if self.op in ("take", "skip") and self.count is None:
            raise ValueError(f"'{self.op}' step requires count")
        if self.op == "batch" and self.size is None:
            raise ValueError("'batch' step requires size")
        return self


class TerminalSpec(BaseModel):
    """Operation that forces evaluation."""
    op: Literal[
        "collect", "reduce", "count", "sum", "min", "max",
        "first", "last", "any", "all", "partition", "page"
    ] = Field("collect", description="Terminal operation name")
    fn: Optional[str] = Field(
        None,
        description="Registered callable for reduce/any/all/partition"
    )
    initial: Optional[Any] = Field(None, description="Initial accumulator for reduce")
    page_number: Optional[int] = Field(None, description="1-indexed page for 'page'", ge=1)
    page_size: Optional[int] = Field(None, description="Page size for 'page'", ge=1)

    @model_validator(mode='after')
    def validate_terminal_args(self):
        if self.op in ("reduce", "any", "all", "partition") and not self.fn:
            raise ValueError(f"'{self.op}' terminal requires fn")
        if self.op == "page" and self.page_number is None:
            raise ValueError("'page' terminal requires page_number")
        return self


class PipelineRequest(BaseModel):
    """A source, a chain of lazy steps, and one terminal operation."""
    source: SourceSpec = Field(..., description="Source sequence")
    steps: List[StepSpec] = Field(default_factory=list, description="Lazy combinators, applied in order")
    terminal: TerminalSpec = Field(default_factory=TerminalSpec, description="Terminal operation")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "source": {"kind": "range", "start": 0, "end": None},
                "steps": [
                    {"op": "filter", "fn": "is_even"},
                    {"op": "map", "fn": "square"},
                    {"op": "take", "count": 5}
                ],
                "terminal": {"op": "collect"}
            }
        }
    )


class PipelineResponse(BaseModel):
    """Result of running a pipeline."""
    ok: bool = Field(True, description="Processing success status")
    result: Any = Field(None, description="Terminal operation result")
    steps_applied: List[str] = Field(..., description="Combinators applied, in order")
    terminal: str = Field(..., description="Terminal operation that was run")
    elements_pulled: int = Field(
        ...,
        description="Number of elements pulled from the source",
        ge=0
    )
    processing_time_ms: Optional[float] = Field(
        None,
        description="Processing time in milliseconds",
        ge=0
    )
    timestamp: str = Field(..., description="Processing timestamp in ISO format")


class OperationsResponse(BaseModel):
    """Catalogue of what a pipeline request may reference."""
    sources: List[str] = Field(..., description="Supported source kinds")
    steps: List[str] = Field(..., description="Supported lazy combinators")
    terminals: List[str] = Field(..., description="Supported terminal operations")
    callables: Dict[str, str] = Field(..., description="Registered callables and their arity")


class MetricsResponse(BaseModel):
    """Aggregate timing of pipeline runs."""
    total_operations: int = Field(..., ge=0)
    total_time_ms: float = Field(..., ge=0)
    avg_time_ms: float = Field(..., ge=0)
    recent_operations: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Most recent pipeline runs, oldest first"
    )


class HealthCheckResponse(BaseModel):
    """Health check result."""
    status: str = Field(..., description="Overall health status")
    timestamp: str = Field(..., description="Check timestamp in ISO format")
    checks: Dict[str, bool] = Field(..., description="Individual check results")


class ErrorResponse(BaseModel):
    """Standard error envelope."""
    ok: bool = Field(False, description="Request success status")
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Error details")
    timestamp: str = Field(..., description="Error timestamp in ISO format")
