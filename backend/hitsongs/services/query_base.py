"""
Hit Songs API — Abstract Query Backend Interface
=================================================

What:  Abstract base class for the remote query capability, plus the value
       objects describing the two remote operation shapes.
Why:   Routes and the dispatcher only ever talk to `QueryBackend`, so the
       Supabase client can be swapped for a fake in tests (or for another
       PostgREST-compatible client) without touching any route.
How:   Concrete implementations inherit from QueryBackend and translate a
       Selection or ProcedureCall into their own query DSL.

Operation shapes (immutable pydantic models, compared by value):
    Selection      relation + projection + filters + ordering + limit
    ProcedureCall  named server-side function + keyword arguments
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

Row = Dict[str, Any]


class Filter(BaseModel):
    """A single predicate. `op` is "eq" (equality) or "ilike" (case-insensitive pattern)."""

    column: str
    value: Any
    op: Literal["eq", "ilike"] = "eq"

    model_config = {"frozen": True}


class Ordering(BaseModel):
    column: str = Field(description="Column or embedded column, e.g. artist(artist_name)")
    descending: bool = False

    model_config = {"frozen": True}


class Selection(BaseModel):
    """
    Declarative selection executed remotely.

    `columns` are PostgREST select expressions, including embedded relations
    ("artist:artists!inner(artist_id,artist_name)") and aggregates
    ("avg_bpm:bpm.avg()").
    """

    relation: str
    columns: Tuple[str, ...] = ("*",)
    filters: Tuple[Filter, ...] = ()
    order: Optional[Ordering] = None
    limit: Optional[int] = Field(default=None, ge=1)

    model_config = {"frozen": True}


class ProcedureCall(BaseModel):
    """Invocation of a named server-side function (used when a sort key is an expression)."""

    name: str
    params: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


RemoteQuery = Union[Selection, ProcedureCall]


class QueryBackend(ABC):
    """
    Abstract interface for the hosted relational query service.

    Contract:
        - select() and call() issue exactly one remote request and return the
          rows in the order the service produced them
        - no retries: any failure (remote error or transport error) is raised
          as RemoteQueryError
        - implementations hold no per-request state, so one instance is shared
          by all concurrent requests
    """

    @abstractmethod
    async def select(self, selection: Selection) -> List[Row]:
        """
        Execute a declarative selection.

        Raises:
            RemoteQueryError: the service rejected the query or was unreachable.
        """
        ...

    @abstractmethod
    async def call(self, procedure: ProcedureCall) -> List[Row]:
        """
        Invoke a stored procedure that returns a set of rows.

        Raises:
            RemoteQueryError: the service rejected the call or was unreachable.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability check used by GET /health."""
        ...

    async def close(self) -> None:
        """Release network resources. Called once on application shutdown."""
        return None
