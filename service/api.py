"""FastAPI service exposing the document compiler over HTTP."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ir.errors import CompileError
from pipeline import config
from pipeline.run import load_schema, process as run_pipeline

config.configure_logging()
log = logging.getLogger(__name__)

app = FastAPI(
    title="table-gql-compiler API",
    description="Compile GraphQL queries and CRUD mutations from table metadata.",
    version="1.0.0",
)


class CompileRequest(BaseModel):
    table: str
    select: Optional[Dict[str, Any]] = None
    options: Optional[Dict[str, Any]] = None
    metadata_path: Optional[str] = None
    values: Optional[Dict[str, Any]] = None
    id: Optional[Any] = None
    patch: Optional[Dict[str, Any]] = None


class DocumentResponse(BaseModel):
    operation_name: str
    document: str
    variables: Dict[str, Any]
    digest: str


class TablesResponse(BaseModel):
    tables: List[str]


def _resolve_metadata_path(requested: Optional[str]) -> str:
    if requested:
        return requested
    return config.METADATA_PATH


def _compile(operation: str, payload: CompileRequest) -> DocumentResponse:
    path = _resolve_metadata_path(payload.metadata_path)
    try:
        result = run_pipeline(
            operation,
            payload.table,
            select=payload.select,
            options=payload.options,
            metadata_path=path,
            values=payload.values,
            row_id=payload.id,
            patch=payload.patch,
        )
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"metadata not found: {path}") from exc
    except CompileError as exc:
        log.info("rejected %s on %s: %s", operation, payload.table, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    doc = result["document"]
    return DocumentResponse(
        operation_name=doc.operation_name,
        document=doc.text,
        variables=doc.variables,
        digest=doc.digest,
    )


@app.post("/query", response_model=DocumentResponse)
async def query_endpoint(payload: CompileRequest) -> DocumentResponse:
    """Connection query with optional pagination, filter and ordering."""
    return _compile("query", payload)


@app.post("/find-one", response_model=DocumentResponse)
async def find_one_endpoint(payload: CompileRequest) -> DocumentResponse:
    return _compile("find-one", payload)


@app.post("/count", response_model=DocumentResponse)
async def count_endpoint(payload: CompileRequest) -> DocumentResponse:
    return _compile("count", payload)


@app.post("/mutation/{action}", response_model=DocumentResponse)
async def mutation_endpoint(action: str, payload: CompileRequest) -> DocumentResponse:
    if action not in ("create", "update", "delete"):
        raise HTTPException(status_code=404, detail=f"unknown mutation '{action}'")
    return _compile(action, payload)


@app.get("/tables", response_model=TablesResponse)
async def tables_endpoint(metadata_path: Optional[str] = None) -> TablesResponse:
    path = _resolve_metadata_path(metadata_path)
    try:
        tables = load_schema(path)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"metadata not found: {path}") from exc
    except CompileError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TablesResponse(tables=[t.name for t in tables])
