"""API routes for SheetRecon."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..config import settings
from ..engine import ReconciliationSession
from ..errors import DuplicateKeyError, InvalidColumnError
from ..models import (
    Cell,
    CellValues,
    ColumnPair,
    ComparisonSummary,
    KeySelection,
    Side,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Global session instance
_session: Optional[ReconciliationSession] = None


def get_session() -> ReconciliationSession:
    """Get the global reconciliation session."""
    global _session
    if _session is None:
        _session = ReconciliationSession.from_settings(settings)
    return _session


def reset_session() -> ReconciliationSession:
    """Discard the global session and start a fresh one."""
    global _session
    _session = None
    return get_session()


class TableUploadRequest(BaseModel):
    """A parsed table for one side of the comparison."""

    table: list[list[Cell]]
    sheet_names: list[str] = Field(default_factory=list)


class TableUploadResponse(BaseModel):
    """Shape of the table that was loaded."""

    side: Side
    rows: int
    columns: int
    sheet_names: list[str]


class ColumnMappingRequest(BaseModel):
    """A complete manual column mapping."""

    mapping: dict[int, int]


class ColumnTargetRequest(BaseModel):
    """Point one A column at a B column, or at nothing."""

    column_a: int
    column_b: Optional[int] = None


class StateResponse(BaseModel):
    """Current inputs and derived alignments."""

    headers_a: list[str]
    headers_b: list[str]
    sheet_names_a: list[str]
    sheet_names_b: list[str]
    key_selection: KeySelection
    has_key_columns: bool
    manual_mapping: bool
    column_mapping: list[ColumnPair]
    row_mapping: dict[int, int]
    can_compare: bool
    summary: ComparisonSummary


class CompareResponse(BaseModel):
    """Result of a compare request."""

    performed: bool
    differences: list[tuple[int, int]]
    summary: ComparisonSummary


class NavigationResponse(BaseModel):
    """Position within the rows that carry differences."""

    row: Optional[int]
    position: int
    total: int


def _state(session: ReconciliationSession) -> StateResponse:
    try:
        row_mapping = session.row_mapping
    except DuplicateKeyError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return StateResponse(
        headers_a=session.headers(Side.A),
        headers_b=session.headers(Side.B),
        sheet_names_a=session.sheet_names(Side.A),
        sheet_names_b=session.sheet_names(Side.B),
        key_selection=session.key_selection,
        has_key_columns=session.has_key_columns,
        manual_mapping=session.has_manual_mapping,
        column_mapping=session.column_pairs(),
        row_mapping=row_mapping,
        can_compare=session.can_compare,
        summary=session.summary(),
    )


def _navigation(session: ReconciliationSession, row: Optional[int]) -> NavigationResponse:
    navigator = session.navigator
    return NavigationResponse(row=row, position=navigator.position, total=len(navigator.rows))


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "sheetrecon",
        "config": {
            "match_strategy": settings.match_strategy,
            "similarity_threshold": settings.similarity_threshold,
            "duplicate_key_policy": settings.duplicate_key_policy,
        },
    }


# Table endpoints


@router.put("/tables/{side}", response_model=TableUploadResponse)
async def upload_table(side: Side, request: TableUploadRequest):
    """Replace one of the two tables. Clears any manual column mapping."""
    session = get_session()
    session.load_table(side, request.table, request.sheet_names)
    return TableUploadResponse(
        side=side,
        rows=len(request.table),
        columns=len(session.headers(side)),
        sheet_names=session.sheet_names(side),
    )


@router.get("/state", response_model=StateResponse)
async def get_state():
    """Get the current alignment state."""
    return _state(get_session())


# Key column endpoints


@router.put("/keys", response_model=StateResponse)
async def set_keys(request: KeySelection):
    """Set the date and size key columns of both tables."""
    session = get_session()
    try:
        session.set_key_selection(request)
        return _state(session)
    except InvalidColumnError as e:
        raise HTTPException(status_code=400, detail=str(e))


# Column mapping endpoints


@router.put("/columns/mapping", response_model=StateResponse)
async def set_column_mapping(request: ColumnMappingRequest):
    """Replace the automatic column mapping with a manual one."""
    session = get_session()
    session.set_manual_mapping(request.mapping)
    return _state(session)


@router.patch("/columns/mapping", response_model=StateResponse)
async def set_column_target(request: ColumnTargetRequest):
    """Edit a single column of the effective mapping."""
    session = get_session()
    try:
        session.set_column_target(request.column_a, request.column_b)
        return _state(session)
    except InvalidColumnError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/columns/mapping", response_model=StateResponse)
async def clear_column_mapping():
    """Drop the manual mapping and use automatic matching again."""
    session = get_session()
    session.clear_manual_mapping()
    return _state(session)


# Comparison endpoints


@router.post("/compare", response_model=CompareResponse)
async def compare():
    """Compare the two tables over the current alignment."""
    session = get_session()
    try:
        performed = session.can_compare
        differences = session.compare()
    except DuplicateKeyError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return CompareResponse(
        performed=performed,
        differences=sorted((coord.row, coord.col) for coord in differences),
        summary=session.summary(),
    )


@router.get("/cells/{row}/{col}", response_model=CellValues)
async def get_cell_values(row: int, col: int):
    """Get an A cell next to the B cell it is aligned with."""
    session = get_session()
    if not 1 <= row < len(session.table(Side.A)):
        raise HTTPException(status_code=404, detail=f"Row {row} not found in table A")
    try:
        return session.cell_values(row, col)
    except DuplicateKeyError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/diffs/next", response_model=NavigationResponse)
async def next_diff():
    """Move to the next row with differences."""
    session = get_session()
    return _navigation(session, session.navigator.next())


@router.post("/diffs/previous", response_model=NavigationResponse)
async def previous_diff():
    """Move to the previous row with differences."""
    session = get_session()
    return _navigation(session, session.navigator.previous())


@router.post("/reset")
async def reset():
    """Discard both tables and all settings."""
    reset_session()
    logger.info("Session reset")
    return {"status": "ok", "message": "Session reset"}
