"""
FastAPI Backend for the Wall Planner

REST API for tracing a wall, placing design areas, openings and moulding
lists on it, undo/redo, and the resulting bill of materials.
Run with: uvicorn wallplanner.main:app --reload
"""

import logging
from typing import Dict, List

from fastapi import FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog import PRODUCTS
from .config import EditorConfig
from .errors import ProductModeError, ShapeNotFoundError, WallEditError
from .logging_config import setup_logging
from .models import (
    BillOfMaterials,
    DesignAreaRequest,
    DrawResult,
    EdgeLengthRequest,
    ErrorResponse,
    ListRequest,
    OpeningRequest,
    PointRequest,
    Product,
    Rect,
    Scene,
    SessionState,
    WallState,
)
from .quantities import bill_of_materials_frame
from .session import WallSession

# Runs on import so `uvicorn wallplanner.main:app` logs too
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Wall Planner API",
    description="REST API for wall material layout and bill-of-materials calculation",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS for the canvas UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

editor_config = EditorConfig.from_env()

# In-memory storage, one entry per open editor
sessions_database: Dict[str, WallSession] = {}


def _get_session(session_id: str) -> WallSession:
    session = sessions_database.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found"
        )
    return session


def _require_closed_wall(session: WallSession) -> None:
    if not session.wall.is_closed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Close the wall outline before placing shapes"
        )


def _draw_result(response: Response, shape, kind: str) -> DrawResult:
    if shape is None:
        response.status_code = status.HTTP_200_OK
        return DrawResult(committed=False, message=f"{kind} too small, discarded")
    return DrawResult(committed=True, shape=shape)


@app.get("/", tags=["Root"])
async def root():
    """API root endpoint"""
    return {
        "message": "Wall Planner API v1.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "sessions_count": len(sessions_database)
    }


@app.get("/api/products", response_model=List[Product], tags=["Products"])
async def get_products():
    """Get the product catalog"""
    return PRODUCTS


# ============================================================================
# SESSION ENDPOINTS
# ============================================================================

@app.post("/api/sessions", response_model=SessionState, tags=["Sessions"],
          status_code=status.HTTP_201_CREATED)
async def create_session():
    """Open a new, empty wall session"""
    session = WallSession(editor_config)
    sessions_database[session.id] = session
    logger.info("Session %s created", session.id)
    return session.state()


@app.get("/api/sessions/{session_id}", response_model=SessionState, tags=["Sessions"])
async def get_session(session_id: str):
    """Get wall, scene and undo/redo availability"""
    return _get_session(session_id).state()


@app.delete("/api/sessions/{session_id}", tags=["Sessions"])
async def delete_session(session_id: str):
    """Close a session"""
    _get_session(session_id)
    del sessions_database[session_id]
    return {"message": f"Session '{session_id}' deleted successfully"}


# ============================================================================
# WALL ENDPOINTS
# ============================================================================

@app.get("/api/sessions/{session_id}/wall", response_model=WallState, tags=["Wall"])
async def get_wall(session_id: str):
    """Get the outline with its area, perimeter and bounds"""
    return _get_session(session_id).wall_state()


@app.post("/api/sessions/{session_id}/wall/points", response_model=WallState, tags=["Wall"])
async def add_wall_point(session_id: str, point: PointRequest):
    """
    Add a vertex to the outline

    A point placed near the first vertex closes the outline instead.
    Points added after closing are ignored.
    """
    session = _get_session(session_id)
    session.add_point(point.x, point.y)
    return session.wall_state()


@app.put("/api/sessions/{session_id}/wall/points/{index}", response_model=WallState, tags=["Wall"])
async def move_wall_point(session_id: str, index: int, point: PointRequest):
    """Move a vertex, snapping to horizontal/vertical alignment with neighbours"""
    session = _get_session(session_id)
    try:
        session.move_point(index, point.x, point.y)
    except WallEditError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return session.wall_state()


@app.put("/api/sessions/{session_id}/wall/edges/{index}", response_model=WallState, tags=["Wall"])
async def set_wall_edge_length(session_id: str, index: int, body: EdgeLengthRequest):
    """Stretch an edge to an exact length in meters"""
    session = _get_session(session_id)
    try:
        session.set_edge_length(index, body.length_m)
    except WallEditError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return session.wall_state()


@app.delete("/api/sessions/{session_id}/wall", response_model=SessionState, tags=["Wall"])
async def reset_wall(session_id: str):
    """Clear the wall, all shapes and the undo history"""
    session = _get_session(session_id)
    session.reset()
    return session.state()


# ============================================================================
# SHAPE ENDPOINTS
# ============================================================================

@app.post("/api/sessions/{session_id}/design-areas", response_model=DrawResult,
          tags=["Shapes"], status_code=status.HTTP_201_CREATED)
async def draw_design_area(session_id: str, body: DesignAreaRequest, response: Response):
    """
    Place a design area from a finished drag gesture

    - **product_id**: Catalog product covering the area
    - **x1/y1, x2/y2**: Drag start and end in canvas pixels

    Gestures smaller than the minimum shape size are discarded.
    """
    session = _get_session(session_id)
    _require_closed_wall(session)
    area = session.draw_design_area(body.product_id, body.x1, body.y1, body.x2, body.y2)
    return _draw_result(response, area, "Design area")


@app.post("/api/sessions/{session_id}/openings", response_model=DrawResult,
          tags=["Shapes"], status_code=status.HTTP_201_CREATED)
async def draw_opening(session_id: str, body: OpeningRequest, response: Response):
    """Place a window or door from a finished drag gesture"""
    session = _get_session(session_id)
    _require_closed_wall(session)
    opening = session.draw_opening(body.opening_type, body.x1, body.y1, body.x2, body.y2)
    return _draw_result(response, opening, "Opening")


@app.post("/api/sessions/{session_id}/lists", response_model=DrawResult,
          tags=["Shapes"], status_code=status.HTTP_201_CREATED)
async def draw_list(session_id: str, body: ListRequest, response: Response):
    """Place a moulding run from (x1, y1) to (x2, y2)"""
    session = _get_session(session_id)
    _require_closed_wall(session)
    try:
        segment = session.draw_list(body.product_id, body.x1, body.y1, body.x2, body.y2)
    except ProductModeError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _draw_result(response, segment, "List")


async def _remove_shape(remove, shape_id: str):
    try:
        remove(shape_id)
    except ShapeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"message": f"'{shape_id}' deleted successfully"}


@app.delete("/api/sessions/{session_id}/design-areas/{area_id}", tags=["Shapes"])
async def delete_design_area(session_id: str, area_id: str):
    """Delete a design area"""
    return await _remove_shape(_get_session(session_id).remove_design_area, area_id)


@app.delete("/api/sessions/{session_id}/openings/{opening_id}", tags=["Shapes"])
async def delete_opening(session_id: str, opening_id: str):
    """Delete an opening"""
    return await _remove_shape(_get_session(session_id).remove_opening, opening_id)


@app.delete("/api/sessions/{session_id}/lists/{list_id}", tags=["Shapes"])
async def delete_list(session_id: str, list_id: str):
    """Delete a list segment"""
    return await _remove_shape(_get_session(session_id).remove_list, list_id)


@app.delete("/api/sessions/{session_id}/shapes", response_model=Scene, tags=["Shapes"])
async def clear_shapes(session_id: str):
    """Remove every shape as a single undoable step"""
    session = _get_session(session_id)
    session.clear_shapes()
    return session.scene


# ============================================================================
# HISTORY ENDPOINTS
# ============================================================================

@app.post("/api/sessions/{session_id}/undo", response_model=SessionState, tags=["History"])
async def undo(session_id: str):
    """Undo the last shape change; no-op when there is nothing to undo"""
    session = _get_session(session_id)
    session.undo()
    return session.state()


@app.post("/api/sessions/{session_id}/redo", response_model=SessionState, tags=["History"])
async def redo(session_id: str):
    """Redo the last undone change; no-op when there is nothing to redo"""
    session = _get_session(session_id)
    session.redo()
    return session.state()


# ============================================================================
# BILL OF MATERIALS ENDPOINTS
# ============================================================================

@app.get("/api/sessions/{session_id}/bom", response_model=BillOfMaterials, tags=["Materials"])
async def get_bill_of_materials(session_id: str):
    """
    Compute the bill of materials for the current scene

    Returns per-product purchase counts, net design area, per-shape
    breakdown and wall coverage.
    """
    return _get_session(session_id).bill_of_materials()


@app.get("/api/sessions/{session_id}/bom.csv", tags=["Materials"])
async def export_bill_of_materials(session_id: str):
    """Download the material list as CSV"""
    frame = bill_of_materials_frame(_get_session(session_id).bill_of_materials())
    return Response(
        content=frame.to_csv(index=False),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="materials-{session_id}.csv"'}
    )


@app.get("/api/sessions/{session_id}/design-areas/{area_id}/net",
         response_model=List[Rect], tags=["Materials"])
async def get_net_rects(session_id: str, area_id: str):
    """Visible rectangles of a design area after openings and later areas"""
    session = _get_session(session_id)
    try:
        return session.net_rects(area_id)
    except ShapeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom HTTP exception handler"""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            detail=str(exc)
        ).model_dump()
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
