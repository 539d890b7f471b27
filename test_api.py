"""
Tests for the Wall Planner API

Runs the FastAPI app in-process through TestClient.

Usage:
    pytest test_api.py
"""

import logging

import pytest
from fastapi.testclient import TestClient

from wallplanner.logging_config import CONSOLE_HANDLER
from wallplanner.main import app, sessions_database

RECT_WALL = [(0, 0), (400, 0), (400, 300), (0, 300)]


@pytest.fixture
def client():
    sessions_database.clear()
    with TestClient(app) as c:
        yield c
    sessions_database.clear()


@pytest.fixture
def session_id(client):
    response = client.post("/api/sessions")
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def wall_session(client, session_id):
    """Session with a closed 4 x 3 m wall"""
    for x, y in RECT_WALL:
        client.post(f"/api/sessions/{session_id}/wall/points", json={"x": x, "y": y})
    response = client.post(f"/api/sessions/{session_id}/wall/points", json={"x": 3, "y": 4})
    assert response.json()["outline"]["is_closed"]
    return session_id


def draw_area(client, sid, product_id, x1, y1, x2, y2):
    return client.post(
        f"/api/sessions/{sid}/design-areas",
        json={"product_id": product_id, "x1": x1, "y1": y1, "x2": x2, "y2": y2},
    )


def test_health(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_products(client):
    response = client.get("/api/products")
    assert response.status_code == 200
    ids = [p["id"] for p in response.json()]
    assert ids == ["wallpanel", "wallboard", "moulding"]


def test_app_import_configures_logging(client):
    logger = logging.getLogger("wallplanner")
    assert CONSOLE_HANDLER in [h.get_name() for h in logger.handlers]
    assert logger.propagate is False


class TestSessions:

    def test_create_and_get(self, client, session_id):
        response = client.get(f"/api/sessions/{session_id}")
        state = response.json()
        assert response.status_code == 200
        assert state["scene"] == {"design_areas": [], "openings": [], "lists": []}
        assert state["can_undo"] is False

    def test_unknown_session(self, client):
        response = client.get("/api/sessions/nope")
        assert response.status_code == 404
        assert response.json()["success"] is False
        assert "nope" in response.json()["error"]

    def test_delete(self, client, session_id):
        assert client.delete(f"/api/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/sessions/{session_id}").status_code == 404


class TestWall:

    def test_dimensions(self, client, wall_session):
        wall = client.get(f"/api/sessions/{wall_session}/wall").json()
        assert wall["dimensions"]["area_m2"] == pytest.approx(12.0)
        assert wall["dimensions"]["perimeter_m"] == pytest.approx(14.0)
        assert wall["bounds"] == {"x": 0, "y": 0, "width": 400, "height": 300}
        assert wall["is_simple"] is True

    def test_edge_length(self, client, wall_session):
        response = client.put(f"/api/sessions/{wall_session}/wall/edges/0", json={"length_m": 5})
        assert response.status_code == 200
        assert response.json()["outline"]["points"][1] == {"x": 500, "y": 0}

    def test_edge_length_must_be_positive(self, client, wall_session):
        response = client.put(f"/api/sessions/{wall_session}/wall/edges/0", json={"length_m": 0})
        assert response.status_code == 422

    def test_move_point_bad_index(self, client, wall_session):
        response = client.put(f"/api/sessions/{wall_session}/wall/points/9", json={"x": 1, "y": 1})
        assert response.status_code == 404

    def test_shapes_need_closed_wall(self, client, session_id):
        response = draw_area(client, session_id, "wallpanel", 0, 0, 100, 100)
        assert response.status_code == 409

    def test_reset_drops_everything(self, client, wall_session):
        draw_area(client, wall_session, "wallpanel", 0, 0, 100, 100)
        state = client.delete(f"/api/sessions/{wall_session}/wall").json()
        assert state["wall"]["outline"]["points"] == []
        assert state["scene"]["design_areas"] == []
        assert state["can_undo"] is False
        assert state["can_redo"] is False


class TestShapes:

    def test_draw_design_area(self, client, wall_session):
        response = draw_area(client, wall_session, "wallpanel", 300, 290, 0, 0)
        body = response.json()
        assert response.status_code == 201
        assert body["committed"] is True
        assert body["shape"]["kind"] == "design_area"
        assert body["shape"]["rect"] == {"x": 0, "y": 0, "width": 300, "height": 290}

    def test_tiny_drag_is_discarded(self, client, wall_session):
        response = draw_area(client, wall_session, "wallpanel", 0, 0, 3, 100)
        assert response.status_code == 200
        assert response.json()["committed"] is False
        state = client.get(f"/api/sessions/{wall_session}").json()
        assert state["can_undo"] is False

    def test_delete_shapes(self, client, wall_session):
        area_id = draw_area(client, wall_session, "wallpanel", 0, 0, 100, 100).json()["shape"]["id"]
        opening = client.post(
            f"/api/sessions/{wall_session}/openings",
            json={"opening_type": "door", "x1": 10, "y1": 10, "x2": 60, "y2": 200},
        ).json()["shape"]
        assert opening["opening_type"] == "door"
        assert client.delete(f"/api/sessions/{wall_session}/design-areas/{area_id}").status_code == 200
        assert client.delete(f"/api/sessions/{wall_session}/openings/{opening['id']}").status_code == 200
        assert client.delete(f"/api/sessions/{wall_session}/design-areas/{area_id}").status_code == 404

    def test_list_with_area_product_is_rejected(self, client, wall_session):
        response = client.post(
            f"/api/sessions/{wall_session}/lists",
            json={"product_id": "wallpanel", "x1": 0, "y1": 0, "x2": 1000, "y2": 0},
        )
        assert response.status_code == 422
        assert response.json()["success"] is False
        assert "wallpanel" in response.json()["error"]
        state = client.get(f"/api/sessions/{wall_session}").json()
        assert state["scene"]["lists"] == []
        assert state["can_undo"] is False
        bom = client.get(f"/api/sessions/{wall_session}/bom").json()
        assert bom["per_product_count"]["wallpanel"] == 0

    def test_clear_shapes(self, client, wall_session):
        draw_area(client, wall_session, "wallpanel", 0, 0, 100, 100)
        client.post(
            f"/api/sessions/{wall_session}/lists",
            json={"product_id": "moulding", "x1": 0, "y1": 0, "x2": 100, "y2": 0},
        )
        scene = client.delete(f"/api/sessions/{wall_session}/shapes").json()
        assert scene == {"design_areas": [], "openings": [], "lists": []}

    def test_net_rects(self, client, wall_session):
        area_id = draw_area(client, wall_session, "wallpanel", 0, 0, 100, 100).json()["shape"]["id"]
        client.post(
            f"/api/sessions/{wall_session}/openings",
            json={"opening_type": "window", "x1": 50, "y1": 0, "x2": 100, "y2": 100},
        )
        rects = client.get(f"/api/sessions/{wall_session}/design-areas/{area_id}/net").json()
        assert rects == [{"x": 0, "y": 0, "width": 50, "height": 100}]


class TestHistory:

    def test_undo_redo(self, client, wall_session):
        draw_area(client, wall_session, "wallpanel", 0, 0, 100, 100)
        draw_area(client, wall_session, "wallboard", 0, 0, 100, 100)

        state = client.post(f"/api/sessions/{wall_session}/undo").json()
        assert [a["product_id"] for a in state["scene"]["design_areas"]] == ["wallpanel"]
        assert state["can_redo"] is True

        state = client.post(f"/api/sessions/{wall_session}/redo").json()
        assert len(state["scene"]["design_areas"]) == 2
        assert state["can_redo"] is False

    def test_new_action_after_undo_clears_redo(self, client, wall_session):
        draw_area(client, wall_session, "wallpanel", 0, 0, 100, 100)
        client.post(f"/api/sessions/{wall_session}/undo")
        draw_area(client, wall_session, "wallboard", 0, 0, 100, 100)
        state = client.get(f"/api/sessions/{wall_session}").json()
        assert state["can_redo"] is False

    def test_undo_with_nothing_to_undo(self, client, wall_session):
        response = client.post(f"/api/sessions/{wall_session}/undo")
        assert response.status_code == 200
        assert response.json()["scene"]["design_areas"] == []


class TestBillOfMaterials:

    def test_bom(self, client, wall_session):
        draw_area(client, wall_session, "wallpanel", 0, 0, 400, 290)
        client.post(
            f"/api/sessions/{wall_session}/openings",
            json={"opening_type": "window", "x1": 100, "y1": 100, "x2": 200, "y2": 200},
        )
        client.post(
            f"/api/sessions/{wall_session}/lists",
            json={"product_id": "moulding", "x1": 0, "y1": 0, "x2": 290, "y2": 0},
        )
        bom = client.get(f"/api/sessions/{wall_session}/bom").json()
        assert bom["total_design_area_m2"] == pytest.approx(10.6)
        # 10.6 m² / 0.464 m² -> 23 + 1
        assert bom["per_product_count"] == {"wallpanel": 24, "wallboard": 0, "moulding": 2}
        assert bom["wall_area_m2"] == pytest.approx(12.0)

    def test_bom_csv(self, client, wall_session):
        draw_area(client, wall_session, "wallpanel", 0, 0, 100, 100)
        response = client.get(f"/api/sessions/{wall_session}/bom.csv")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0] == "Product,Mode,Quantity,Unit,Count"
        assert len(lines) == 4
