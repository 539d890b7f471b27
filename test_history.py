"""Tests for scene mutations, undo/redo history and session drawing."""
import pytest

from wallplanner import history
from wallplanner import scene as ops
from wallplanner.config import EditorConfig
from wallplanner.errors import ProductModeError, ShapeNotFoundError
from wallplanner.models import (
    DesignArea,
    History,
    ListSegment,
    Opening,
    OpeningType,
    Rect,
    Scene,
)
from wallplanner.session import WallSession


def R(x, y, w, h):
    return Rect(x=x, y=y, width=w, height=h)


def make_area(area_id="a", x=0):
    return DesignArea(id=area_id, product_id="wallpanel", rect=R(x, 0, 100, 100))


class TestMutators:

    def test_add_pushes_pre_mutation_snapshot(self):
        h = History()
        empty = Scene()
        s = ops.add_design_area(h, empty, make_area())
        assert [a.id for a in s.design_areas] == ["a"]
        assert h.past == [Scene()]
        assert h.future == []
        assert empty.is_empty()

    def test_add_normalizes_rect(self):
        h = History()
        area = DesignArea(id="a", product_id="wallpanel", rect=R(100, 100, -50, -20))
        s = ops.add_design_area(h, Scene(), area)
        assert s.design_areas[0].rect == R(50, 80, 50, 20)

    def test_add_each_kind(self):
        h = History()
        s = ops.add_design_area(h, Scene(), make_area())
        s = ops.add_opening(h, s, Opening(id="w", opening_type=OpeningType.WINDOW, rect=R(0, 0, 10, 10)))
        s = ops.add_list_segment(h, s, ListSegment(id="l", product_id="moulding", x1=0, y1=0, x2=10, y2=0))
        assert (len(s.design_areas), len(s.openings), len(s.lists)) == (1, 1, 1)
        assert len(h.past) == 3

    def test_add_appends_on_top(self):
        h = History()
        s = ops.add_design_area(h, Scene(), make_area("a"))
        s = ops.add_design_area(h, s, make_area("b"))
        assert [a.id for a in s.design_areas] == ["a", "b"]

    def test_remove(self):
        h = History()
        s = ops.add_design_area(h, Scene(), make_area("a"))
        s = ops.add_design_area(h, s, make_area("b"))
        s = ops.remove_design_area(h, s, "a")
        assert [a.id for a in s.design_areas] == ["b"]
        assert len(h.past) == 3

    def test_remove_unknown_leaves_history_alone(self):
        h = History()
        s = ops.add_design_area(h, Scene(), make_area("a"))
        with pytest.raises(ShapeNotFoundError):
            ops.remove_opening(h, s, "nope")
        assert len(h.past) == 1

    def test_clear_all_is_one_step(self):
        h = History()
        s = ops.add_design_area(h, Scene(), make_area("a"))
        s = ops.add_list_segment(h, s, ListSegment(id="l", product_id="moulding", x1=0, y1=0, x2=10, y2=0))
        s = ops.clear_all(h, s)
        assert s.is_empty()
        s = history.undo(h, s)
        assert len(s.design_areas) == 1 and len(s.lists) == 1


class TestDrawingGate:

    def test_small_drag_is_discarded(self):
        assert ops.design_area_from_drag("wallpanel", 0, 0, 4, 100) is None
        assert ops.opening_from_drag(OpeningType.DOOR, 0, 0, 100, -4) is None
        assert ops.list_from_drag("moulding", 0, 0, 3, 3) is None

    def test_backward_drag_is_normalized(self):
        area = ops.design_area_from_drag("wallpanel", 200, 300, 100, 100)
        assert area.rect == R(100, 100, 100, 200)
        assert len(area.id) == 9

    def test_threshold_from_config(self):
        config = EditorConfig(min_shape_px=50)
        assert ops.design_area_from_drag("wallpanel", 0, 0, 40, 100, config) is None
        assert ops.list_from_drag("moulding", 0, 0, 60, 0, config) is not None


class TestUndoRedo:

    def test_undo_on_empty_history_is_noop(self):
        h = History()
        s = Scene(design_areas=[make_area()])
        assert history.undo(h, s) is s
        assert history.redo(h, s) is s

    def test_n_mutations_then_n_undos_restores_empty_scene(self):
        h = History()
        s = Scene()
        for i in range(5):
            s = ops.add_design_area(h, s, make_area(str(i), x=i * 10))
        s = ops.remove_design_area(h, s, "2")
        for _ in range(6):
            s = history.undo(h, s)
        assert s == Scene()
        assert not h.can_undo
        assert len(h.future) == 6

    def test_redo_replays_in_order(self):
        h = History()
        s = ops.add_design_area(h, Scene(), make_area("a"))
        s = ops.add_design_area(h, s, make_area("b"))
        s = history.undo(h, s)
        s = history.undo(h, s)
        s = history.redo(h, s)
        assert [a.id for a in s.design_areas] == ["a"]
        s = history.redo(h, s)
        assert [a.id for a in s.design_areas] == ["a", "b"]
        assert not h.can_redo

    def test_new_mutation_after_undo_drops_future(self):
        h = History()
        s = Scene()
        for i in range(3):
            s = ops.add_design_area(h, s, make_area(str(i)))
        s = history.undo(h, s)
        s = history.undo(h, s)
        assert h.can_redo
        s = ops.add_opening(h, s, Opening(id="w", opening_type=OpeningType.WINDOW, rect=R(0, 0, 5, 5)))
        assert h.future == []
        assert history.redo(h, s) is s

    def test_snapshots_do_not_alias_live_scene(self):
        h = History()
        s = Scene(design_areas=[make_area("a")])
        s2 = ops.add_design_area(h, s, make_area("b"))
        s.design_areas.append(make_area("mutated"))
        s2.design_areas.clear()
        assert [a.id for a in h.past[0].design_areas] == ["a"]

    def test_undo_snapshot_does_not_alias(self):
        h = History()
        s = ops.add_design_area(h, Scene(), make_area("a"))
        s = history.undo(h, s)
        s.design_areas.append(make_area("x"))
        assert [a.id for a in h.future[0].design_areas] == ["a"]

    def test_history_limit_drops_oldest(self):
        h = History()
        config = EditorConfig(history_limit=2)
        s = Scene()
        for i in range(4):
            s = ops.add_design_area(h, s, make_area(str(i)), config)
        assert len(h.past) == 2
        s = history.undo(h, s)
        s = history.undo(h, s)
        assert [a.id for a in s.design_areas] == ["0", "1"]

    def test_clear_drops_everything(self):
        h = History()
        s = ops.add_design_area(h, Scene(), make_area())
        history.undo(h, s)
        history.clear(h)
        assert h.past == [] and h.future == []


class TestSessionDrawing:

    def test_list_needs_length_product(self):
        session = WallSession()
        with pytest.raises(ProductModeError):
            session.draw_list("wallpanel", 0, 0, 1000, 0)
        assert session.scene.is_empty()
        assert not session.history.can_undo

    def test_list_with_length_product(self):
        session = WallSession()
        segment = session.draw_list("moulding", 0, 0, 290, 0)
        assert session.scene.lists == [segment]
        assert session.bill_of_materials().per_product_count["moulding"] == 2

    def test_list_with_unknown_product_is_placed(self):
        session = WallSession()
        assert session.draw_list("missing", 0, 0, 100, 0) is not None
        assert session.history.can_undo
