"""
Tests for LayoutCanvas editing operations and drag/resize interactions.
"""

import pytest

from docbuilder.config import CanvasOptions
from docbuilder.engine.geometry import mm_to_px
from docbuilder.exceptions import LayoutError
from docbuilder.layout import HandleDirection, LayoutCanvas, Selection, paint_order
from docbuilder.layout.canvas import MoveSession, _Interaction
from docbuilder.layout.selection import DraftBuffer
from docbuilder.models import Document, Page, ParagraphBlock, TextBlock


@pytest.fixture
def document():
    return Document(pages=[Page(id="page-1")])


@pytest.fixture
def canvas(document):
    return LayoutCanvas(document, Selection())


@pytest.fixture
def block(canvas):
    # text defaults: 80 x 10 mm
    return canvas.create_block("text", 50, 50)


class TestBlockOperations:
    """Create, update, delete, duplicate, lock and stacking."""

    def test_create_block_selects_it(self, canvas, block):
        assert canvas.page.blocks == [block]
        assert canvas.selection.block_id == block.id
        assert (block.x_mm, block.y_mm, block.w_mm, block.h_mm) == (50, 50, 80, 10)

    def test_create_block_is_clamped_into_area(self, canvas):
        block = canvas.create_block("text", 500, -20)
        assert block.x_mm == 120
        assert block.y_mm == 10

    def test_create_block_z_follows_count(self, canvas, block):
        second = canvas.create_block("divider", 10, 100)
        assert second.z == 1

    def test_add_block_remints_taken_id(self, canvas, block):
        clash = canvas.add_block(TextBlock(id=block.id, x_mm=20, y_mm=20, w_mm=30))
        assert clash.id != block.id

    def test_update_block_reapplies_minimums(self, canvas, block):
        canvas.update_block(block.id, w_mm=2, h_mm=3, label="Name")
        assert (block.w_mm, block.h_mm, block.label) == (10, 8, "Name")

    def test_update_block_rejects_id_and_unknown_fields(self, canvas, block):
        with pytest.raises(LayoutError):
            canvas.update_block(block.id, id="other")
        with pytest.raises(LayoutError):
            canvas.update_block(block.id, html="<p>x</p>")

    def test_update_missing_block(self, canvas):
        assert canvas.update_block("nope", label="x") is None

    def test_delete_clears_selection(self, canvas, block):
        assert canvas.delete_block(block.id)
        assert canvas.page.blocks == []
        assert canvas.selection.block_id is None
        assert not canvas.delete_block(block.id)

    def test_locked_block_is_not_deleted(self, canvas, block):
        assert canvas.toggle_lock(block.id) is True
        assert not canvas.delete_block(block.id)
        assert canvas.toggle_lock(block.id) is False
        assert canvas.delete_block(block.id)

    def test_duplicate_offsets_and_stacks_on_top(self, canvas, block):
        clone = canvas.duplicate_block(block.id)

        assert clone.id != block.id
        assert (clone.x_mm, clone.y_mm) == (55, 55)
        assert clone.z == 1
        assert canvas.selection.block_id == clone.id
        clone.label = "changed"
        assert block.label != "changed"

    def test_duplicate_table_gets_fresh_column_ids(self, canvas):
        table = canvas.create_block("table", 20, 20)
        clone = canvas.duplicate_block(table.id)
        original_ids = {column.id for column in table.columns}
        clone_ids = {column.id for column in clone.columns}

        assert len(clone_ids) == len(table.columns)
        assert not original_ids & clone_ids
        assert [column.header for column in clone.columns] == [column.header for column in table.columns]

    def test_bring_to_front_and_send_to_back(self, canvas, block):
        other = canvas.create_block("text", 50, 80)
        third = canvas.create_block("text", 50, 100)

        canvas.bring_to_front(block.id)
        assert block.z == 3
        assert canvas.paint_order()[-1] is block

        canvas.send_to_back(third.id)
        assert third.z == 0
        canvas.send_to_back(block.id)
        assert block.z == -1
        assert canvas.paint_order()[0] is block
        assert other in canvas.paint_order()

    def test_paint_order_is_stable(self):
        a, b, c = TextBlock(id="a", z=1), TextBlock(id="b", z=0), TextBlock(id="c", z=1)
        assert [block.id for block in paint_order([a, b, c])] == ["b", "a", "c"]

    def test_block_at_returns_topmost(self, canvas, block):
        top = canvas.create_block("text", 60, 50)
        assert canvas.block_at(70, 55) is top
        assert canvas.block_at(52, 55) is block
        assert canvas.block_at(5, 5) is None

    def test_grid_step_respects_snap_setting(self, canvas, document):
        assert canvas.grid_step() == 5
        document.page_settings.grid.snap = False
        assert canvas.grid_step() is None


class TestMoveInteraction:
    """Dragging whole blocks."""

    def test_interaction_base_is_abstract(self, canvas, block):
        with pytest.raises(TypeError):
            _Interaction(canvas, block, lambda interaction: None)
        assert issubclass(MoveSession, _Interaction)

    def test_block_is_unchanged_until_commit(self, canvas, block):
        session = canvas.begin_move(block.id)
        live = session.update(mm_to_px(12), mm_to_px(7))

        assert (live.x, live.y) == pytest.approx((62, 57))
        assert (block.x_mm, block.y_mm) == (50, 50)

        session.commit()
        assert (block.x_mm, block.y_mm) == (60, 55)
        assert canvas.interaction is None

    def test_move_is_clamped(self, canvas, block):
        session = canvas.begin_move(block.id)
        session.update_mm(500, 0)
        session.commit()
        assert block.x_mm == 120

    def test_zoom_converts_screen_pixels(self, document):
        canvas = LayoutCanvas(document, options=CanvasOptions(zoom=2.0))
        block = canvas.create_block("text", 50, 50)
        session = canvas.begin_move(block.id)

        live = session.update(mm_to_px(20), 0)
        assert live.x == pytest.approx(60)

    def test_cancel_discards(self, canvas, block):
        session = canvas.begin_move(block.id)
        session.update_mm(30, 30)
        session.cancel()

        assert (block.x_mm, block.y_mm) == (50, 50)
        assert canvas.interaction is None
        with pytest.raises(LayoutError):
            session.commit()

    def test_one_interaction_at_a_time(self, canvas, block):
        other = canvas.create_block("text", 50, 80)
        session = canvas.begin_move(block.id)

        assert canvas.begin_move(other.id) is None
        assert canvas.begin_resize(other.id, HandleDirection.EAST) is None
        session.commit()
        assert canvas.begin_move(other.id) is not None

    def test_locked_block_cannot_be_dragged(self, canvas, block):
        canvas.toggle_lock(block.id)
        assert canvas.begin_move(block.id) is None
        assert canvas.begin_resize(block.id, HandleDirection.EAST) is None

    def test_teardown_cancels(self, canvas, block):
        session = canvas.begin_move(block.id)
        session.update_mm(10, 10)
        canvas.teardown()

        assert canvas.interaction is None
        assert not session.active
        assert (block.x_mm, block.y_mm) == (50, 50)

    def test_deleting_dragged_block_cancels_interaction(self, canvas, block):
        canvas.begin_move(block.id)
        canvas.delete_block(block.id)
        assert canvas.interaction is None


class TestResizeInteraction:
    """Dragging edge handles."""

    def test_east(self, canvas, block):
        session = canvas.begin_resize(block.id, HandleDirection.EAST)
        session.update_mm(12, 40)
        session.commit()
        assert (block.x_mm, block.w_mm, block.y_mm, block.h_mm) == (50, 90, 50, 10)

    def test_west_keeps_right_edge(self, canvas, block):
        session = canvas.begin_resize(block.id, "w")
        session.update_mm(-12, 0)
        session.commit()
        assert block.w_mm == 90
        assert block.x_mm + block.w_mm == 130

    def test_north_minimum_keeps_bottom_edge(self, canvas, block):
        session = canvas.begin_resize(block.id, HandleDirection.NORTH)
        live = session.update_mm(0, 100)
        assert live.h == 8
        assert live.bottom == 60

        session.commit()
        assert block.y_mm + block.h_mm == 60
        assert block.h_mm >= 8

    def test_south_resize_of_auto_height_block(self, canvas):
        block = canvas.add_block(ParagraphBlock(id="p", x_mm=20, y_mm=20, w_mm=50))
        assert block.h_mm is None

        session = canvas.begin_resize(block.id, HandleDirection.SOUTH)
        session.update_mm(0, 10)
        session.commit()
        assert block.h_mm == 20


class TestSelectionAndDrafts:
    """Selection state and uncommitted edits."""

    def test_select_page_clamps_and_clears_block(self):
        selection = Selection(page_index=0, block_id="b")
        assert selection.select_page(0, 3) == 0
        assert selection.block_id == "b"
        assert selection.select_page(7, 3) == 2
        assert selection.block_id is None
        assert selection.select_page(-4, 3) == 0

    def test_draft_commits_once(self):
        block = ParagraphBlock(id="p", html="<p>old</p>")
        drafts = DraftBuffer()
        drafts.set("p", "html", "<p>typing</p>")
        drafts.set("p", "html", "<p>new</p>")

        assert block.html == "<p>old</p>"
        assert drafts.has_draft("p", "html")
        assert drafts.commit(block) is True
        assert block.html == "<p>new</p>"
        assert not drafts.has_draft("p")
        assert drafts.commit(block) is False

    def test_draft_for_unknown_field_is_dropped(self):
        block = ParagraphBlock(id="p")
        drafts = DraftBuffer()
        drafts.set("p", "nonexistent", 1)

        assert drafts.commit(block) is False
        assert not drafts.has_draft("p")

    def test_discard(self):
        drafts = DraftBuffer()
        drafts.set("p", "html", "x")
        drafts.set("q", "html", "y")
        drafts.discard("p")

        assert not drafts.has_draft("p")
        assert drafts.get("q", "html") == "y"
