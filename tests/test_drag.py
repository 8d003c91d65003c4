import random
import unittest

from shape_puzzle.game import (
    MatchResult,
    Modality,
    PieceState,
    PointerDragSession,
    RoundConfig,
    RoundController,
    Scheduler,
    SessionState,
    ShapeId,
    TouchDragSession,
)

THREE = [ShapeId.CIRCLE, ShapeId.SQUARE, ShapeId.CROSS]


def make_controller(seed=4):
    controller = RoundController(scheduler=Scheduler(lambda: 0), rng=random.Random(seed))
    controller.start_round(RoundConfig.of(THREE, 3))
    return controller


def hole_for(controller, shape):
    return next(h for h in controller.holes if h.required_shape == shape)


def other_hole(controller, shape):
    return next(h for h in controller.holes if h.required_shape != shape)


class TestTouchDrag(unittest.TestCase):
    def setUp(self):
        self.controller = make_controller()
        self.scene = self.controller.scene
        # Middle tray piece, so sibling order matters on revert
        self.piece = self.controller.pieces[1]
        self.node = self.scene.node_for(self.piece)
        self.origin_rect = self.node.rect.copy()

    def _begin(self, dx=10, dy=15):
        x, y = self.origin_rect.x + dx, self.origin_rect.y + dy
        session = self.controller.begin_drag(self.piece, Modality.TOUCH, x, y, pointer_id=7)
        self.assertIsInstance(session, TouchDragSession)
        return session

    def test_given_touch_start_when_beginning_then_piece_floats_at_original_size(self):
        session = self._begin()
        self.assertIs(session.state, SessionState.ACTIVE)
        self.assertIs(self.piece.state, PieceState.DRAGGING)
        self.assertIs(self.node.parent, self.scene.drag_layer)
        self.assertTrue(self.node.floating)
        self.assertEqual(self.node.rect, self.origin_rect)
        self.assertEqual(session.pointer_offset, (10, 15))
        self.assertIs(session.origin_parent, self.scene.tray)
        self.assertEqual(session.origin_index, 1)

    def test_given_active_touch_when_moving_then_grab_point_stays_under_finger(self):
        self._begin(dx=10, dy=15)
        self.controller.move_drag(300, 200, pointer_id=7)
        self.assertEqual(self.node.rect.topleft, (290, 185))
        self.assertEqual(self.node.rect.size, self.origin_rect.size)
        self.controller.move_drag(301, 202, pointer_id=7)
        self.assertEqual(self.node.rect.topleft, (291, 187))

    def test_given_piece_over_hole_then_lifted_piece_would_cover_the_hole(self):
        self._begin()
        target = self.scene.node_for(hole_for(self.controller, self.piece.shape)).rect.center
        self.controller.move_drag(*target, pointer_id=7)
        self.assertIs(self.scene.hit_test(*target), self.node)

    def test_given_matching_hole_when_releasing_then_piece_placed_into_hole(self):
        session = self._begin()
        hole = hole_for(self.controller, self.piece.shape)
        target = self.scene.node_for(hole).rect.center
        self.controller.move_drag(*target, pointer_id=7)
        result = self.controller.end_drag(*target, pointer_id=7)
        self.assertIs(result, MatchResult.ACCEPTED)
        self.assertIs(session.state, SessionState.COMMITTED)
        self.assertIs(self.piece.state, PieceState.PLACED)
        self.assertIs(self.node.parent, self.scene.node_for(hole))
        self.assertFalse(self.node.floating)
        self.assertTrue(self.node.visible)
        self.assertEqual(self.controller.progress.placed_count, 1)
        self.assertIsNone(self.controller.active_session)

    def test_given_wrong_hole_when_releasing_then_piece_returns_to_its_slot(self):
        session = self._begin()
        tray_order = list(self.scene.tray.children)
        target = self.scene.node_for(other_hole(self.controller, self.piece.shape)).rect.center
        self.controller.move_drag(*target, pointer_id=7)
        result = self.controller.end_drag(*target, pointer_id=7)
        self.assertIs(result, MatchResult.REJECTED)
        self.assertIs(session.state, SessionState.IDLE)
        self.assertIs(session.outcome, SessionState.REVERTED)
        self.assertIs(self.piece.state, PieceState.TRAY)
        self.assertIs(self.node.parent, self.scene.tray)
        self.assertEqual(self.node.index_in_parent(), 1)
        self.assertFalse(self.node.floating)
        self.assertEqual(self.node.rect, self.origin_rect)
        self.assertEqual(self.scene.drag_layer.children, [])
        self.assertEqual(len(tray_order), 2)
        self.assertEqual(self.controller.progress.placed_count, 0)

    def test_given_release_outside_any_hole_then_reverted(self):
        self._begin()
        self.controller.move_drag(2, 2, pointer_id=7)
        self.assertIs(self.controller.end_drag(2, 2, pointer_id=7), MatchResult.REJECTED)
        self.assertIs(self.piece.state, PieceState.TRAY)
        self.assertEqual(self.node.rect, self.origin_rect)

    def test_given_reverted_piece_when_dragging_again_then_session_reusable(self):
        self._begin()
        self.controller.end_drag(2, 2, pointer_id=7)
        self._begin()
        target = self.scene.node_for(hole_for(self.controller, self.piece.shape)).rect.center
        self.assertIs(self.controller.end_drag(*target, pointer_id=7), MatchResult.ACCEPTED)

    def test_given_active_touch_when_second_finger_acts_then_ignored(self):
        session = self._begin()
        other = self.controller.pieces[0]
        other_center = self.scene.node_for(other).rect.center
        self.assertIsNone(self.controller.begin_drag(other, Modality.TOUCH, *other_center, pointer_id=8))
        self.assertIs(other.state, PieceState.TRAY)
        before = self.node.rect.copy()
        self.controller.move_drag(500, 500, pointer_id=8)
        self.assertEqual(self.node.rect, before)
        self.assertIsNone(self.controller.end_drag(500, 500, pointer_id=8))
        self.assertIs(self.controller.active_session, session)
        self.assertTrue(session.active)

    def test_given_focus_lost_when_cancelling_then_full_revert(self):
        self._begin()
        self.controller.move_drag(400, 100, pointer_id=7)
        self.assertIs(self.controller.cancel_drag(), MatchResult.REJECTED)
        self.assertIs(self.node.parent, self.scene.tray)
        self.assertEqual(self.node.index_in_parent(), 1)
        self.assertIsNone(self.controller.cancel_drag())


class TestPointerDrag(unittest.TestCase):
    def setUp(self):
        self.controller = make_controller(seed=9)
        self.scene = self.controller.scene
        self.piece = self.controller.pieces[0]
        self.node = self.scene.node_for(self.piece)

    def test_given_pointer_drag_when_beginning_then_payload_is_shape_string(self):
        x, y = self.node.rect.center
        session = self.controller.begin_drag(self.piece, Modality.POINTER, x, y)
        self.assertIsInstance(session, PointerDragSession)
        self.assertEqual(session.payload, self.piece.shape.value)
        self.assertIsInstance(session.payload, str)
        # The platform draws the drag image; the piece stays put
        self.assertIs(self.node.parent, self.scene.tray)
        self.assertFalse(self.node.floating)
        self.controller.move_drag(50, 60)
        self.assertEqual(session.cursor, (50, 60))
        self.assertIs(self.node.parent, self.scene.tray)

    def test_given_pointer_release_over_matching_hole_then_accepted(self):
        hole = hole_for(self.controller, self.piece.shape)
        self.controller.begin_drag(self.piece, Modality.POINTER, *self.node.rect.center)
        target = self.scene.node_for(hole).rect.center
        self.assertIs(self.controller.end_drag(*target), MatchResult.ACCEPTED)
        self.assertTrue(hole.occupied)

    def test_given_pointer_release_over_wrong_hole_then_rejected_and_payload_cleared(self):
        session = self.controller.begin_drag(self.piece, Modality.POINTER, *self.node.rect.center)
        target = self.scene.node_for(other_hole(self.controller, self.piece.shape)).rect.center
        self.assertIs(self.controller.end_drag(*target), MatchResult.REJECTED)
        self.assertIsNone(session.payload)
        self.assertIs(self.piece.state, PieceState.TRAY)
        self.assertEqual(self.node.index_in_parent(), 0)

    def test_given_drop_on_filled_hole_area_then_resolves_to_that_hole(self):
        first = self.controller.pieces[1]
        hole = hole_for(self.controller, first.shape)
        self.controller.begin_drag(first, Modality.POINTER, *self.scene.node_for(first).rect.center)
        self.controller.drop_on(hole)
        # The placed piece covers the hole; the hit still resolves to the hole
        self.assertIs(self.scene.hole_at(*self.scene.node_for(hole).rect.center), hole)
        self.controller.begin_drag(self.piece, Modality.POINTER, *self.node.rect.center)
        self.assertIs(self.controller.end_drag(*self.scene.node_for(hole).rect.center), MatchResult.REJECTED)

    def test_given_no_active_drag_when_dropping_then_noop(self):
        self.assertIsNone(self.controller.end_drag(100, 100))
        self.assertIsNone(self.controller.drop_on(self.controller.holes[0]))
        session = self.controller.session_for(self.piece, Modality.POINTER)
        self.assertIsNone(session.end(0, 0))
        self.assertIsNone(session.drop_on(None))
        session.update(1, 1)
        self.assertIs(session.state, SessionState.IDLE)
        self.assertEqual(self.controller.progress.placed_count, 0)

    def test_given_active_pointer_drag_when_touch_starts_then_ignored(self):
        self.controller.begin_drag(self.piece, Modality.POINTER, *self.node.rect.center, pointer_id=-1)
        other = self.controller.pieces[2]
        self.assertIsNone(self.controller.begin_drag(other, Modality.TOUCH, 0, 0, pointer_id=3))
        self.assertIsNone(self.controller.end_drag(0, 0, pointer_id=3))
        self.assertTrue(self.controller.active_session.active)


if __name__ == "__main__":
    unittest.main()
