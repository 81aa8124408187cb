import unittest

from kensington.domain.board import Color, build_board
from kensington.domain.geometry import BoardLayout
from kensington.game import (
    GameEngine,
    GamePhase,
    MillSeekingPolicy,
    RandomPolicy,
    apply_action,
    list_legal_actions,
    place_token,
)
from kensington.game.mills import TriangleMill, mill_id

from tests.fixtures import isolated_vertices, movement_state, triangle_with_approach


class GameEngineClickTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = GameEngine()
        self.board = self.engine.board

    def test_click_places_and_switches_player(self) -> None:
        state = self.engine.handle_click(4)
        self.assertIs(state.token_at(4), Color.RED)
        self.assertIs(state.current_player, Color.BLUE)
        self.assertIsNone(state.last_rejection)

    def test_rejected_click_only_updates_message(self) -> None:
        self.engine.handle_click(4)
        state = self.engine.handle_click(4)
        self.assertEqual(state.last_rejection, "invalid_target")
        self.assertEqual(state.message, "That vertex is already occupied.")
        self.assertEqual(state.occupancy, {4: Color.RED})
        self.assertIs(state.current_player, Color.BLUE)

    def test_movement_rejections_keep_selection(self) -> None:
        triangle, target, mover = triangle_with_approach(self.board)
        others = [vertex_id for vertex_id in triangle if vertex_id != target]
        blue = isolated_vertices(self.board, [*triangle, mover], 2)
        self.engine.state = movement_state(self.board, red=[*others, mover], blue=blue)

        self.assertEqual(self.engine.handle_click(blue[0]).last_rejection, "wrong_turn")
        self.assertEqual(self.engine.handle_click(target).last_rejection, "no_selection")

        self.engine.handle_click(mover)
        far = next(
            vertex_id
            for vertex_id in self.engine.state.empty_vertices()
            if not self.board.is_adjacent(mover, vertex_id)
        )
        state = self.engine.handle_click(far)
        self.assertEqual(state.last_rejection, "invalid_target")
        self.assertEqual(state.message, "Cannot move there - vertices must be adjacent.")
        self.assertEqual(state.selected_vertex_id, mover)

    def test_click_at_resolves_nearby_point(self) -> None:
        x, y = self.board.point_of(7)
        state = self.engine.click_at((x + 4.0, y - 4.0))
        self.assertIs(state.token_at(7), Color.RED)

    def test_click_far_from_every_vertex_is_ignored(self) -> None:
        before = self.engine.state
        self.assertIs(self.engine.click_at((-500.0, -500.0)), before)

    def test_reset_restores_initial_state(self) -> None:
        self.engine.handle_click(1)
        self.engine.handle_click(2)
        state = self.engine.reset()
        self.assertEqual(state.occupancy, {})
        self.assertIs(state.phase, GamePhase.PLACEMENT)
        self.assertIs(state.current_player, Color.RED)
        self.assertEqual(self.engine.ticks, 0)

    def test_clicks_after_game_over_are_ignored(self) -> None:
        members = self.board.region(1).member_vertex_ids
        for vertex_id in members[:-1]:
            self.engine.state.occupancy[vertex_id] = Color.RED
        self.engine.state.tokens_placed[Color.RED] = len(members) - 1
        self.engine.handle_click(members[-1])
        self.assertIs(self.engine.winner, Color.RED)

        finished = self.engine.state
        self.assertIs(self.engine.handle_click(finished.empty_vertices()[0]), finished)
        self.assertTrue(self.engine.is_finished())


class GameEngineMillTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = GameEngine()
        self.board = self.engine.board
        self.triangle, self.target, self.mover = triangle_with_approach(self.board)
        others = [vertex_id for vertex_id in self.triangle if vertex_id != self.target]
        self.blue = isolated_vertices(self.board, [*self.triangle, self.mover], 2)
        self.engine.state = movement_state(self.board, red=[*others, self.mover], blue=self.blue)
        self.engine.handle_click(self.mover)
        self.engine.handle_click(self.target)

    def test_snapshot_highlights_new_mill(self) -> None:
        snapshot = self.engine.snapshot()
        self.assertIs(snapshot.phase, GamePhase.MILL_REMOVAL)
        self.assertEqual(snapshot.remaining_captures, 1)
        self.assertEqual(snapshot.highlighted_vertex_ids, frozenset(self.triangle))
        self.assertEqual(len(snapshot.vertex_points), 72)
        self.assertIsNone(snapshot.occupancy[self.mover])
        self.assertIs(snapshot.occupancy[self.target], Color.RED)
        self.assertEqual(snapshot.edges, tuple(self.board.edges()))

    def test_relocation_by_clicks(self) -> None:
        destination = isolated_vertices(self.board, [*self.triangle, self.mover, *self.blue], 1)[0]
        self.engine.handle_click(self.blue[0])
        self.assertEqual(self.engine.snapshot().selected_vertex_id, self.blue[0])
        state = self.engine.handle_click(destination)
        self.assertIs(state.phase, GamePhase.MOVEMENT)
        self.assertIs(state.current_player, Color.BLUE)
        self.assertIs(state.token_at(destination), Color.BLUE)

    def test_relayout_keeps_match_and_remaps_mills(self) -> None:
        occupancy = dict(self.engine.state.occupancy)
        old_ids = set(self.engine.state.formed_mill_ids)

        new_board = self.engine.relayout(BoardLayout(origin=(500.0, 400.0), unit_size=180.0))

        state = self.engine.state
        self.assertIs(state.board, new_board)
        self.assertEqual(state.occupancy, occupancy)
        self.assertIs(state.phase, GamePhase.MILL_REMOVAL)
        self.assertEqual(state.formed_mill_ids, {mill_id(new_board, TriangleMill(self.triangle))})
        self.assertNotEqual(state.formed_mill_ids, old_ids)


class GameEnginePlayTests(unittest.TestCase):
    def test_random_play_respects_capture_bound_and_tick_cap(self) -> None:
        engine = GameEngine(
            policies={Color.RED: RandomPolicy(seed=3), Color.BLUE: RandomPolicy(seed=4)},
            tick_limit=400,
        )
        while engine.play_tick() is not None:
            self.assertIn(engine.state.remaining_captures, (0, 1, 2))
            if engine.state.phase is GamePhase.MILL_REMOVAL:
                self.assertGreater(engine.state.remaining_captures, 0)
        self.assertLessEqual(engine.ticks, 400)
        self.assertEqual(sum(engine.state.tokens_placed.values()), len(engine.state.occupancy))

    def test_play_stops_at_requested_ticks(self) -> None:
        engine = GameEngine()
        engine.play(max_ticks=12)
        self.assertEqual(engine.ticks, 12)
        self.assertEqual(len(engine.state.occupancy), 12)

    def test_mill_seeking_policy_takes_winning_placement(self) -> None:
        board = build_board()
        engine = GameEngine(board)
        members = board.region(2).member_vertex_ids
        for vertex_id in members[:-1]:
            engine.state.occupancy[vertex_id] = Color.RED
        engine.state.tokens_placed[Color.RED] = len(members) - 1

        action = MillSeekingPolicy(seed=1).decide(engine.state, engine.legal_actions)

        self.assertEqual(action, place_token(members[-1]))
        self.assertIs(apply_action(engine.state, action).winner, Color.RED)

    def test_execute_rejects_illegal_action(self) -> None:
        engine = GameEngine()
        engine.execute(place_token(0))
        with self.assertRaises(ValueError):
            engine.execute(place_token(0))
        self.assertEqual(list_legal_actions(engine.state), engine.legal_actions)


if __name__ == "__main__":
    unittest.main()
