import threading

import pytest

from snek_game import (
    FOOD_REWARD,
    DOWN,
    LEFT,
    RIGHT,
    UP,
    GameState,
    Phase,
    SnekConfig,
    TurnLatch,
)


def make_game(seed=0, w=20, h=20):
    game = GameState(seed=seed)
    game.reset(w, h)
    return game


def test_config_derives_grid_from_canvas():
    config = SnekConfig(canvas_w=400, canvas_h=300, tile=20)
    assert (config.grid_w, config.grid_h) == (20, 15)


def test_reset_centers_snake_facing_right():
    game = make_game()
    snap = game.snapshot()
    assert snap.snake == ((10, 10), (9, 10), (8, 10))
    assert snap.direction == RIGHT
    assert snap.score == 0
    assert not snap.game_over
    assert game.latch is TurnLatch.OPEN
    assert snap.food not in snap.snake


def test_reset_rejects_grid_too_small():
    with pytest.raises(ValueError):
        GameState().reset(3, 10)


def test_new_uses_config_grid():
    game = GameState.new(SnekConfig(canvas_w=200, canvas_h=100, tile=10), seed=1)
    assert (game.grid_w, game.grid_h) == (20, 10)
    assert game.snake[0] == (10, 5)


def test_tick_moves_without_growing():
    game = make_game()
    game.food = (0, 0)
    snap = game.tick()
    assert snap.snake == ((11, 10), (10, 10), (9, 10))
    assert snap.score == 0
    assert not snap.game_over


def test_wall_collision_ends_game():
    game = make_game()
    game.snake = [(0, 10), (1, 10), (2, 10)]
    game.direction = LEFT
    game.food = (5, 5)
    snap = game.tick()
    assert snap.head == (-1, 10)
    assert snap.game_over
    assert game.phase is Phase.GAME_OVER


def test_reversal_is_rejected():
    game = make_game()
    game.snake = [(5, 5), (4, 5), (3, 5)]
    assert game.set_direction(*LEFT) is False
    assert game.direction == RIGHT
    # A rejected reversal does not use up the turn.
    assert game.latch is TurnLatch.OPEN
    assert game.set_direction(*UP) is True


def test_eating_food_grows_and_scores():
    game = make_game(seed=3)
    game.snake = [(5, 5), (4, 5), (3, 5)]
    game.food = (6, 5)
    snap = game.tick()
    assert snap.score == 10
    assert len(snap.snake) == 4
    assert snap.food is not None
    assert snap.food not in snap.snake


def test_only_one_turn_per_tick():
    game = make_game()
    game.food = (0, 0)
    assert game.set_direction(*UP) is True
    assert game.set_direction(*LEFT) is False
    assert game.direction == UP
    game.tick()
    assert game.latch is TurnLatch.OPEN
    assert game.set_direction(*LEFT) is True


def test_double_turn_cannot_reverse_within_one_tick():
    game = make_game()
    game.food = (0, 0)
    game.set_direction(*UP)
    game.set_direction(*LEFT)
    snap = game.tick()
    assert snap.head == (10, 9)
    assert not snap.game_over


def test_invalid_direction_raises():
    game = make_game()
    with pytest.raises(ValueError):
        game.set_direction(1, 1)


def test_self_collision_ends_game():
    game = make_game()
    game.snake = [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6), (4, 5)]
    game.direction = UP
    game.food = (0, 0)
    game.set_direction(*DOWN)  # reversal, ignored
    game.set_direction(*RIGHT)
    snap = game.tick()
    assert snap.game_over


def test_moving_into_vacated_tail_is_safe():
    game = make_game()
    game.snake = [(5, 5), (5, 4), (6, 4), (6, 5)]
    game.direction = DOWN
    game.food = (0, 0)
    assert game.set_direction(*RIGHT) is True
    snap = game.tick()
    assert snap.head == (6, 5)
    assert not snap.game_over


def test_tick_after_game_over_is_noop():
    game = make_game()
    game.snake = [(19, 3), (18, 3), (17, 3)]
    game.food = (0, 0)
    over = game.tick()
    assert over.game_over
    assert game.set_direction(*UP) is False
    for _ in range(3):
        assert game.tick() == over


def test_reset_leaves_game_over():
    game = make_game()
    game.snake = [(19, 3), (18, 3), (17, 3)]
    game.tick()
    snap = game.reset(20, 20)
    assert not snap.game_over
    assert snap.score == 0
    assert len(snap.snake) == 3


def test_food_is_none_when_grid_is_full():
    game = make_game(w=4, h=1)
    game.snake = [(2, 0), (1, 0), (0, 0)]
    game.food = (3, 0)
    snap = game.tick()
    assert snap.score == 10
    assert snap.snake == ((3, 0), (2, 0), (1, 0), (0, 0))
    assert snap.food is None
    assert not snap.game_over


def test_random_play_invariants():
    game = make_game(seed=7, w=10, h=10)
    turns = [UP, RIGHT, DOWN, RIGHT, DOWN, LEFT, DOWN, LEFT, UP, LEFT]
    for step in range(500):
        before = game.snapshot()
        if before.game_over:
            break
        game.set_direction(*turns[step % len(turns)])
        after = game.tick()
        ate = after.score > before.score
        assert len(after.snake) == len(before.snake) + (1 if ate else 0)
        assert after.direction != (-before.direction[0], -before.direction[1])
        assert after.score % 10 == 0 and after.score >= 0
        if after.food is not None:
            assert after.food not in after.snake


def test_sessions_do_not_share_state():
    a = make_game(seed=1)
    b = make_game(seed=1)
    a.food = (0, 0)
    a.set_direction(*UP)
    a.tick()
    assert b.snapshot().snake == ((10, 10), (9, 10), (8, 10))
    assert b.direction == RIGHT


def test_concurrent_turns_allow_one_change():
    game = make_game()
    results = []
    barrier = threading.Barrier(4)

    def turn(direction):
        barrier.wait()
        results.append(game.set_direction(*direction))

    threads = [threading.Thread(target=turn, args=(d,)) for d in (UP, DOWN, UP, DOWN)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results.count(True) == 1


def test_food_reward_is_fixed():
    with pytest.raises(TypeError):
        SnekConfig(food_reward=-5)
    game = make_game()
    game.food = (11, 10)
    assert game.tick().score == FOOD_REWARD == 10


def test_food_skips_cells_on_the_snake(monkeypatch):
    game = make_game()
    game.snake = [(5, 5), (4, 5), (3, 5)]
    game.food = (6, 5)
    # Draws (x, y) pairs: the new head, a body cell, then a free cell.
    draws = iter([6, 5, 3, 5, 0, 0])
    monkeypatch.setattr(game._rng, "randrange", lambda n: next(draws))
    snap = game.tick()
    assert snap.snake == ((6, 5), (5, 5), (4, 5), (3, 5))
    assert snap.food == (0, 0)
    assert next(draws, None) is None
