import argparse
import random
from pathlib import Path

import imageio

from snek_env import ACTION_DIRS, SnekEnv
from snek_game import SnekConfig

MOVE_LETTERS = {"U": 0, "D": 1, "L": 2, "R": 3}
DIR_TO_ACTION = {d: a for a, d in ACTION_DIRS.items()}


def parse_moves(moves: str):
    actions = []
    for letter in moves.upper():
        if letter not in MOVE_LETTERS:
            raise ValueError(f"invalid move letter: {letter!r}")
        actions.append(MOVE_LETTERS[letter])
    return actions


def random_action(env: SnekEnv, rng: random.Random) -> int:
    dx, dy = env.game.direction
    reverse = DIR_TO_ACTION[(-dx, -dy)]
    return rng.choice([a for a in ACTION_DIRS if a != reverse])


def record_gif(out_path, config, seed=None, max_steps=500, fps=12, moves=None):
    env = SnekEnv(config, render_mode="rgb_array", max_steps=max_steps)
    env.reset(seed=seed)
    rng = random.Random(seed)
    scripted = parse_moves(moves) if moves else None
    frames = [env.render()]
    info = {"score": 0}
    done = False
    step = 0

    while not done:
        if scripted is not None:
            if step >= len(scripted):
                break
            action = scripted[step]
        else:
            action = random_action(env, rng)
        _, _, terminated, truncated, info = env.step(action)
        frames.append(env.render())
        done = terminated or truncated
        step += 1

    imageio.mimsave(out_path, frames, fps=fps)
    return info["score"], len(frames)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--out", required=True)
    parser.add_argument("--grid", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-steps", type=int, default=500)
    parser.add_argument("--fps", type=int, default=12)
    parser.add_argument("--moves", type=str, default="", help="Scripted moves, e.g. RRUULL")
    args = parser.parse_args()

    config = SnekConfig(canvas_w=args.grid, canvas_h=args.grid, tile=1)
    score, n_frames = record_gif(
        Path(args.out), config, seed=args.seed, max_steps=args.max_steps, fps=args.fps, moves=args.moves
    )
    print(f"Wrote {n_frames} frames to {args.out} (score {score})")


if __name__ == "__main__":
    main()
