import argparse
import sys

import pygame

from snek_game import DOWN, LEFT, RIGHT, UP, GameState, SnekConfig

BG_COLOR = (255, 255, 255)
BORDER_COLOR = (51, 51, 51)
GAME_OVER_BORDER = (255, 0, 0)
SNAKE_COLOR = (144, 238, 144)
HEAD_COLOR = (0, 100, 0)
FOOD_COLOR = (255, 0, 0)
FOOD_OUTLINE = (139, 0, 0)
TEXT_COLOR = (20, 20, 20)
OVERLAY_TEXT = (255, 255, 255)

MOVE_EVENT = pygame.USEREVENT + 1
HUD_H = 32

KEY_DIRECTIONS = {
    pygame.K_UP: UP,
    pygame.K_DOWN: DOWN,
    pygame.K_LEFT: LEFT,
    pygame.K_RIGHT: RIGHT,
    pygame.K_w: UP,
    pygame.K_s: DOWN,
    pygame.K_a: LEFT,
    pygame.K_d: RIGHT,
}


def direction_for_key(key):
    return KEY_DIRECTIONS.get(key)


class TickTimer:
    """Fixed-interval driver for ``GameState.tick``.

    Arms a pygame timer; ``on_event`` advances the game once and disarms the
    timer as soon as the game is over. ``start`` re-arms it after a restart.
    """

    def __init__(self, game: GameState, interval_ms: int, event_type: int = MOVE_EVENT):
        self.game = game
        self.interval_ms = interval_ms
        self.event_type = event_type
        self.running = False

    def start(self):
        pygame.time.set_timer(self.event_type, self.interval_ms)
        self.running = True

    def stop(self):
        pygame.time.set_timer(self.event_type, 0)
        self.running = False

    def on_event(self):
        if not self.running:
            return self.game.snapshot()
        snap = self.game.tick()
        if snap.game_over:
            self.stop()
        return snap


def in_grid(cell, snap):
    return 0 <= cell[0] < snap.grid_w and 0 <= cell[1] < snap.grid_h


def draw_cell(surface, cell, tile, color, outline):
    rect = pygame.Rect(cell[0] * tile, HUD_H + cell[1] * tile, tile, tile)
    pygame.draw.rect(surface, color, rect)
    pygame.draw.rect(surface, outline, rect, 1)


def draw(screen, font, big_font, snap, config):
    width = config.grid_w * config.tile
    height = config.grid_h * config.tile
    screen.fill(BG_COLOR)

    if snap.food is not None:
        draw_cell(screen, snap.food, config.tile, FOOD_COLOR, FOOD_OUTLINE)
    # Body first so the head stays on top; a head past the wall is not drawn.
    for cell in snap.snake[1:]:
        draw_cell(screen, cell, config.tile, SNAKE_COLOR, HEAD_COLOR)
    if in_grid(snap.head, snap):
        draw_cell(screen, snap.head, config.tile, HEAD_COLOR, HEAD_COLOR)

    score_text = font.render(f"Score: {snap.score}", True, TEXT_COLOR)
    screen.blit(score_text, (8, 6))

    border = GAME_OVER_BORDER if snap.game_over else BORDER_COLOR
    pygame.draw.rect(screen, border, pygame.Rect(0, HUD_H, width, height), 2)

    if snap.game_over:
        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 190))
        screen.blit(overlay, (0, HUD_H))
        center_y = HUD_H + height // 2
        title = big_font.render("GAME OVER", True, OVERLAY_TEXT)
        screen.blit(title, title.get_rect(center=(width // 2, center_y - 20)))
        final = font.render(f"Final Score: {snap.score}", True, OVERLAY_TEXT)
        screen.blit(final, final.get_rect(center=(width // 2, center_y + 20)))
        hint = font.render("Press R to restart", True, OVERLAY_TEXT)
        screen.blit(hint, hint.get_rect(center=(width // 2, center_y + 50)))


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--width", type=int, default=400, help="Canvas width in pixels")
    parser.add_argument("--height", type=int, default=400, help="Canvas height in pixels")
    parser.add_argument("--tile", type=int, default=20)
    parser.add_argument("--speed-ms", type=int, default=150)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    config = SnekConfig(canvas_w=args.width, canvas_h=args.height, tile=args.tile, speed_ms=args.speed_ms)
    game = GameState(config, seed=args.seed)
    snap = game.reset(config.grid_w, config.grid_h)

    pygame.init()
    pygame.display.set_caption("Snek")
    screen = pygame.display.set_mode((config.grid_w * config.tile, HUD_H + config.grid_h * config.tile))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("Arial", 20)
    big_font = pygame.font.SysFont("Arial", 40)

    timer = TickTimer(game, config.speed_ms)
    timer.start()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit()
                sys.exit(0)
            if event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit()
                    sys.exit(0)
                if event.key == pygame.K_r and snap.game_over:
                    snap = game.reset(config.grid_w, config.grid_h)
                    timer.start()
                    continue
                direction = direction_for_key(event.key)
                if direction is not None:
                    game.set_direction(*direction)

            if event.type == MOVE_EVENT:
                was_over = snap.game_over
                snap = timer.on_event()
                if snap.game_over and not was_over:
                    print(f"Game over. Final score: {snap.score}")

        draw(screen, font, big_font, snap, config)
        pygame.display.flip()
        clock.tick(60)


if __name__ == "__main__":
    main()
