from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict

import pygame

from block_drop.game import BlockDropGame, GameConfig, GameState
from .renderer import Renderer


Command = Callable[[BlockDropGame], bool]

KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: BlockDropGame.move_left,
    pygame.K_a: BlockDropGame.move_left,
    pygame.K_RIGHT: BlockDropGame.move_right,
    pygame.K_d: BlockDropGame.move_right,
    pygame.K_DOWN: BlockDropGame.move_down,
    pygame.K_s: BlockDropGame.move_down,
    pygame.K_UP: BlockDropGame.rotate,
    pygame.K_w: BlockDropGame.rotate,
    pygame.K_x: BlockDropGame.rotate,
    pygame.K_SPACE: BlockDropGame.hard_drop,
    pygame.K_c: BlockDropGame.hold,
    pygame.K_p: BlockDropGame.toggle_pause,
}


def handle_key(game: BlockDropGame, key: int) -> bool:
    if game.state == GameState.READY:
        if key in (pygame.K_RETURN, pygame.K_SPACE):
            return game.start()
        return False
    if key == pygame.K_r:
        if game.state in (GameState.PAUSED, GameState.GAME_OVER):
            return game.start()
        return False
    command = KEY_TO_COMMAND.get(key)
    if command is None:
        return False
    return command(game)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def run() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = BlockDropGame(GameConfig(random_seed=args.seed), clock=pygame.time.get_ticks)
        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game.board.width, game.board.height))
        pygame.display.set_caption("Block Drop")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        handle_key(game, event.key)

            # Gravity
            game.update(pygame.time.get_ticks())

            renderer.draw(screen, game.snapshot())
            clock.tick(args.fps)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
