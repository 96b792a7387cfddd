from __future__ import annotations

from typing import Optional, Tuple

import pygame

from block_drop.game import GameSnapshot, GameState, Piece, TetrominoType
from block_drop.game.pieces import COLORS


BACKGROUND = (10, 10, 14)
BOARD_BG = (20, 20, 26)
GRID_LINE = (30, 50, 50)
TEXT = (230, 230, 230)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return BOARD_BG
    return pygame.Color(COLORS[TetrominoType(abs(v))])[:3]


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        panel = 6 * self.cell_size
        return (width * self.cell_size + panel + self.margin * 3, height * self.cell_size + self.margin * 2)

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        return self._font

    def _draw_cell(self, surf: pygame.Surface, x: int, y: int, color, outline: bool = False) -> None:
        rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
        pygame.draw.rect(surf, color, rect, 2 if outline else 0)

    def _board_surface(self, snapshot: GameSnapshot) -> pygame.Surface:
        grid = snapshot.board.grid
        h, w = grid.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(GRID_LINE)
        for y in range(h):
            for x in range(w):
                self._draw_cell(surf, x, y, _color_for_value(int(grid[y, x])))

        piece = snapshot.current_piece
        if piece is not None and snapshot.state == GameState.PLAYING:
            color = pygame.Color(piece.color)
            for x, y in piece.cells(offset_y=snapshot.board.ghost_offset):
                if y >= 0:
                    self._draw_cell(surf, x, y, color, outline=True)
        if piece is not None:
            for x, y in piece.cells():
                if y >= 0:
                    self._draw_cell(surf, x, y, pygame.Color(piece.color))
        return surf

    def _draw_preview(self, screen: pygame.Surface, piece: Optional[Piece], x0: int, y0: int) -> None:
        if piece is None:
            screen.blit(self.font.render("-", True, TEXT), (x0, y0))
            return
        size = self.cell_size // 2
        h, w = piece.shape.shape
        for py in range(h):
            for px in range(w):
                if piece.shape[py, px]:
                    rect = pygame.Rect(x0 + px * size, y0 + py * size, size - 1, size - 1)
                    pygame.draw.rect(screen, pygame.Color(piece.color), rect)

    def _draw_panel(self, screen: pygame.Surface, snapshot: GameSnapshot, x0: int) -> None:
        y = self.margin
        screen.blit(self.font.render("HOLD", True, TEXT), (x0, y))
        self._draw_preview(screen, snapshot.hold_piece, x0, y + 24)
        y += 24 + self.cell_size * 2 + 10
        screen.blit(self.font.render("NEXT", True, TEXT), (x0, y))
        y += 24
        for piece in snapshot.next_pieces:
            self._draw_preview(screen, piece, x0, y)
            y += self.cell_size * 2 + 4
        for label, value in (("SCORE", snapshot.score), ("LEVEL", snapshot.level), ("LINES", snapshot.lines)):
            y += 10
            screen.blit(self.font.render(f"{label} {value}", True, TEXT), (x0, y))
            y += 20

    def _draw_overlay(self, screen: pygame.Surface, rect: pygame.Rect, lines) -> None:
        shade = pygame.Surface(rect.size, pygame.SRCALPHA)
        shade.fill((0, 0, 0, 180))
        screen.blit(shade, rect.topleft)
        for i, line in enumerate(lines):
            text = self.font.render(line, True, TEXT)
            screen.blit(text, text.get_rect(center=(rect.centerx, rect.centery + (i - len(lines) // 2) * 28)))

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        board_surf = self._board_surface(snapshot)
        screen.fill(BACKGROUND)
        screen.blit(board_surf, (self.margin, self.margin))
        board_rect = board_surf.get_rect(topleft=(self.margin, self.margin))
        self._draw_panel(screen, snapshot, board_rect.right + self.margin)

        if snapshot.state == GameState.READY:
            self._draw_overlay(screen, board_rect, ["Press Enter to start"])
        elif snapshot.state == GameState.PAUSED:
            self._draw_overlay(screen, board_rect, ["PAUSED"])
        elif snapshot.state == GameState.GAME_OVER:
            self._draw_overlay(screen, board_rect, ["GAME OVER", "Press R to restart"])
        pygame.display.flip()
