from __future__ import annotations

from dataclasses import dataclass


BOARD_WIDTH = 10
BOARD_HEIGHT = 20

# Indexed by number of lines cleared at once
LINE_POINTS: tuple[int, ...] = (0, 100, 300, 500, 800)
# Milliseconds between gravity drops, indexed by level
LEVEL_SPEEDS: tuple[int, ...] = (1000, 900, 800, 700, 600, 500, 400, 300, 200, 150, 100)
LINES_PER_LEVEL = 10
SOFT_DROP_POINTS = 1
HARD_DROP_POINTS = 2

PREVIEW_SIZE = 3
WALL_KICKS: tuple[int, ...] = (1, -1, 2, -2)


@dataclass(frozen=True)
class ScoringRules:
    line_points: tuple[int, ...] = LINE_POINTS
    level_speeds: tuple[int, ...] = LEVEL_SPEEDS
    lines_per_level: int = LINES_PER_LEVEL
    soft_drop_points: int = SOFT_DROP_POINTS
    hard_drop_points: int = HARD_DROP_POINTS

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        # More than four at once cannot happen with tetrominoes
        points = self.line_points[min(lines, len(self.line_points) - 1)]
        return points * (level + 1)

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level

    def drop_interval(self, level: int) -> int:
        return self.level_speeds[min(level, len(self.level_speeds) - 1)]
