import sys, os

import pytest

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from block_drop.game import BlockDropGame, GameConfig


class FakeClock:
    def __init__(self) -> None:
        self.value = 0

    def advance(self, amount: int) -> None:
        self.value += amount

    def __call__(self) -> int:
        return self.value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def game(clock):
    return BlockDropGame(GameConfig(random_seed=1234), clock=clock)


@pytest.fixture
def started(game):
    game.start()
    return game
