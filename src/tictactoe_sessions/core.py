import logging
import threading
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

BOARD_SIZE = 3

# Flattened cell index is 3 * y + x.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

UNSET_PLAYER = -1


# PUBLIC_INTERFACE
class ResultCode(IntEnum):
    """Result codes, listed in precedence order for make_move.

    If several apply, the one listed first wins: for an unknown game and an
    unknown player, GAME_DOES_NOT_EXIST is returned.
    """
    GAME_DOES_NOT_EXIST = -2
    GAME_NOT_STARTED = -3
    GAME_ENDED = -4
    GAME_ONGOING = -5
    PLAYER_DOES_NOT_EXIST = -6
    WRONG_TURN = -7
    INVALID_LOCATION = -8


Result = Union[int, ResultCode]


class DuplicatePlayerError(AssertionError):
    """The player id allocator handed out an id already seated in the game."""


# PUBLIC_INTERFACE
def is_code(result: Result) -> bool:
    """True when a registry call returned a ResultCode rather than a player id."""
    return isinstance(result, ResultCode)


class Game:
    """One Tic Tac Toe session between two players."""

    def __init__(self, game_id: int):
        self.id = game_id
        self.players: List[int] = [UNSET_PLAYER, UNSET_PLAYER]
        self.turn = 0
        self.board: List[Optional[int]] = [None] * (BOARD_SIZE * BOARD_SIZE)
        self.moves: List[Tuple[int, int, int]] = []
        self.ended = False
        self.winner: Optional[int] = None

    @property
    def started(self) -> bool:
        return all(player > 0 for player in self.players)

    @property
    def is_draw(self) -> bool:
        return self.ended and self.winner is None

    def slot_of(self, player_id: int) -> Optional[int]:
        """Slot index (0 or 1) seating player_id, or None."""
        if player_id in self.players:
            return self.players.index(player_id)
        return None

    def opponent_of(self, slot: int) -> int:
        return self.players[1 - slot]

    def check_winner(self, slot: int) -> bool:
        """Checks whether slot holds any of the eight lines."""
        return any(all(self.board[cell] == slot for cell in line) for line in WINNING_LINES)

    def is_full(self) -> bool:
        return all(cell is not None for cell in self.board)

    def copy(self) -> "Game":
        """Detached snapshot of this game; later moves do not show through."""
        snapshot = Game(self.id)
        snapshot.players = list(self.players)
        snapshot.turn = self.turn
        snapshot.board = list(self.board)
        snapshot.moves = list(self.moves)
        snapshot.ended = self.ended
        snapshot.winner = self.winner
        return snapshot

    # PUBLIC_INTERFACE
    def serialize_board(self) -> List[List[Optional[int]]]:
        """Board as rows (y major), each cell None or the occupant's slot."""
        return [self.board[y * BOARD_SIZE:(y + 1) * BOARD_SIZE] for y in range(BOARD_SIZE)]


def _on_board(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


# PUBLIC_INTERFACE
class GameRegistry:
    """Owns every game session and hands out game and player ids.

    Both id counters start at 1 and only increase for the lifetime of the
    registry. Games are never removed. All operations run under one lock so
    concurrent callers observe the same results as sequential ones.
    """

    def __init__(self):
        self._games: Dict[int, Game] = {}
        self._last_game_id = 0
        self._last_player_id = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._games)

    def _lookup(self, game_id: int) -> Optional[Game]:
        if game_id < 0:
            return None
        return self._games.get(game_id)

    # PUBLIC_INTERFACE
    def get_game(self, game_id: int) -> Optional[Game]:
        """Returns the live game for game_id, or None if it does not exist."""
        with self._lock:
            return self._lookup(game_id)

    # PUBLIC_INTERFACE
    def snapshot(self, game_id: int) -> Optional[Game]:
        """Returns a detached copy of the game taken under the lock, or None."""
        with self._lock:
            game = self._lookup(game_id)
            return game.copy() if game is not None else None

    # PUBLIC_INTERFACE
    def create_game(self) -> int:
        """Creates a new, empty game and returns its id. Never fails."""
        with self._lock:
            self._last_game_id += 1
            game = Game(self._last_game_id)
            self._games[game.id] = game
        logger.info("Created game %d", game.id)
        return game.id

    # PUBLIC_INTERFACE
    def add_player(self, game_id: int) -> Result:
        """Seats a new player in the game's first free slot.

        Returns:
            The new player's id, unique across all games, or one of
            GAME_DOES_NOT_EXIST, GAME_ENDED, GAME_ONGOING (in that precedence).
        Raises:
            DuplicatePlayerError: if the allocated id is already seated.
        """
        return self.add_player_with_state(game_id)[0]

    # PUBLIC_INTERFACE
    def add_player_with_state(self, game_id: int) -> Tuple[Result, Optional[Game]]:
        """Like add_player, also returning a snapshot taken in the same locked step."""
        with self._lock:
            result = self._add_player(game_id)
            game = self._lookup(game_id)
            snapshot = game.copy() if game is not None else None
        if is_code(result):
            logger.debug("add_player rejected for game %d: %s", game_id, result.name)
        else:
            logger.info("Player %d joined game %d in slot %d",
                        result, game_id, snapshot.slot_of(result))
        return result, snapshot

    def _add_player(self, game_id: int) -> Result:
        game = self._lookup(game_id)
        if game is None:
            return ResultCode.GAME_DOES_NOT_EXIST
        if game.ended:
            return ResultCode.GAME_ENDED
        if game.started:
            return ResultCode.GAME_ONGOING

        player_id = self._last_player_id + 1
        if game.players[0] <= 0:
            slot = 0
        elif game.players[0] == player_id:
            raise DuplicatePlayerError(
                "player id %d already seated in game %d" % (player_id, game_id))
        else:
            slot = 1
        self._last_player_id = player_id
        game.players[slot] = player_id
        return player_id

    # PUBLIC_INTERFACE
    def make_move(self, game_id: int, player_id: int, x: int, y: int) -> Result:
        """Plays player_id's mark at column x, row y.

        After each accepted move the turn passes to the other player. Draws
        are only detected once all nine cells are taken.

        Returns:
            GAME_ONGOING if nobody has won yet.
            The mover's id if this move won the game.
            The other player's id if this move ended the game in a draw.
            Otherwise, first applicable of GAME_DOES_NOT_EXIST, GAME_ENDED,
            GAME_NOT_STARTED, PLAYER_DOES_NOT_EXIST, WRONG_TURN,
            INVALID_LOCATION.
        """
        return self.make_move_with_state(game_id, player_id, x, y)[0]

    # PUBLIC_INTERFACE
    def make_move_with_state(self, game_id: int, player_id: int, x: int, y: int) -> Tuple[Result, Optional[Game]]:
        """Like make_move, also returning a snapshot taken in the same locked step."""
        with self._lock:
            result = self._make_move(game_id, player_id, x, y)
            game = self._lookup(game_id)
            snapshot = game.copy() if game is not None else None
        if is_code(result) and result is not ResultCode.GAME_ONGOING:
            logger.debug("Move (%d, %d) by player %d in game %d rejected: %s",
                         x, y, player_id, game_id, result.name)
        return result, snapshot

    def _make_move(self, game_id: int, player_id: int, x: int, y: int) -> Result:
        game = self._lookup(game_id)
        if game is None:
            return ResultCode.GAME_DOES_NOT_EXIST
        if game.ended:
            return ResultCode.GAME_ENDED
        if not game.started:
            return ResultCode.GAME_NOT_STARTED

        slot = game.slot_of(player_id)
        if slot is None:
            return ResultCode.PLAYER_DOES_NOT_EXIST
        if slot != game.turn:
            return ResultCode.WRONG_TURN

        if not _on_board(x, y):
            return ResultCode.INVALID_LOCATION
        cell = y * BOARD_SIZE + x
        if game.board[cell] is not None:
            return ResultCode.INVALID_LOCATION

        game.board[cell] = slot
        game.moves.append((slot, x, y))

        if game.check_winner(slot):
            game.ended = True
            game.winner = slot
            logger.info("Player %d won game %d", player_id, game_id)
            return player_id
        if game.is_full():
            game.ended = True
            logger.info("Game %d ended in a draw", game_id)
            return game.opponent_of(slot)

        game.turn = 1 - slot
        return ResultCode.GAME_ONGOING
