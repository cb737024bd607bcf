from pydantic import BaseModel, Field
from typing import List, Optional, Literal


# PUBLIC_INTERFACE
class GameCreatedResponse(BaseModel):
    """Returned after a new game session is created."""
    game_id: int = Field(..., gt=0, description="Game session ID.")


# PUBLIC_INTERFACE
class PlayerJoinedResponse(BaseModel):
    """Returned after a player is seated in a game."""
    game_id: int = Field(..., description="Game session ID.")
    player_id: int = Field(..., gt=0, description="New player ID, unique across all games.")
    slot: int = Field(..., ge=0, le=1, description="Seat index; slot 0 moves first.")


# PUBLIC_INTERFACE
class MoveRequest(BaseModel):
    """Request model for making a move.

    Coordinates are not range-checked here; off-board moves are reported by
    the registry as INVALID_LOCATION after the turn checks.
    """
    player_id: int = Field(..., description="ID of the player making the move.")
    x: int = Field(..., description="Column in board (0-2).")
    y: int = Field(..., description="Row in board (0-2).")


# PUBLIC_INTERFACE
class MoveResponse(BaseModel):
    """Response after an accepted move."""
    status: Literal["ongoing", "won", "draw"]
    result: int = Field(..., description="Raw registry result: GAME_ONGOING or a player ID.")
    winner: Optional[int] = None
    next_turn: Optional[int] = None
    board: List[List[Optional[int]]] = Field(..., description="3x3 board, rows by y; cells hold the occupant's slot or None.")


# PUBLIC_INTERFACE
class GameStateResponse(BaseModel):
    """Read-only view of a game session."""
    game_id: int
    players: List[Optional[int]] = Field(..., description="Player IDs by slot, None while unset.")
    started: bool
    ended: bool
    status: Literal["waiting", "ongoing", "won", "draw"]
    winner: Optional[int] = None
    next_turn: Optional[int] = None
    moves_count: int
    board: List[List[Optional[int]]]
