import logging
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .core import Game, GameRegistry, ResultCode, is_code
from .logging_config import setup_logging
from .models import (
    GameCreatedResponse,
    PlayerJoinedResponse,
    MoveRequest,
    MoveResponse,
    GameStateResponse,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ResultCode.GAME_DOES_NOT_EXIST: status.HTTP_404_NOT_FOUND,
    ResultCode.PLAYER_DOES_NOT_EXIST: status.HTTP_403_FORBIDDEN,
    ResultCode.GAME_NOT_STARTED: status.HTTP_409_CONFLICT,
    ResultCode.GAME_ENDED: status.HTTP_409_CONFLICT,
    ResultCode.GAME_ONGOING: status.HTTP_409_CONFLICT,
    ResultCode.WRONG_TURN: status.HTTP_409_CONFLICT,
    ResultCode.INVALID_LOCATION: status.HTTP_400_BAD_REQUEST,
}


##---- Utility Functions ----##
def result_error(code: ResultCode) -> HTTPException:
    return HTTPException(
        status_code=ERROR_STATUS[code],
        detail={"code": code.name, "value": int(code)},
    )


def get_registry(request: Request) -> GameRegistry:
    """Registry owned by the running application."""
    return request.app.state.registry


def _player_or_none(player_id: int):
    return player_id if player_id > 0 else None


def _game_status(game: Game) -> str:
    if game.ended:
        return "draw" if game.is_draw else "won"
    return "ongoing" if game.started else "waiting"


def _next_turn(game: Game):
    if game.ended or not game.started:
        return None
    return game.players[game.turn]


# PUBLIC_INTERFACE
def create_app(registry: Optional[GameRegistry] = None) -> FastAPI:
    """Builds the API around a registry; a fresh one is created if none is given."""
    config = get_config()
    setup_logging(config.log_level)

    app = FastAPI(
        title="Tic Tac Toe Sessions API",
        description="In-memory Tic Tac Toe session registry. Create games, seat two players, and play moves.",
        version="0.1.0",
        debug=config.debug,
        openapi_tags=[
            {"name": "game", "description": "Create, join and play Tic Tac Toe games"},
            {"name": "health", "description": "Service health"},
        ],
    )
    app.state.registry = registry if registry is not None else GameRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["health"])
    def health_check():
        """Health check route for backend"""
        return {"message": "Healthy"}

    # PUBLIC_INTERFACE
    @app.post("/games", response_model=GameCreatedResponse, status_code=status.HTTP_201_CREATED,
              tags=["game"], summary="Create game")
    def create_game(registry: GameRegistry = Depends(get_registry)):
        """Create a new game session with no players. Returns its ID."""
        return GameCreatedResponse(game_id=registry.create_game())

    # PUBLIC_INTERFACE
    @app.post("/games/{game_id}/players", response_model=PlayerJoinedResponse,
              status_code=status.HTTP_201_CREATED, tags=["game"], summary="Join game")
    def add_player(game_id: int, registry: GameRegistry = Depends(get_registry)):
        """Seat a new player in the game. The first player to join moves first.

        Errors:
            404 GAME_DOES_NOT_EXIST, 409 GAME_ENDED, 409 GAME_ONGOING.
        """
        result, game = registry.add_player_with_state(game_id)
        if is_code(result):
            raise result_error(result)
        return PlayerJoinedResponse(game_id=game_id, player_id=result, slot=game.slot_of(result))

    # PUBLIC_INTERFACE
    @app.post("/games/{game_id}/moves", response_model=MoveResponse, tags=["game"], summary="Make a move")
    def make_move(game_id: int, request: MoveRequest, registry: GameRegistry = Depends(get_registry)):
        """Play a move. Returns the new board, status, and winner if the game is over.

        On a draw, `result` carries the opponent's ID, as the registry returns it.
        The response is built from the state right after this move.
        """
        result, game = registry.make_move_with_state(game_id, request.player_id, request.x, request.y)
        if is_code(result) and result is not ResultCode.GAME_ONGOING:
            raise result_error(result)

        winner = game.players[game.winner] if game.winner is not None else None
        return MoveResponse(
            status=_game_status(game),
            result=int(result),
            winner=winner,
            next_turn=_next_turn(game),
            board=game.serialize_board(),
        )

    # PUBLIC_INTERFACE
    @app.get("/games/{game_id}", response_model=GameStateResponse, tags=["game"], summary="Get game state")
    def get_game_state(game_id: int, registry: GameRegistry = Depends(get_registry)):
        """Get board state and info for a game, running or ended."""
        game = registry.snapshot(game_id)
        if game is None:
            raise result_error(ResultCode.GAME_DOES_NOT_EXIST)
        return GameStateResponse(
            game_id=game.id,
            players=[_player_or_none(player) for player in game.players],
            started=game.started,
            ended=game.ended,
            status=_game_status(game),
            winner=game.players[game.winner] if game.winner is not None else None,
            next_turn=_next_turn(game),
            moves_count=len(game.moves),
            board=game.serialize_board(),
        )

    logger.info("Tic Tac Toe sessions API ready")
    return app


app = create_app()
