import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
import socketio
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from classic_go_ai import ClassicGoAI
from go_board import color_name, parse_color
from go_config import GameConfig
from go_errors import GoError
from go_game import GoGame
from go_territory import score_territory

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """One client's game and its (at most one) pending AI computation"""
    game: GoGame
    ai: ClassicGoAI
    ai_task: Optional[asyncio.Task] = None

    @property
    def ai_thinking(self) -> bool:
        return self.ai_task is not None and not self.ai_task.done()

    def cancel_ai(self) -> None:
        if self.ai_thinking:
            self.ai_task.cancel()
        self.ai_task = None


# FastAPI and Socket.IO setup
app = FastAPI()
sio = socketio.AsyncServer(cors_allowed_origins="*", async_mode='asgi')
socket_app = socketio.ASGIApp(sio, app)

# Game storage
sessions: Dict[str, Session] = {}


class ScoreRequest(BaseModel):
    board: List[List[Optional[str]]]


@app.get("/api/health")
async def health():
    return {'status': 'ok', 'games': len(sessions)}


@app.post("/api/score")
async def score_board(request: ScoreRequest):
    """Territory for an arbitrary position given as rows of 'black'/'white'/null"""
    size = len(request.board)
    if size == 0 or any(len(row) != size for row in request.board):
        raise HTTPException(status_code=422, detail="Board must be square")
    try:
        board = np.array([[parse_color(v) if v else 0 for v in row] for row in request.board],
                         dtype=np.int8)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    black, white, territory_map = score_territory(board)
    return {
        'black': black,
        'white': white,
        'territoryMap': [[color_name(int(v)) for v in row] for row in territory_map],
    }


def start_session(sid: str, config: GameConfig) -> Session:
    old = sessions.get(sid)
    if old is not None:
        old.cancel_ai()
    game = GoGame(config)
    session = Session(game=game, ai=game.make_ai())
    sessions[sid] = session
    return session


async def emit_error(sid: str, error: GoError) -> None:
    await sio.emit('error', error.to_dict(), room=sid)


async def run_ai_turn(sid: str, session: Session) -> None:
    """Think, then move. Forfeits the game for the AI if it runs out of time."""
    game = session.game
    config = game.config
    loop = asyncio.get_running_loop()

    # Delay for AI move
    await asyncio.sleep(config.thinking_delay)
    try:
        move = await asyncio.wait_for(
            loop.run_in_executor(None, game.choose_ai_move, session.ai),
            timeout=config.thinking_timeout,
        )
    except asyncio.TimeoutError:
        if sessions.get(sid) is not session:
            return
        logger.warning("AI exceeded %.1fs for client %s, forfeiting", config.thinking_timeout, sid)
        game.forfeit(config.ai_color)
        await sio.emit('gameState', game.get_state(), room=sid)
        return

    # The game may have been replaced while the AI was thinking
    if sessions.get(sid) is not session or game.game_over:
        return

    game.commit_ai_move(move)
    await sio.emit('gameState', game.get_state(), room=sid)


def schedule_ai_turn(sid: str, session: Session) -> None:
    if not session.game.game_over and session.game.current_player == session.ai.color:
        session.ai_task = asyncio.create_task(run_ai_turn(sid, session))


def _human_can_act(session: Session) -> bool:
    game = session.game
    return (not game.game_over and not session.ai_thinking
            and game.current_player == game.config.human_color)


@sio.event
async def connect(sid, environ):
    logger.info('New client connected: %s', sid)


@sio.event
async def disconnect(sid):
    logger.info('Client disconnected: %s', sid)
    session = sessions.pop(sid, None)
    if session is not None:
        session.cancel_ai()


@sio.event
async def newGame(sid, data=None):
    """Start a game; data is a board size or a config dict"""
    if isinstance(data, int):
        data = {'board_size': data}
    try:
        config = GameConfig.from_dict(data or {})
    except GoError as e:
        await emit_error(sid, e)
        return

    session = start_session(sid, config)
    await sio.emit('gameState', session.game.get_state(), room=sid)
    # AI opens when it plays black
    schedule_ai_turn(sid, session)


@sio.event
async def makeMove(sid, data):
    session = sessions.get(sid)
    if session is None:
        await sio.emit('error', 'No game found', room=sid)
        return

    x, y = data['x'], data['y']
    if not _human_can_act(session) or session.game.play((x, y)) is None:
        await sio.emit('invalidMove', {'x': x, 'y': y}, room=sid)
        return

    await sio.emit('gameState', session.game.get_state(), room=sid)
    schedule_ai_turn(sid, session)


@sio.event
async def pass_move(sid):
    session = sessions.get(sid)
    if session is None or not _human_can_act(session):
        return

    session.game.pass_turn()
    await sio.emit('gameState', session.game.get_state(), room=sid)
    schedule_ai_turn(sid, session)


@sio.event
async def resign(sid):
    session = sessions.get(sid)
    if session is None or session.game.game_over:
        return

    session.cancel_ai()
    session.game.resign(session.game.config.human_color)
    await sio.emit('gameState', session.game.get_state(), room=sid)


async def _restart_with(sid, **changes):
    session = sessions.get(sid)
    base = session.game.config.to_dict() if session else {}
    base.update(changes)
    try:
        config = GameConfig.from_dict(base)
    except GoError as e:
        await emit_error(sid, e)
        return
    new_session = start_session(sid, config)
    await sio.emit('gameState', new_session.game.get_state(), room=sid)
    schedule_ai_turn(sid, new_session)


@sio.event
async def setDifficulty(sid, difficulty):
    # Changing difficulty starts a fresh game
    await _restart_with(sid, difficulty=difficulty)
    logger.info("Difficulty set to %s for client %s", difficulty, sid)


@sio.event
async def setBoardSize(sid, board_size):
    await _restart_with(sid, board_size=board_size)


@sio.event
async def getTerritory(sid):
    session = sessions.get(sid)
    if session is None:
        return

    black, white, territory_map = score_territory(session.game.board)
    await sio.emit('territory', {
        'black': black,
        'white': white,
        'territoryMap': [[color_name(int(v)) for v in row] for row in territory_map],
    }, room=sid)


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 3000))
    uvicorn.run(socket_app, host="127.0.0.1", port=port)
