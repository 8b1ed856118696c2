"""JSON API over the player controller.

Every mutating route answers with the full state snapshot so the widget
can re-render from a single response.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from player.controller import PlayerController

router = APIRouter(prefix="/api/player", tags=["player"])


class VolumeIn(BaseModel):
    volume: float = Field(ge=0.0, le=1.0)


class ProgressIn(BaseModel):
    current_time: float = Field(ge=0.0)
    duration: float | None = Field(default=None, ge=0.0)


def _controller(request: Request) -> PlayerController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Player not initialised")
    return controller


def _state(controller: PlayerController, **extra) -> JSONResponse:
    body = controller.snapshot()
    body.update(extra)
    return JSONResponse(body)


@router.get("/state")
async def get_state(request: Request):
    return _state(_controller(request))


@router.post("/refresh")
async def refresh(request: Request):
    controller = _controller(request)
    applied = await controller.refresh()
    return _state(controller, applied=applied)


@router.post("/random")
async def random_selection(request: Request):
    controller = _controller(request)
    applied = await controller.load_random_selection()
    return _state(controller, applied=applied)


@router.post("/page/{page}")
async def load_page(request: Request, page: int):
    controller = _controller(request)
    try:
        applied = await controller.load_page(page)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _state(controller, applied=applied)


@router.post("/next")
async def next_song(request: Request):
    controller = _controller(request)
    controller.next()
    return _state(controller)


@router.post("/prev")
async def prev_song(request: Request):
    controller = _controller(request)
    controller.prev()
    return _state(controller)


@router.post("/shuffle")
async def toggle_shuffle(request: Request):
    controller = _controller(request)
    controller.toggle_shuffle()
    return _state(controller)


@router.post("/repeat")
async def toggle_repeat(request: Request):
    controller = _controller(request)
    controller.toggle_repeat()
    return _state(controller)


@router.post("/play")
async def play(request: Request):
    controller = _controller(request)
    controller.set_playing(True)
    return _state(controller)


@router.post("/pause")
async def pause(request: Request):
    controller = _controller(request)
    controller.set_playing(False)
    return _state(controller)


@router.post("/expand")
async def toggle_expanded(request: Request):
    controller = _controller(request)
    controller.toggle_expanded()
    return _state(controller)


@router.post("/volume")
async def set_volume(request: Request, body: VolumeIn):
    controller = _controller(request)
    controller.set_volume(body.volume)
    return _state(controller)


@router.post("/progress")
async def update_progress(request: Request, body: ProgressIn):
    controller = _controller(request)
    controller.update_progress(body.current_time, body.duration)
    return _state(controller)


@router.get("/search")
async def search(request: Request, q: str, page: int = 1):
    songs = await _controller(request).api.search_songs(q, page)
    return {"songs": [s.model_dump() for s in songs]}


@router.get("/recommended")
async def recommended(request: Request, count: int = 10):
    songs = await _controller(request).api.get_recommended_songs(count)
    return {"songs": [s.model_dump() for s in songs]}
