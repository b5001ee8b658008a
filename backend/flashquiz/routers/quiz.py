from __future__ import annotations
import logging
import time
import uuid
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile
from pydantic import BaseModel, Field

from ..controller import AppController, Extractor, Screen
from ..encoder import DocumentFile
from ..errors import InvalidTransitionError
from ..extraction import extract_quiz
from ..settings import settings


router = APIRouter(prefix="/quiz", tags=["quiz"])
logger = logging.getLogger(__name__)

SESSION_COOKIE = "flashquiz_session"


class SelectRequest(BaseModel):
    index: int = Field(ge=0, description="Zero-based option index")


class ControllerRegistry:
    """Per-browser controllers, least recently used first.

    Controllers idle for longer than ``session_idle_minutes`` are dropped on the next
    lookup, and the oldest ones go once more than ``max_sessions`` are live. A
    controller waiting on an extraction is never evicted.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[AppController, float]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._entries

    def clear(self) -> None:
        self._entries.clear()

    def get(self, session_id: Optional[str]) -> Optional[AppController]:
        self._expire()
        if not session_id or session_id not in self._entries:
            return None
        controller, _ = self._entries.pop(session_id)
        self._entries[session_id] = (controller, self._clock())
        return controller

    def add(self, session_id: str, controller: AppController) -> None:
        self._entries[session_id] = (controller, self._clock())
        self._shrink(keep=session_id)

    def _expire(self) -> None:
        cutoff = self._clock() - settings.session_idle_minutes * 60
        stale = [
            sid for sid, (controller, seen) in self._entries.items()
            if seen < cutoff and controller.screen is not Screen.PROCESSING
        ]
        for sid in stale:
            del self._entries[sid]
        if stale:
            logger.info("Expired %d idle quiz session(s)", len(stale))

    def _shrink(self, keep: str) -> None:
        excess = len(self._entries) - max(settings.max_sessions, 1)
        if excess <= 0:
            return
        victims = [
            sid for sid, (c, _) in self._entries.items()
            if sid != keep and c.screen is not Screen.PROCESSING
        ][:excess]
        for sid in victims:
            del self._entries[sid]
        logger.info("Evicted %d least recently used quiz session(s)", len(victims))


# One controller per browser, in memory only; a reload of the server starts over
_controllers = ControllerRegistry()


def get_extractor() -> Extractor:
    return extract_quiz


def get_controller(
    request: Request,
    response: Response,
    extractor: Extractor = Depends(get_extractor),
) -> AppController:
    session_id = request.cookies.get(SESSION_COOKIE)
    controller = _controllers.get(session_id)
    if controller is None:
        session_id = uuid.uuid4().hex
        controller = AppController(extractor=extractor)
        _controllers.add(session_id, controller)
        response.set_cookie(key=SESSION_COOKIE, value=session_id, samesite="lax", httponly=True)
    return controller


def _conflict(err: InvalidTransitionError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(err))


def _step(accepted: bool, controller: AppController) -> Dict[str, Any]:
    return {"accepted": accepted, "view": controller.view()}


@router.get("/state")
async def get_state(controller: AppController = Depends(get_controller)):
    return controller.view()


@router.post("/files")
async def add_files(
    files: List[UploadFile] = File(...),
    controller: AppController = Depends(get_controller),
):
    limit = settings.max_upload_mb * 1024 * 1024
    documents: List[DocumentFile] = []
    for upload in files:
        data = await upload.read()
        if len(data) > limit:
            raise HTTPException(status_code=413, detail=f"{upload.filename} exceeds {settings.max_upload_mb} MB")
        documents.append(DocumentFile(
            filename=upload.filename or "document.pdf",
            mime_type=upload.content_type or "",
            data=data,
        ))
    try:
        skipped = controller.add_files(documents)
    except InvalidTransitionError as err:
        raise _conflict(err)
    if skipped:
        logger.info("Skipped %d non-PDF upload(s)", len(skipped))
    return {"skipped": [f.filename for f in skipped], "view": controller.view()}


@router.delete("/files")
async def clear_files(controller: AppController = Depends(get_controller)):
    try:
        controller.clear_files()
    except InvalidTransitionError as err:
        raise _conflict(err)
    return controller.view()


@router.delete("/files/{index}")
async def remove_file(index: int, controller: AppController = Depends(get_controller)):
    try:
        controller.remove_file(index)
    except InvalidTransitionError as err:
        raise _conflict(err)
    except IndexError:
        raise HTTPException(status_code=404, detail="No selected file at that position")
    return controller.view()


@router.post("/process")
async def process(controller: AppController = Depends(get_controller)):
    if controller.screen is Screen.UPLOAD and not controller.files:
        raise HTTPException(status_code=400, detail="Select at least one PDF first")
    try:
        await controller.submit_files()
    except InvalidTransitionError as err:
        raise _conflict(err)
    return controller.view()


@router.post("/select")
async def select(req: SelectRequest, controller: AppController = Depends(get_controller)):
    try:
        accepted = controller.select(req.index)
    except InvalidTransitionError as err:
        raise _conflict(err)
    return _step(accepted, controller)


@router.post("/submit")
async def submit(controller: AppController = Depends(get_controller)):
    try:
        accepted = controller.submit_answer()
    except InvalidTransitionError as err:
        raise _conflict(err)
    return _step(accepted, controller)


@router.post("/next")
async def next_question(controller: AppController = Depends(get_controller)):
    try:
        accepted = controller.next_question()
    except InvalidTransitionError as err:
        raise _conflict(err)
    return _step(accepted, controller)


@router.post("/exit")
async def exit_quiz(controller: AppController = Depends(get_controller)):
    try:
        controller.exit()
    except InvalidTransitionError as err:
        raise _conflict(err)
    return controller.view()


@router.post("/reset")
async def reset(controller: AppController = Depends(get_controller)):
    try:
        controller.reset()
    except InvalidTransitionError as err:
        raise _conflict(err)
    return controller.view()
