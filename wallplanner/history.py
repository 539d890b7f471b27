"""
Undo/redo history for the scene

Linear history: every committed mutation pushes a snapshot of the scene as
it was *before* the mutation and drops the redo stack. Undo and redo on an
empty stack leave the scene unchanged.
"""

import logging
from typing import Callable, Optional

from .models import History, Scene

logger = logging.getLogger(__name__)


def record(history: History, scene: Scene, limit: Optional[int] = None) -> None:
    """Push a pre-mutation snapshot and clear the redo stack"""
    history.past.append(scene.snapshot())
    history.future.clear()

    if limit is not None:
        while len(history.past) > limit:
            history.past.pop(0)

    logger.debug("History push, depth=%d", len(history.past))


def commit(
    history: History,
    scene: Scene,
    mutation: Callable[[Scene], Scene],
    limit: Optional[int] = None,
) -> Scene:
    """Record ``scene`` then return ``mutation`` applied to a copy of it"""
    record(history, scene, limit)
    return mutation(scene.snapshot())


def undo(history: History, scene: Scene) -> Scene:
    """Restore the most recent snapshot; the current scene becomes redoable"""
    if not history.past:
        return scene
    previous = history.past.pop()
    history.future.insert(0, scene.snapshot())
    logger.debug("Undo, past=%d future=%d", len(history.past), len(history.future))
    return previous


def redo(history: History, scene: Scene) -> Scene:
    if not history.future:
        return scene
    following = history.future.pop(0)
    history.past.append(scene.snapshot())
    logger.debug("Redo, past=%d future=%d", len(history.past), len(history.future))
    return following


def clear(history: History) -> None:
    """Drop both stacks, used when the wall is reset"""
    history.past.clear()
    history.future.clear()
