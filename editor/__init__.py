"""
Editor Module

Session state, best-effort preference storage and the event handlers that
drive the conversion pipeline for one editing session.
"""

from editor.controller import EditorSession
from editor.session import SessionState, load_session
from editor.storage import JsonFileStore, MemoryStore, NullStore, SafeStore
from editor.surface import DirectorySurface, EditorSurface, StatusKind

__all__ = [
    "DirectorySurface",
    "EditorSession",
    "EditorSurface",
    "JsonFileStore",
    "MemoryStore",
    "NullStore",
    "SafeStore",
    "SessionState",
    "StatusKind",
    "load_session",
]
