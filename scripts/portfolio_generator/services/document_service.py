#------------------------------------------------------------
#                     document_service.py
#          Writes and reads the projects document and
#            hands records to the rendered portfolio.

import json
import os
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from ..config import DOCUMENT_INDENT
from ..errors import LocalDataUnavailable, PersistenceError
from ..models import AppState, LoadStatus, ProjectRecord

DOCUMENT_WRITE_ERROR_TEMPLATE = "could not write {path}: {error}"
DOCUMENT_MISSING_TEMPLATE = "{path} does not exist"
DOCUMENT_UNREADABLE_TEMPLATE = "{path} could not be read: {error}"
DOCUMENT_SHAPE_TEMPLATE = "{path} holds neither a project list nor an object with a 'projects' list"


# This function does format the generation timestamp.
# It mirrors JavaScript's toISOString, e.g. 2024-05-01T12:00:00.000Z.
def generation_timestamp(now: Optional[datetime] = None) -> str:
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# This function does write UTF-8 text to the given path.
# Any OS-level failure becomes a PersistenceError.
def save_text(path: str, content: str) -> None:
    try:
        with open(path, "w", encoding="utf-8") as file_handle:
            file_handle.write(content)
    except OSError as exc:
        raise PersistenceError(DOCUMENT_WRITE_ERROR_TEMPLATE.format(path=path, error=exc)) from exc


def build_document(records: Iterable[ProjectRecord], generated_at: str) -> dict:
    return {
        "generated_at": generated_at,
        "projects": [record.to_dict() for record in records],
    }


class DocumentSink:
    """Persists a run's records as the projects JSON document."""

    def __init__(self, path: str):
        self.path = path

    def deliver(self, records: List[ProjectRecord], now: Optional[datetime] = None) -> dict:
        document = build_document(records, generation_timestamp(now))
        save_text(self.path, json.dumps(document, indent=DOCUMENT_INDENT, ensure_ascii=False))
        return document


class DirectSink:
    """Hands records straight to the presentation state."""

    def __init__(self, state: AppState):
        self.state = state

    def deliver(self, records: List[ProjectRecord], status: LoadStatus, message: str, kind: str = "success") -> AppState:
        self.state.replace_projects(records)
        self.state.transition(status, message, kind)
        return self.state


# This function does load project records from a local document.
# It accepts a bare list or {"projects": [...]}; anything else raises
# LocalDataUnavailable so the caller can fall back to the API.
def load_local_projects(path: str) -> List[ProjectRecord]:
    if not os.path.exists(path):
        raise LocalDataUnavailable(DOCUMENT_MISSING_TEMPLATE.format(path=path))

    try:
        with open(path, "r", encoding="utf-8") as file_handle:
            data = json.load(file_handle)
    except (OSError, ValueError) as exc:
        raise LocalDataUnavailable(DOCUMENT_UNREADABLE_TEMPLATE.format(path=path, error=exc)) from exc

    if isinstance(data, list):
        entries = data
    elif isinstance(data, dict) and isinstance(data.get("projects"), list):
        entries = data["projects"]
    else:
        raise LocalDataUnavailable(DOCUMENT_SHAPE_TEMPLATE.format(path=path))

    return [ProjectRecord.from_dict(entry) for entry in entries if isinstance(entry, dict)]
