import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from app import db
from app.models import PathRecord

logger = logging.getLogger(__name__)


class PathHistoryStore:
    """Saved paths and selected words per (room, connection).

    Records outlive both the connection and the room; nothing here deletes
    them. Saving again replaces the stored value (last writer wins).
    Must be used inside an application context.
    """

    def save_path(self, room_id: str, connection_id: str, color: Optional[str], path: Sequence[int]) -> PathRecord:
        record = self._get_or_create(room_id, connection_id)
        record.color = color
        record.path = json.dumps(list(path))
        self._commit(record)
        logger.info(f"[save-path] room={room_id} sid={connection_id} words={len(path)}")
        return record

    def save_selected_words(self, room_id: str, connection_id: str, color: Optional[str],
                            selected_words: Sequence[str]) -> PathRecord:
        record = self._get_or_create(room_id, connection_id)
        if record.id is None:
            record.color = color
        record.selected_words = json.dumps(list(selected_words))
        self._commit(record)
        logger.info(f"[save-selected] room={room_id} sid={connection_id} words={len(selected_words)}")
        return record

    def paths_for(self, room_id: str) -> List[Dict[str, Any]]:
        return [r.to_path_dict() for r in self._records(room_id)]

    def selected_words_for(self, room_id: str) -> List[Dict[str, Any]]:
        return [r.to_selected_dict() for r in self._records(room_id) if r.selected_words_list]

    def _records(self, room_id: str) -> List[PathRecord]:
        return PathRecord.query.filter_by(room_id=room_id).order_by(PathRecord.id).all()

    def _get_or_create(self, room_id: str, connection_id: str) -> PathRecord:
        record = PathRecord.query.filter_by(room_id=room_id, user_id=connection_id).first()
        if record is None:
            record = PathRecord(room_id=room_id, user_id=connection_id, path='[]')
        return record

    def _commit(self, record: PathRecord) -> None:
        try:
            db.session.add(record)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
