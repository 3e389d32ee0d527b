from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from pydantic import BaseModel, ValidationError
from typing import Any, Optional, Type, TypeVar
import functools

from app import socketio
from app.schemas import (
    JoinRoom,
    MovePayload,
    SavePathPayload,
    SaveSelectedWordsPayload,
    SelectPayload,
)
from app.services.presence import PresenceState

P = TypeVar('P', bound=BaseModel)


def _current_sid() -> str:
    return request.sid  # type: ignore


def _channel(room_id: str) -> str:
    return f"room:{room_id}"


def _locked(handler):
    """Run a handler with the presence state lock held, emits included."""
    @functools.wraps(handler)
    def wrapper(self, *args):
        with self.state.lock:
            return handler(self, *args)
    return wrapper


class PresenceBroadcaster:
    """Socket.IO event handlers for shared reading rooms.

    Each connection is either unjoined or joined to exactly one room. Events
    that need a room are dropped when the connection has none, and every
    inbound payload is validated before it touches the state.
    """

    def __init__(self, state: PresenceState):
        self.state = state

    # ---- lifecycle ----

    def handle_connect(self, auth=None):
        current_app.logger.info(f"[connect] sid={_current_sid()}")

    @_locked
    def handle_disconnect(self, reason=None):
        sid = _current_sid()
        current_app.logger.info(f"[disconnect] sid={sid}")
        room_id = self.state.rooms.room_of(sid)
        if room_id is not None:
            self._leave(room_id, sid)

    # ---- room membership ----

    @_locked
    def handle_join_room(self, data=None):
        try:
            room_id = JoinRoom(room_id=data).room_id
        except ValidationError as exc:
            self._drop('join-room', exc)
            return
        sid = _current_sid()

        previous = self.state.rooms.room_of(sid)
        if previous is not None:
            leave_room(_channel(previous))
            self._leave(previous, sid)

        join_room(_channel(room_id))
        room, presence = self.state.rooms.join(room_id, sid)
        current_app.logger.info(
            f"[join] room={room_id} sid={sid} color={presence.color} instrument={presence.instrument}"
        )

        emit('user-color', presence.color)
        emit('user-instrument', presence.instrument)
        emit('room-users', {uid: p.to_dict() for uid, p in room.items()})
        emit('historical-paths', {'paths': self.state.history.paths_for(room_id)})
        emit('saved-selected-paths', {'selectedPaths': self.state.history.selected_words_for(room_id)})
        emit('user-joined', presence.to_dict(), to=_channel(room_id), include_self=False)
        current_app.logger.info(f"[room-size] room={room_id} users={len(room)}")

    @_locked
    def handle_leave_room(self, data=None):
        sid = _current_sid()
        room_id = self.state.rooms.room_of(sid)
        if room_id is None:
            return
        leave_room(_channel(room_id))
        self._leave(room_id, sid)

    # ---- live activity ----

    @_locked
    def handle_move(self, data=None):
        payload = self._validate('move', MovePayload, data)
        if payload is None:
            return
        sid = _current_sid()
        room_id = self.state.rooms.room_of(sid)
        if room_id is None or self.state.rooms.move(room_id, sid, payload.wordIndex) is None:
            current_app.logger.debug(f"[drop] move sid={sid} not in a room")
            return
        user = self.state.rooms.get(room_id, sid)
        emit('user-moved', {
            'id': sid,
            'color': user.color,
            'instrument': user.instrument,
            'position': payload.wordIndex,
            'line': payload.line,
            'positionInLine': payload.positionInLine,
        }, to=_channel(room_id), include_self=False)

    @_locked
    def handle_select_emit(self, data=None):
        payload = self._validate('select-emit', SelectPayload, data)
        if payload is None:
            return
        sid = _current_sid()
        room_id, user = self._current_presence(sid)
        if user is None:
            current_app.logger.debug(f"[drop] select-emit sid={sid} not in a room")
            return
        emit('select-receive', {
            'id': sid,
            'color': user.color,
            'position': payload.wordIndex,
            'line': payload.line,
            'positionInLine': payload.positionInLine,
            'text': payload.text,
        }, to=_channel(room_id), include_self=False)
        current_app.logger.info(f"[select] room={room_id} sid={sid} word={payload.text!r} index={payload.wordIndex}")

    # ---- saved history ----

    @_locked
    def handle_save_path(self, data=None):
        payload = self._validate('save-path', SavePathPayload, data)
        if payload is None:
            return
        sid = _current_sid()
        room_id, user = self._current_presence(sid)
        if user is None:
            current_app.logger.debug(f"[drop] save-path sid={sid} not in a room")
            return
        self.state.history.save_path(room_id, sid, user.color, payload.path)

    @_locked
    def handle_save_selected_words(self, data=None):
        payload = self._validate('save-selected-words', SaveSelectedWordsPayload, data)
        if payload is None:
            return
        sid = _current_sid()
        room_id, user = self._current_presence(sid)
        if user is None:
            current_app.logger.debug(f"[drop] save-selected-words sid={sid} not in a room")
            return
        self.state.history.save_selected_words(room_id, sid, user.color, payload.selectedWords)

    # ---- helpers ----

    def _leave(self, room_id: str, sid: str) -> None:
        color = self.state.rooms.leave(room_id, sid)
        emit('user-left', sid, to=_channel(room_id), include_self=False)
        self.state.identities.release(room_id, color)
        current_app.logger.info(f"[leave] room={room_id} sid={sid} color={color}")

    def _current_presence(self, sid: str):
        room_id = self.state.rooms.room_of(sid)
        if room_id is None:
            return None, None
        return room_id, self.state.rooms.get(room_id, sid)

    def _validate(self, event: str, schema: Type[P], data: Any) -> Optional[P]:
        try:
            return schema.model_validate(data)
        except ValidationError as exc:
            self._drop(event, exc)
            return None

    def _drop(self, event: str, exc: ValidationError) -> None:
        current_app.logger.warning(
            f"[drop] {event} sid={_current_sid()} malformed payload: {exc.error_count()} error(s)"
        )


def register_socketio_handlers(broadcaster: PresenceBroadcaster, namespace: str = '/') -> None:
    """Register the presence handlers on the given namespace."""
    socketio.on_event('connect', broadcaster.handle_connect, namespace=namespace)
    socketio.on_event('disconnect', broadcaster.handle_disconnect, namespace=namespace)
    socketio.on_event('join-room', broadcaster.handle_join_room, namespace=namespace)
    socketio.on_event('leave-room', broadcaster.handle_leave_room, namespace=namespace)
    socketio.on_event('move', broadcaster.handle_move, namespace=namespace)
    socketio.on_event('select-emit', broadcaster.handle_select_emit, namespace=namespace)
    socketio.on_event('save-path', broadcaster.handle_save_path, namespace=namespace)
    socketio.on_event('save-selected-words', broadcaster.handle_save_selected_words, namespace=namespace)
