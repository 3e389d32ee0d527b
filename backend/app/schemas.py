"""Pydantic schemas for inbound Socket.IO event payloads."""
from typing import List, Union

from pydantic import BaseModel, field_validator


class JoinRoom(BaseModel):
    """``join-room`` carries a bare room id; numeric page ids become strings."""
    room_id: Union[str, int]

    @field_validator('room_id')
    @classmethod
    def room_id_as_text(cls, value):
        if isinstance(value, bool):
            raise ValueError('room id must be a string or integer')
        value = str(value)
        if not value:
            raise ValueError('room id is required')
        return value


class MovePayload(BaseModel):
    wordIndex: int
    line: int
    positionInLine: int


class SelectPayload(MovePayload):
    text: str


class SavePathPayload(BaseModel):
    path: List[int]


class SaveSelectedWordsPayload(BaseModel):
    selectedWords: List[str]
