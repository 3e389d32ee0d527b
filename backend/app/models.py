from app import db
import json


class PathRecord(db.Model):
    """Saved reading path and selected words of one connection in one room.

    Rows are never removed when a room empties or a connection drops, so a
    later visitor still sees what earlier readers saved.
    """
    __tablename__ = 'path_record'
    __table_args__ = (
        db.UniqueConstraint('room_id', 'user_id', name='uq_path_record_room_user'),
    )
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Text, nullable=False, index=True)
    user_id = db.Column(db.String(64), nullable=False)
    color = db.Column(db.String(16), nullable=True)
    path = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of word indices
    selected_words = db.Column(db.Text, nullable=True)  # JSON-encoded list of words

    @property
    def path_list(self):
        return json.loads(self.path) if self.path else []

    @property
    def selected_words_list(self):
        return json.loads(self.selected_words) if self.selected_words else None

    def to_path_dict(self):
        return {
            'userId': self.user_id,
            'color': self.color,
            'path': self.path_list,
        }

    def to_selected_dict(self):
        return {
            'userId': self.user_id,
            'color': self.color,
            'selectedWords': self.selected_words_list,
        }
