import datetime

from delve import db


class DungeonRecord(db.Model):
    __tablename__ = 'dungeon_records'
    id = db.Column(db.Integer, primary_key=True)
    seed = db.Column(db.BigInteger, nullable=True)
    theme = db.Column(db.String(255), nullable=False)
    width = db.Column(db.Integer, nullable=False)
    height = db.Column(db.Integer, nullable=False)
    room_count = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)
    # Full serialized dungeon document (see delve.dungeon.serializer)
    document = db.Column(db.Text, nullable=False)
    # Generation metrics snapshot
    metrics = db.Column(db.JSON, default={})

    def __repr__(self):
        return f'<DungeonRecord {self.id} seed={self.seed} rooms={self.room_count}>'
