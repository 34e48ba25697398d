from teamroom import db
import json


class GameLog(db.Model):
    __tablename__ = 'game_log'
    id = db.Column(db.Integer, primary_key=True)
    log_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    timestamp = db.Column(db.BigInteger, nullable=False)  # epoch millis
    game_number = db.Column(db.Integer, nullable=False, index=True)
    players = db.Column(db.Text, nullable=False)  # JSON-encoded list of player dicts
    teams = db.Column(db.Text, nullable=False)  # JSON-encoded {"team1": [...], "team2": [...]}
    traitors = db.Column(db.Text, nullable=False)  # JSON-encoded list of player ids

    @classmethod
    def from_entry(cls, entry):
        return cls(
            log_id=entry['id'],
            timestamp=entry['timestamp'],
            game_number=entry['gameNumber'],
            players=json.dumps(entry['players']),
            teams=json.dumps(entry['teams']),
            traitors=json.dumps(entry['traitors']),
        )

    def to_dict(self):
        return {
            'id': self.log_id,
            'timestamp': self.timestamp,
            'gameNumber': self.game_number,
            'players': json.loads(self.players),
            'teams': json.loads(self.teams),
            'traitors': json.loads(self.traitors),
        }
