import logging

from sqlalchemy.exc import SQLAlchemyError

from teamroom import db
from teamroom.models import GameLog

logger = logging.getLogger(__name__)


class GameLogStore:
    """Capped archive of started games, kept in the app database.

    record() is called by RoomManager after its lock is released, possibly
    from the reset timer's background task, so every call pushes its own
    app context.
    """

    def __init__(self, app, cap: int = 100):
        self.app = app
        self.cap = cap

    def record(self, entry: dict) -> None:
        with self.app.app_context():
            try:
                db.session.add(GameLog.from_entry(entry))
                db.session.flush()
                self._prune()
                db.session.commit()
            except SQLAlchemyError:
                db.session.rollback()
                logger.exception(f"[game-log] failed to archive game #{entry.get('gameNumber')}")
                return
        logger.info(f"[game-log] archived game #{entry['gameNumber']} as {entry['id']}")

    def recent(self, limit: int = 10) -> list:
        """Newest `limit` entries, oldest first."""
        with self.app.app_context():
            rows = GameLog.query.order_by(GameLog.id.desc()).limit(max(0, limit)).all()
            return [row.to_dict() for row in reversed(rows)]

    def total(self) -> int:
        with self.app.app_context():
            return GameLog.query.count()

    def last_game_number(self) -> int:
        with self.app.app_context():
            return db.session.query(db.func.max(GameLog.game_number)).scalar() or 0

    def clear(self) -> None:
        with self.app.app_context():
            GameLog.query.delete()
            db.session.commit()

    def _prune(self) -> None:
        excess = GameLog.query.count() - self.cap
        if excess <= 0:
            return
        for row in GameLog.query.order_by(GameLog.id.asc()).limit(excess).all():
            db.session.delete(row)
