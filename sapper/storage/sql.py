import logging
import os
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    create_engine,
    DateTime,
    event,
    ForeignKey,
    func,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, relationship, Session, sessionmaker

from sapper.exceptions import StorageFailure, UnknownGame
from sapper.storage.base import BaseStorage, GameSummary, StoredGame, StoredMove

logger = logging.getLogger(__name__)


DEFAULT_DATABASE_URL = 'sqlite:///minesweeper.db'


Model = declarative_base()


def now():
    return datetime.now()


class GameRecord(Model):
    __tablename__ = 'game'
    __table_args__ = (
        Index('game_created_lookup', 'created_at'),
    )

    id = Column(Integer, primary_key=True)
    player_name = Column(String(100), nullable=False)
    num_rows = Column(Integer, nullable=False)
    num_cols = Column(Integer, nullable=False)
    num_mines = Column(Integer, nullable=False)
    board_state = Column(Text, nullable=False)
    visible_state = Column(Text, nullable=False)
    game_over = Column(Boolean, nullable=False, default=False)
    game_won = Column(Boolean, nullable=False, default=False)
    opened_cells = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=now)
    updated_at = Column(DateTime, nullable=False, default=now, onupdate=now)

    moves = relationship('MoveRecord',
                         back_populates='game',
                         cascade='all, delete-orphan',
                         passive_deletes=True,
                         order_by='MoveRecord.move_number')


class MoveRecord(Model):
    __tablename__ = 'move'
    __table_args__ = (
        UniqueConstraint('game_id', 'move_number'),
    )

    id = Column(Integer, primary_key=True)
    game_id = Column(ForeignKey('game.id', ondelete='CASCADE'), nullable=False)
    move_number = Column(Integer, nullable=False)
    row_idx = Column(Integer, nullable=False)
    col_idx = Column(Integer, nullable=False)
    action = Column(String(16), nullable=False)
    result = Column(String(16), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now)

    game = relationship('GameRecord', back_populates='moves')


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


def _summary(record: GameRecord) -> GameSummary:
    return GameSummary(
        id=record.id,
        player_name=record.player_name,
        rows=record.num_rows,
        cols=record.num_cols,
        mines=record.num_mines,
        game_over=record.game_over,
        game_won=record.game_won,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _stored_game(record: GameRecord) -> StoredGame:
    return StoredGame(
        id=record.id,
        player_name=record.player_name,
        rows=record.num_rows,
        cols=record.num_cols,
        mines=record.num_mines,
        game_over=record.game_over,
        game_won=record.game_won,
        created_at=record.created_at,
        updated_at=record.updated_at,
        board_state=record.board_state,
        visible_state=record.visible_state,
        opened_cells=record.opened_cells,
    )


def _stored_move(record: MoveRecord) -> StoredMove:
    return StoredMove(
        game_id=record.game_id,
        move_number=record.move_number,
        row=record.row_idx,
        col=record.col_idx,
        action=record.action,
        result=record.result,
        created_at=record.created_at,
    )


class SqlStorage(BaseStorage):
    """Keep games and moves in a SQL database through SQLAlchemy

    SQLite is used unless a database URL is passed or set in DATABASE_URL.
    """

    def __init__(self, database_url=None, *, engine: Engine = None, debug=False):
        if database_url is None and engine is None:
            database_url = os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL)

        self.database_url = database_url
        self.engine = engine
        self.debug = debug
        self._sessionmaker = None
        self.connect()

    def connect(self):
        try:
            if self.engine is None:
                self.engine = create_engine(self.database_url,
                                            echo='debug' if self.debug else False)
                logging.getLogger('sqlalchemy.engine').propagate = False

            if self.engine.dialect.name == 'sqlite':
                event.listen(self.engine, 'connect', _enable_sqlite_foreign_keys)

            Model.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StorageFailure(f'Unable to open database: {e}') from e

        self._sessionmaker = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.debug('Connected to %s', self.engine.url)

    def close(self):
        if self.engine is not None:
            self.engine.dispose()

    @contextmanager
    def scoped_session(self) -> Session:
        session: Session = self._sessionmaker()

        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageFailure(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_game(self, player_name, rows, cols, mines, board_state,
                    visible_state, game_over, game_won, opened_cells):
        record = GameRecord(
            player_name=player_name,
            num_rows=rows,
            num_cols=cols,
            num_mines=mines,
            board_state=board_state,
            visible_state=visible_state,
            game_over=game_over,
            game_won=game_won,
            opened_cells=opened_cells,
        )
        with self.scoped_session() as session:
            session.add(record)
            session.flush()
            game_id = record.id

        logger.debug('Created game %d for %s', game_id, player_name)
        return game_id

    def update_game(self, game_id, board_state, visible_state, game_over,
                    game_won, opened_cells):
        with self.scoped_session() as session:
            record = session.get(GameRecord, game_id)
            if record is None:
                return False

            record.board_state = board_state
            record.visible_state = visible_state
            record.game_over = game_over
            record.game_won = game_won
            record.opened_cells = opened_cells
            record.updated_at = now()

        logger.debug('Updated game %d', game_id)
        return True

    def load_game(self, game_id) -> Optional[StoredGame]:
        with self.scoped_session() as session:
            record = session.get(GameRecord, game_id)
            if record is None:
                return None
            return _stored_game(record)

    def list_games(self) -> List[GameSummary]:
        with self.scoped_session() as session:
            qs = session.query(GameRecord)
            qs = qs.order_by(GameRecord.created_at.desc(), GameRecord.id.desc())
            return [_summary(record) for record in qs]

    def list_active_games(self) -> List[GameSummary]:
        with self.scoped_session() as session:
            qs = session.query(GameRecord)
            qs = qs.filter_by(game_over=False, game_won=False)
            qs = qs.order_by(GameRecord.updated_at.desc(), GameRecord.id.desc())
            return [_summary(record) for record in qs]

    def delete_game(self, game_id) -> bool:
        with self.scoped_session() as session:
            record = session.get(GameRecord, game_id)
            if record is None:
                return False
            session.delete(record)

        logger.debug('Deleted game %d', game_id)
        return True

    def append_move(self, game_id, move_number, row, col, action, result):
        with self.scoped_session() as session:
            if session.get(GameRecord, game_id) is None:
                raise UnknownGame(game_id)

            session.add(MoveRecord(
                game_id=game_id,
                move_number=move_number,
                row_idx=row,
                col_idx=col,
                action=action,
                result=result,
            ))

        logger.debug('Game %d move %d: %s (%d, %d) -> %s',
                     game_id, move_number, action, row, col, result)

    def list_moves(self, game_id) -> List[StoredMove]:
        with self.scoped_session() as session:
            qs = session.query(MoveRecord)
            qs = qs.filter_by(game_id=game_id)
            qs = qs.order_by(MoveRecord.move_number)
            return [_stored_move(record) for record in qs]

    def max_move_number(self, game_id) -> int:
        with self.scoped_session() as session:
            st = session.query(func.max(MoveRecord.move_number))
            st = st.filter(MoveRecord.game_id == game_id)
            return st.scalar() or 0
