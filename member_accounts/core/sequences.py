"""
Named monotonic counters backed by the ``sequences`` table.
"""
import logging

from sqlalchemy import Column, Integer, String, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import sessionmaker

from ..database import Base
from ..exceptions import SequenceUnavailableError

# Set up logging
logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE ... RETURNING
UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}

ADMIN_DEFAULT_PASSWORD = "adminDefaultPassword"
MEMBERSHIP_ID = "membershipId"


class Sequence(Base):
    """
    Sequence Model - one row per named counter

    Fields:
    - sequence_name: Unique counter name
    - sequence_value: Last value handed out
    """
    __tablename__ = "sequences"

    id = Column(Integer, primary_key=True, index=True)
    sequence_name = Column(String, unique=True, nullable=False)
    sequence_value = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Sequence(sequence_name='{self.sequence_name}', sequence_value={self.sequence_value})>"


class SequenceGenerator:
    """
    Hands out strictly increasing integers per sequence name.

    Each call is a single upsert that increments and returns the new value
    in its own transaction, so concurrent callers never see the same value.
    The first value of a new sequence is 1.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def next(self, sequence_name: str) -> int:
        with self._session_factory.begin() as session:
            insert = UPSERT_INSERTS.get(session.get_bind().dialect.name)
            if insert is None:
                logger.error(
                    f"No atomic upsert for dialect {session.get_bind().dialect.name}; "
                    f"refusing to increment '{sequence_name}'"
                )
                raise SequenceUnavailableError()

            statement = (
                insert(Sequence)
                .values(sequence_name=sequence_name, sequence_value=1)
                .on_conflict_do_update(
                    index_elements=[Sequence.sequence_name],
                    set_={"sequence_value": Sequence.sequence_value + 1},
                )
                .returning(Sequence.sequence_value)
            )
            value = session.execute(statement).scalar_one()

        logger.debug(f"Sequence '{sequence_name}' advanced to {value}")
        return value

    def current(self, sequence_name: str) -> int:
        """Last value handed out for ``sequence_name``, 0 if never used."""
        with self._session_factory() as session:
            value = session.execute(
                select(Sequence.sequence_value).where(Sequence.sequence_name == sequence_name)
            ).scalar_one_or_none()
        return value or 0
