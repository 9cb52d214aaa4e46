"""
Timestamp columns are timezone-aware UTC.
"""
import unittest
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from chalkboard.models.history import History
from chalkboard.models.practice_attempt import PracticeAttempt
from chalkboard.models.timestamps import as_utc
from chalkboard.models.user import User
from chalkboard.models.verification_code import VerificationCode

from support import make_engine


class TestTimestamps(unittest.TestCase):

    def test_defaults_are_aware_utc(self):
        for row in (User(email="a@chalkboard.io"), History(user_id=1), PracticeAttempt(question="2 + 2")):
            self.assertEqual(row.created_at.utcoffset(), timedelta(0))

    def test_columns_store_timezone(self):
        columns = [
            User.__table__.c.created_at,
            User.__table__.c.last_active_at,
            History.__table__.c.created_at,
            History.__table__.c.updated_at,
            PracticeAttempt.__table__.c.created_at,
            VerificationCode.__table__.c.expires_at,
            VerificationCode.__table__.c.created_at,
        ]
        for column in columns:
            self.assertTrue(column.type.timezone, column.name)

    def test_as_utc(self):
        naive = datetime(2026, 1, 1, 12, 0)
        self.assertEqual(as_utc(naive), datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))
        aware = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.assertIs(as_utc(aware), aware)
        self.assertIsNone(as_utc(None))

    def test_expiry_survives_a_round_trip(self):
        engine = make_engine()
        now = datetime.now(timezone.utc)
        with Session(engine) as session:
            session.add(VerificationCode(email="a@chalkboard.io", code="123456", expires_at=now + timedelta(minutes=10)))
            session.commit()

        with Session(engine) as session:
            entry = session.get(VerificationCode, "a@chalkboard.io")
            self.assertFalse(entry.is_expired(now))
            self.assertTrue(entry.is_expired(now + timedelta(minutes=11)))


if __name__ == "__main__":
    unittest.main()
