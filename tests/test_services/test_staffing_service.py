import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401
from jobrole.models import Role, DayType
from staffing import service
from staffing.schema import CoverageRuleUpsertPayload


class StaffingServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_upsert_inserts_then_replaces(self):
        service.upsert_rule(self.db, CoverageRuleUpsertPayload(role=Role.WAIT, day_type=DayType.weekday, min_staff=4))
        service.upsert_rule(self.db, CoverageRuleUpsertPayload(role=Role.WAIT, day_type=DayType.weekday, min_staff=6))

        rules = service.get_rules(self.db)
        self.assertEqual(len(rules), 1)
        self.assertEqual(rules[0].min_staff, 6)
        self.assertEqual(service.get_rule(self.db, Role.WAIT, DayType.weekday).min_staff, 6)

    def test_weekday_and_weekend_are_separate_rules(self):
        service.upsert_rule(self.db, CoverageRuleUpsertPayload(role=Role.MGR, day_type=DayType.weekday, min_staff=1))
        service.upsert_rule(self.db, CoverageRuleUpsertPayload(role=Role.MGR, day_type=DayType.weekend, min_staff=2))

        self.assertEqual(len(service.get_rules(self.db)), 2)
        self.assertIsNone(service.get_rule(self.db, Role.HOST, DayType.weekend))

    def test_delete_rule(self):
        service.upsert_rule(self.db, CoverageRuleUpsertPayload(role=Role.BART, day_type=DayType.weekend, min_staff=4))

        self.assertTrue(service.delete_rule(self.db, Role.BART, DayType.weekend))
        self.assertFalse(service.delete_rule(self.db, Role.BART, DayType.weekend))
        self.assertEqual(service.get_rules(self.db), [])

    def test_seed_default_rules_only_when_empty(self):
        self.assertEqual(service.seed_default_rules(self.db), 12)
        self.assertEqual(service.get_rule(self.db, Role.WAIT, DayType.weekend).min_staff, 13)
        self.assertEqual(service.get_rule(self.db, Role.MGR, DayType.weekday).min_staff, 1)

        self.assertEqual(service.seed_default_rules(self.db), 0)
        self.assertEqual(len(service.get_rules(self.db)), 12)

    def test_payload_rejects_negative_minimum_and_unknown_role(self):
        with self.assertRaises(ValueError):
            CoverageRuleUpsertPayload(role=Role.WAIT, day_type=DayType.weekday, min_staff=-1)
        with self.assertRaises(ValueError):
            CoverageRuleUpsertPayload(role="CHEF", day_type=DayType.weekday, min_staff=1)


if __name__ == "__main__":
    unittest.main()
