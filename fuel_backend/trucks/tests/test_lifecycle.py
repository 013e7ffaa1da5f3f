# trucks/tests/test_lifecycle.py

from django.test import SimpleTestCase

from trucks.models import TruckStatus
from trucks.services.lifecycle import (
    EVENT_CANCEL,
    EVENT_GENERATE_PERMIT,
    EVENT_MARK_LOADED,
    EVENT_RESTORE,
    can_apply,
    target_status,
)


class LifecycleRuleTests(SimpleTestCase):
    def test_allowed_transitions(self):
        allowed = {
            (TruckStatus.PENDING, EVENT_GENERATE_PERMIT),
            (TruckStatus.CANCELLED, EVENT_GENERATE_PERMIT),
            (TruckStatus.GENERATED, EVENT_MARK_LOADED),
            (TruckStatus.PENDING, EVENT_CANCEL),
            (TruckStatus.GENERATED, EVENT_CANCEL),
            (TruckStatus.CANCELLED, EVENT_RESTORE),
        }

        for status in TruckStatus.values:
            for event in (EVENT_GENERATE_PERMIT, EVENT_MARK_LOADED, EVENT_CANCEL, EVENT_RESTORE):
                with self.subTest(status=status, event=event):
                    self.assertEqual(
                        can_apply(status=status, event=event),
                        (status, event) in allowed,
                    )

    def test_null_status_is_pending(self):
        self.assertTrue(can_apply(status=None, event=EVENT_GENERATE_PERMIT))

    def test_targets(self):
        self.assertEqual(target_status(EVENT_GENERATE_PERMIT), TruckStatus.GENERATED)
        self.assertEqual(target_status(EVENT_MARK_LOADED), TruckStatus.LOADED)
        self.assertEqual(target_status(EVENT_CANCEL), TruckStatus.CANCELLED)
        self.assertEqual(target_status(EVENT_RESTORE), TruckStatus.GENERATED)
