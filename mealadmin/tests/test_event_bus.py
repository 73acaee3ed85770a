import unittest
from mealadmin.events.Event_Bus import (
    EventBus, OperationFailed, RecordChanged, RESOURCE_CREATED, RESOURCE_DELETED, RESOURCE_ERROR,
)
from mealadmin.events.activity_log import ActivityLog


class TestEventBus(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.received = []

    def _listener(self, event_name, payload):
        self.received.append((event_name, payload))

    def test_subscribe_once(self):
        self.bus.subscribe(RESOURCE_CREATED, self._listener)
        self.bus.subscribe(RESOURCE_CREATED, self._listener)
        self.bus.publish(RESOURCE_CREATED, {"display_id": "DES1"})
        self.assertEqual(self.received, [(RESOURCE_CREATED, {"display_id": "DES1"})])

    def test_unsubscribe(self):
        self.bus.subscribe(RESOURCE_CREATED, self._listener)
        self.bus.unsubscribe(RESOURCE_CREATED, self._listener)
        self.bus.unsubscribe(RESOURCE_DELETED, self._listener)
        self.bus.publish(RESOURCE_CREATED, {})
        self.assertEqual(self.received, [])

    def test_failing_listener_does_not_stop_others(self):
        def broken(event_name, payload):
            raise RuntimeError("boom")

        self.bus.subscribe(RESOURCE_CREATED, broken)
        self.bus.subscribe(RESOURCE_CREATED, self._listener)
        with self.assertLogs("mealadmin.events.Event_Bus", level="ERROR"):
            self.bus.publish(RESOURCE_CREATED, {"display_id": "DES1"})
        self.assertEqual(len(self.received), 1)

    def test_buses_are_independent(self):
        other = EventBus()
        self.bus.subscribe(RESOURCE_CREATED, self._listener)
        other.publish(RESOURCE_CREATED, {})
        self.assertEqual(self.received, [])


class TestActivityLog(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.log = ActivityLog(max_events=3).attach(self.bus)

    def test_cursor(self):
        self.assertEqual(self.log.get_events(), {'events': [], 'next_cursor': 0})
        self.bus.publish(RESOURCE_CREATED, {"resource": "tax", "display_id": "TAX1"})
        first = self.log.get_events()
        self.assertEqual(first['next_cursor'], 1)
        self.assertEqual(first['events'][0]['type'], RESOURCE_CREATED)
        self.assertEqual(first['events'][0]['display_id'], "TAX1")

        self.bus.publish(RESOURCE_DELETED, {"resource": "tax", "internal_id": "x"})
        newer = self.log.get_events(since=first['next_cursor'])
        self.assertEqual([e['type'] for e in newer['events']], [RESOURCE_DELETED])
        self.assertEqual(newer['next_cursor'], 2)
        self.assertEqual(self.log.get_events(since=2)['events'], [])

    def test_payload_cannot_overwrite_event_id(self):
        self.bus.publish(RESOURCE_CREATED, {"id": 99, "type": "spoof"})
        evt = self.log.get_events()['events'][0]
        self.assertEqual((evt['id'], evt['type']), (1, RESOURCE_CREATED))

    def test_typed_payloads_are_flattened_into_entries(self):
        self.bus.publish(RESOURCE_CREATED, RecordChanged(resource="tax", display_id="TAX1", internal_id="u1"))
        self.bus.publish(RESOURCE_ERROR, OperationFailed(resource="tax", operation="delete", error="gone",
                                                          internal_id="u1"))
        created, failed = self.log.get_events()['events']
        self.assertEqual((created['resource'], created['display_id']), ("tax", "TAX1"))
        self.assertEqual((failed['type'], failed['operation'], failed['internal_id']),
                         (RESOURCE_ERROR, "delete", "u1"))

    def test_capped(self):
        for n in range(5):
            self.bus.publish(RESOURCE_CREATED, {"display_id": f"DES{n + 1}"})
        data = self.log.get_events()
        self.assertEqual([e['id'] for e in data['events']], [3, 4, 5])
        self.assertEqual(data['next_cursor'], 5)


if __name__ == '__main__':
    unittest.main()
