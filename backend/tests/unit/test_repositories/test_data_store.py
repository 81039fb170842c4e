"""MongoDataStore over mongomock"""
from portal.domain.enums import ChangeEventType


def test_insert_and_find_hide_mongo_id(store):
    record = {"queue_id": "PQ-1", "print_status": "pending_print"}
    store.insert("print_queue", record)

    assert "_id" not in record
    assert store.find_one("print_queue", {"queue_id": "PQ-1"}) == record


def test_find_many_order_limit_skip(store):
    store.insert_many("t", [{"n": n} for n in (3, 1, 2, 5, 4)])

    rows = store.find_many("t", {}, order=[("n", 1)], limit=2, skip=1)
    assert [r["n"] for r in rows] == [2, 3]


def test_find_one_with_order_returns_first(store):
    store.insert_many("t", [{"k": "a", "n": 1}, {"k": "a", "n": 9}])
    assert store.find_one("t", {"k": "a"}, order=[("n", -1)])["n"] == 9


def test_conditional_update_reports_matched_count(store):
    store.insert("applications", {"application_id": "APP-1", "status": "Pending"})

    first = store.update("applications", {"application_id": "APP-1", "status": "Pending"}, {"status": "Approved"})
    second = store.update("applications", {"application_id": "APP-1", "status": "Pending"}, {"status": "Approved"})

    assert (first, second) == (1, 0)
    assert store.find_one("applications", {"application_id": "APP-1"})["status"] == "Approved"


def test_delete_and_count(store):
    store.insert_many("t", [{"n": 1}, {"n": 2}, {"n": 2}])
    assert store.delete("t", {"n": 2}) == 2
    assert store.count("t") == 1


def test_on_change_delivers_events_until_unsubscribed(store):
    events = []
    unsubscribe = store.on_change("print_queue", events.append)

    store.insert("print_queue", {"queue_id": "PQ-1", "print_status": "pending_print"})
    store.update("print_queue", {"queue_id": "PQ-1"}, {"print_status": "printed"})
    store.insert("notifications", {"notification_id": "NTF-1"})
    unsubscribe()
    store.delete("print_queue", {"queue_id": "PQ-1"})

    assert [e.event_type for e in events] == [ChangeEventType.INSERT, ChangeEventType.UPDATE]
    assert events[1].patch == {"print_status": "printed"}


def test_failing_subscriber_does_not_break_writes(store):
    def boom(event):
        raise RuntimeError("subscriber down")

    store.on_change("t", boom)
    store.insert("t", {"n": 1})
    assert store.count("t") == 1
