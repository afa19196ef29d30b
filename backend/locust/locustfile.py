"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test over-confirmation
  locust -f locustfile.py --tags throughput   # Test cache and views refresh
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
from locust import HttpUser, task, between, tag, events
from datetime import datetime, timedelta

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Shared state
EVENT_IDS = []
CONCURRENCY = {"event_id": None, "initiator_id": None}
PARTICIPANT_LIMIT = 10


def random_email():
    suffix = "".join(random.choices(string.ascii_lowercase, k=6))
    return f"load_{random.randint(10000, 99999)}_{suffix}@test.com"


def future_date(days=30):
    return (datetime.now() + timedelta(days=days)).strftime(DATE_FORMAT)


def create_user(client):
    resp = client.post("/admin/users", json={"name": "Load Tester", "email": random_email()},
                       name="/admin/users")
    return resp.json()["id"] if resp.status_code == 201 else None


def event_payload(category_id, limit, moderation=True):
    return {
        "title": f"Load event {random.randint(1, 100000)}",
        "annotation": "An event created by the load test suite",
        "description": "Created by locust to exercise the event service under load",
        "category": category_id,
        "eventDate": future_date(random.randint(1, 90)),
        "location": {"lat": 55.75, "lon": 37.62},
        "participantLimit": limit,
        "requestModeration": moderation,
    }


def create_published_event(client, initiator_id, limit, moderation=True):
    resp = client.post("/admin/categories", json={"name": f"load-{random.randint(1, 10**9)}"},
                       name="/admin/categories")
    if resp.status_code != 201:
        return None
    resp = client.post(f"/users/{initiator_id}/events",
                       json=event_payload(resp.json()["id"], limit, moderation),
                       name="/users/{userId}/events")
    if resp.status_code != 201:
        return None
    event_id = resp.json()["id"]
    client.patch(f"/admin/events/{event_id}", json={"stateAction": "PUBLISH_EVENT"},
                 name="/admin/events/{eventId}")
    return event_id


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"SETUP: capped event with participantLimit={PARTICIPANT_LIMIT} is created lazily")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many requesters, one initiator confirming everything

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM requests WHERE event_id = X AND status = 'CONFIRMED';
    Should be <= 10 and equal to events.confirmed_requests
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.user_id = create_user(self.client)
        if CONCURRENCY["event_id"] is None and self.user_id is not None:
            CONCURRENCY["initiator_id"] = self.user_id
            CONCURRENCY["event_id"] = create_published_event(
                self.client, self.user_id, PARTICIPANT_LIMIT
            )
            print(f"\nCreated event {CONCURRENCY['event_id']} with {PARTICIPANT_LIMIT} slots\n")
        self.requested = False

    @tag("concurrency")
    @task(3)
    def request_participation(self):
        event_id = CONCURRENCY["event_id"]
        if not event_id or self.user_id is None or self.requested:
            return
        with self.client.post(f"/users/{self.user_id}/requests?eventId={event_id}",
                              name="/users/{userId}/requests",
                              catch_response=True) as resp:
            if resp.status_code in (201, 409):
                resp.success()
                self.requested = True
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("concurrency")
    @task(1)
    def confirm_pending(self):
        """Initiator confirms whatever is pending; several batches race."""
        event_id, initiator_id = CONCURRENCY["event_id"], CONCURRENCY["initiator_id"]
        if not event_id:
            return
        resp = self.client.get(f"/users/{initiator_id}/events/{event_id}/requests",
                               name="/users/{userId}/events/{eventId}/requests")
        if resp.status_code != 200:
            return
        pending = [r["id"] for r in resp.json() if r["status"] == "PENDING"]
        if not pending:
            return
        with self.client.patch(f"/users/{initiator_id}/events/{event_id}/requests",
                               json={"requestIds": pending, "status": "CONFIRMED"},
                               name="/users/{userId}/events/{eventId}/requests [moderate]",
                               catch_response=True) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: limit reached or batch raced
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - cached categories vs. uncached public events

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Every public event read also records a hit and queries the stats service.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_categories_cached(self):
        offset = random.randint(0, 4) * 10
        self.client.get(f"/categories?from={offset}&size=10", name="/categories [cached]")

    @tag("throughput", "read")
    @task(5)
    def list_compilations_cached(self):
        self.client.get("/compilations?pinned=true", name="/compilations [cached]")

    @tag("throughput", "read")
    @task(5)
    def list_public_events(self):
        resp = self.client.get("/events?sort=VIEWS&size=20", name="/events")
        if resp.status_code == 200:
            for event in resp.json():
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/events/{random.choice(EVENT_IDS)}", name="/events/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.user_id = create_user(self.client) or 1

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.get("/events/999999", name="/events/{id} [missing]",
                             catch_response=True) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def inverted_range(self):
        with self.client.get(
            f"/events?rangeStart={future_date(10)}&rangeEnd={future_date(1)}",
            name="/events [inverted range]",
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def unknown_sort(self):
        with self.client.get("/events?sort=POPULARITY", name="/events [bad sort]",
                             catch_response=True) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def negative_limit(self):
        payload = event_payload(1, -5)
        with self.client.post(f"/users/{self.user_id}/events", json=payload,
                              name="/users/{userId}/events [negative limit]",
                              catch_response=True) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def request_unknown_event(self):
        with self.client.post(f"/users/{self.user_id}/requests?eventId=999999",
                              name="/users/{userId}/requests [missing]",
                              catch_response=True) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(f"/users/{self.user_id}/events", data="not json at all",
                              headers={"Content-Type": "application/json"},
                              name="/users/{userId}/events [garbage]",
                              catch_response=True) as resp:
            self._expect(resp, [400])


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing, some participation requests, rare event creation.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.user_id = create_user(self.client)

    @task(50)
    def browse_events(self):
        resp = self.client.get("/events?size=20", name="/events")
        if resp.status_code == 200:
            for event in resp.json():
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @task(20)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/events/{random.choice(EVENT_IDS)}", name="/events/{id}")

    @task(10)
    def request_participation(self):
        if EVENT_IDS and self.user_id:
            self.client.post(f"/users/{self.user_id}/requests?eventId={random.choice(EVENT_IDS)}",
                             name="/users/{userId}/requests")

    @task(3)
    def create_event(self):
        if self.user_id:
            event_id = create_published_event(
                self.client, self.user_id, random.randint(0, 50), moderation=random.random() < 0.5
            )
            if event_id:
                EVENT_IDS.append(event_id)
