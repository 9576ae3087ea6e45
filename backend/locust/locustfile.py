"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double booking
  locust -f locustfile.py --tags read         # Test listing under load
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

The test_stop hook reports any seat number handed out twice.
"""

import random
from collections import Counter

import httpx
from locust import HttpUser, task, between, tag, events

# Shared state
ASSIGNED = []


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    """Setup: start from an empty venue."""
    print("\n" + "=" * 60)
    print("SETUP: Resetting seat map...")
    print("=" * 60)
    if environment.host:
        httpx.post(f"{environment.host}/api/v1/reset", timeout=10)


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    duplicates = [seat for seat, n in Counter(ASSIGNED).items() if n > 1]
    print("\n" + "=" * 60)
    print(f"Seats assigned: {len(ASSIGNED)}")
    if duplicates:
        print(f"✗ FAIL: DOUBLE BOOKED {sorted(duplicates)}")
    else:
        print("✓ PASS: No seat assigned twice")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many users fight for 77 seats

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s
    """
    wait_time = between(0, 0.1)

    @tag("concurrency")
    @task
    def book_party(self):
        with self.client.post("/api/v1/book",
            json={"count": random.randint(1, 4)},
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                ASSIGNED.extend(resp.json()["assigned"])
                resp.success()
            elif resp.status_code in (409, 503):
                resp.success()  # Expected: sold out or busy
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ReadUser(HttpUser):
    """
    TEST 2: Reads while bookings run

    Run: locust -f locustfile.py --tags read -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("read")
    @task(10)
    def list_seats(self):
        with self.client.get("/api/v1/seats", catch_response=True) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unexpected: {resp.status_code}")
            elif len(resp.json()) != 77:
                resp.failure("Seat map changed size")
            else:
                resp.success()

    @tag("read")
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

    def _expect_invalid(self, **kwargs):
        with self.client.post("/api/v1/book", catch_response=True, **kwargs) as resp:
            if resp.status_code == 400 and resp.json().get("error") == "InvalidRequest":
                resp.success()
            else:
                resp.failure(f"Expected 400 InvalidRequest, got {resp.status_code}")

    @tag("edge")
    @task
    def negative_seats(self):
        self._expect_invalid(json={"count": -5})

    @tag("edge")
    @task
    def zero_seats(self):
        self._expect_invalid(json={"count": 0})

    @tag("edge")
    @task
    def fractional_seats(self):
        self._expect_invalid(json={"count": 1.5})

    @tag("edge")
    @task
    def malformed_json(self):
        self._expect_invalid(data="not json at all", headers={"Content-Type": "application/json"})

    @tag("edge")
    @task
    def huge_seats(self):
        with self.client.post("/api/v1/book",
            json={"count": 999999},
            catch_response=True
        ) as resp:
            if resp.status_code == 409:
                resp.success()
            else:
                resp.failure(f"Expected 409, got {resp.status_code}")
