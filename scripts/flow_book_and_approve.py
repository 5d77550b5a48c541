#!/usr/bin/env python3
"""
Booking approval flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_book_and_approve.py --email jane@example.com
    python scripts/flow_book_and_approve.py --email jane@example.com --capacity 1 --base-url http://localhost:8000

Flow:
    1. Create a studio that requires approval
    2. Create a session tomorrow
    3. Book the session (pending)
    4. Book again with the same email (409)
    5. Approve the booking
    6. Cancel through the customer link
    7. Replay the cancel link (already cancelled)
"""

import argparse
import json
import sys
import uuid
from datetime import UTC, datetime, timedelta

import httpx

BASE_URL = "http://localhost:8000"


def api_request(method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make an API request."""
    url = f"{BASE_URL}{endpoint}"
    response = httpx.request(method, url, json=data, timeout=10.0)
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None, expect_error: bool = False):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400 and not expect_error:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    if fields:
        filtered = {k: result["data"].get(k) for k in fields if k in result["data"]}
        print(json.dumps(filtered, indent=2))
    else:
        print(json.dumps(result["data"], indent=2))
    return True


def main():
    global BASE_URL

    parser = argparse.ArgumentParser(description="Booking, approval and cancellation flow")
    parser.add_argument("--email", required=True, help="Customer email")
    parser.add_argument("--capacity", type=int, default=10, help="Session capacity")
    parser.add_argument("--base-url", default=BASE_URL, help="API base URL")
    args = parser.parse_args()
    BASE_URL = args.base_url.rstrip("/")

    # Step 1: Create studio
    print_step(1, "Create studio (approval required)")
    studio_result = api_request("POST", "/api/studios", {
        "name": "Flow Test Studio",
        "slug": f"flow-test-{uuid.uuid4().hex[:8]}",
        "timezone": "Europe/Amsterdam",
        "requires_approval": True,
        "auto_approve_returning": True,
    })
    if not print_result(studio_result, ["id", "slug", "requires_approval"]):
        sys.exit(1)
    studio_id = studio_result["data"]["id"]

    # Step 2: Create session
    print_step(2, "Create session")
    starts_at = (datetime.now(UTC) + timedelta(days=1)).replace(microsecond=0)
    session_result = api_request("POST", "/api/sessions", {
        "studio_id": studio_id,
        "title": "Morning Vinyasa",
        "starts_at": starts_at.isoformat(),
        "duration_minutes": 60,
        "capacity": args.capacity,
    })
    if not print_result(session_result, ["id", "title", "starts_at", "capacity"]):
        sys.exit(1)
    session_id = session_result["data"]["id"]

    # Step 3: Book
    print_step(3, "Book the session")
    booking_result = api_request("POST", "/api/bookings", {
        "session_id": session_id,
        "first_name": "Flow",
        "last_name": "Tester",
        "email": args.email,
    })
    if not print_result(booking_result, ["id", "status", "spots_left", "message", "cancel_url"]):
        sys.exit(1)
    booking_id = booking_result["data"]["id"]
    cancel_token = booking_result["data"]["cancel_token"]

    # Step 4: Duplicate
    print_step(4, "Book again with the same email")
    duplicate_result = api_request("POST", "/api/bookings", {
        "session_id": session_id,
        "first_name": "Flow",
        "last_name": "Tester",
        "email": args.email.upper(),
    })
    print_result(duplicate_result, expect_error=True)
    if duplicate_result["status"] != 409:
        print("ERROR: expected 409 for duplicate booking")
        sys.exit(1)

    # Step 5: Approve
    print_step(5, "Approve booking (as studio)")
    approve_result = api_request("POST", f"/api/bookings/{booking_id}/approve")
    if not print_result(approve_result, ["message", "already_approved"]):
        sys.exit(1)

    # Step 6: Customer cancel
    print_step(6, "Cancel through customer link")
    cancel_result = api_request("GET", f"/api/bookings/cancel/{cancel_token}")
    if not print_result(cancel_result, ["message", "cancelled", "already_cancelled"]):
        sys.exit(1)

    # Step 7: Replay
    print_step(7, "Replay cancel link")
    replay_result = api_request("GET", f"/api/bookings/cancel/{cancel_token}")
    if not print_result(replay_result, ["message", "cancelled", "already_cancelled"]):
        sys.exit(1)

    # Final summary
    print("\n" + "="*60)
    print("FULL FLOW COMPLETE")
    print("="*60)
    print(f"Studio:   {studio_id}")
    print(f"Session:  {session_id}")
    print(f"Booking:  {booking_id}")


if __name__ == "__main__":
    main()
