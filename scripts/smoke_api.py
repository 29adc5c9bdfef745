#!/usr/bin/env python3
"""Smoke script for the scheduling API against a running server."""

import sys
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001/api/v1"

DOCTOR = {"X-Actor-Id": "doc-1", "X-Actor-Role": "DOCTOR"}
PATIENT = {"X-Actor-Id": "pat-1", "X-Actor-Role": "PATIENT"}


def _report(response: httpx.Response) -> dict | list | None:
    if response.status_code >= 400:
        print(f"❌ HTTP Error: {response.status_code}")
        print(f"Response: {response.text}")
        return None
    print(f"✅ {response.request.method} {response.request.url.path} -> {response.status_code}")
    return response.json() if response.content else None


def publish_availability(day: date) -> dict | None:
    print("=" * 60)
    print("Testing POST /availability")
    print("=" * 60)
    payload = {"date": day.isoformat(), "start_time": "09:00", "end_time": "12:00"}
    return _report(httpx.post(f"{BASE_URL}/availability", json=payload, headers=DOCTOR, timeout=10.0))


def request_booking(day: date) -> dict | None:
    print("\n" + "=" * 60)
    print("Testing POST /bookings")
    print("=" * 60)
    payload = {"doctor_id": "doc-1", "date": day.isoformat(), "start_time": "09:00", "duration": 60}
    booking = _report(httpx.post(f"{BASE_URL}/bookings", json=payload, headers=PATIENT, timeout=10.0))
    if booking:
        print(f"  Booking {booking['id']}: {booking['start_time']}-{booking['end_time']} {booking['status']}")
    return booking


def accept_and_show_calendar(booking: dict, day: date) -> None:
    print("\n" + "=" * 60)
    print("Testing POST /bookings/{id}/accept and GET /availability/calendar")
    print("=" * 60)
    _report(httpx.post(f"{BASE_URL}/bookings/{booking['id']}/accept", headers=DOCTOR, timeout=10.0))
    calendar = _report(
        httpx.get(
            f"{BASE_URL}/availability/calendar",
            params={"doctor_id": "doc-1", "from": day.isoformat(), "to": day.isoformat()},
            headers=PATIENT,
            timeout=10.0,
        )
    )
    for slot in (calendar or {}).get(day.isoformat(), []):
        print(f"    {slot['start_time']}-{slot['end_time']}  {slot['status']}")


def main():
    print("\n🚀 Testing Scheduling API\n")

    try:
        httpx.get(BASE_URL.replace("/api/v1", "/health"), timeout=5.0)
        print("✅ Server is running\n")
    except httpx.HTTPError:
        print("❌ Server is not running!")
        print("   Please start it with: uvicorn app.main:app --reload --port 8001")
        sys.exit(1)

    day = date.today() + timedelta(days=3)
    publish_availability(day)
    booking = request_booking(day)
    if booking:
        accept_and_show_calendar(booking, day)

    print("\n" + "=" * 60)
    print("✅ Smoke run complete!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
