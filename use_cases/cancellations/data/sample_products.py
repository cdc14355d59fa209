"""
Sample product catalog.

Lounge access (DragonPass), airport transfers (Mozio) and eSIM plans
(Airalo) with their provider cancellation policies. Service times are
relative to the moment the catalog is built so the samples always sit
in front of their windows.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from config import settings


def _lounge(product_id: str, title: str, amount: float, windows: List[Dict[str, Any]],
            service_time: datetime, booking_id: str, lounge_id: str, lounge_name: str,
            terminal: str, airport: str, guest_count: int, membership_type: str,
            cancel_condition: Optional[str] = None) -> Dict[str, Any]:
    policy: Dict[str, Any] = {"windows": windows, "canCancel": True}
    if cancel_condition:
        policy["cancelCondition"] = cancel_condition
    return {
        "id": product_id,
        "title": title,
        "provider": "dragonpass",
        "type": "lounge_access",
        "price": {"amount": amount, "currency": settings.default_currency},
        "status": "confirmed",
        "cancellationPolicy": policy,
        "serviceDateTime": service_time.isoformat(),
        "metadata": {
            "bookingId": booking_id,
            "loungeId": lounge_id,
            "loungeName": lounge_name,
            "terminal": terminal,
            "airport": airport,
            "accessType": "single_use",
            "guestCount": guest_count,
            "membershipType": membership_type,
        },
    }


def _transfer(product_id: str, title: str, amount: float, windows: List[Dict[str, Any]],
              service_time: datetime, booking_id: str, confirmation_number: str,
              pickup: str, dropoff: str, vehicle_type: str, capacity: int,
              vehicle_provider: str) -> Dict[str, Any]:
    return {
        "id": product_id,
        "title": title,
        "provider": "mozio",
        "type": "airport_transfer",
        "price": {"amount": amount, "currency": settings.default_currency},
        "status": "confirmed",
        "cancellationPolicy": {"windows": windows, "canCancel": True},
        "serviceDateTime": service_time.isoformat(),
        "metadata": {
            "bookingId": booking_id,
            "confirmationNumber": confirmation_number,
            "pickup": {"location": pickup, "datetime": service_time.isoformat()},
            "dropoff": {
                "location": dropoff,
                "datetime": (service_time + timedelta(hours=1.5)).isoformat(),
            },
            "vehicle": {"type": vehicle_type, "capacity": capacity, "provider": vehicle_provider},
        },
    }


def _esim(product_id: str, title: str, amount: float, windows: List[Dict[str, Any]],
          service_time: datetime, activation_deadline: datetime, order_id: str,
          package_id: str, iccid: str, country: str, country_code: str,
          data_amount: str, validity_days: int) -> Dict[str, Any]:
    return {
        "id": product_id,
        "title": title,
        "provider": "airalo",
        "type": "esim",
        "price": {"amount": amount, "currency": settings.default_currency},
        "status": "confirmed",
        "cancellationPolicy": {
            "windows": windows,
            "canCancel": True,
            "cancelCondition": "only_if_not_activated",
        },
        "serviceDateTime": service_time.isoformat(),
        "activationDeadline": activation_deadline.isoformat(),
        "metadata": {
            "orderId": order_id,
            "orderCode": f"20250902-{order_id}",
            "packageId": package_id,
            "iccid": iccid,
            "country": country,
            "countryCode": country_code,
            "dataAmount": data_amount,
            "validityDays": validity_days,
            "isActivated": False,
            "activatedAt": None,
            "simStatus": "ready_for_activation",
        },
    }


def _window(hours: float, percentage: float, description: str) -> Dict[str, Any]:
    return {"hoursBeforeService": hours, "refundPercentage": percentage, "description": description}


def build_sample_products(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Return the sample catalog documents with service times relative to now."""
    now = now or datetime.now(timezone.utc)

    def hours(h: float) -> datetime:
        return now + timedelta(hours=h)

    def days(d: int) -> datetime:
        return now + timedelta(days=d)

    return [
        # DragonPass lounge access
        _lounge(
            "PROD-001", "JFK Terminal 4 Centurion Lounge Access", 45.00,
            [
                _window(4, 100, "Full refund if cancelled within 4 hours of service time"),
                _window(24, 50, "50% refund if cancelled between 4-24 hours before service time"),
            ],
            hours(2), "DP-456789012", "JFK-T4-CENTURION", "Centurion Lounge", "T4", "JFK", 1, "premium",
            cancel_condition="only_if_not_activated",
        ),
        _lounge(
            "PROD-002", "LAX Tom Bradley International Terminal Lounge", 35.00,
            [
                _window(2, 100, "Full refund if cancelled within 2 hours of service time"),
                _window(12, 75, "75% refund if cancelled between 2-12 hours before service time"),
                _window(24, 25, "25% refund if cancelled between 12-24 hours before service time"),
            ],
            hours(6), "DP-456789013", "LAX-TB-AMEX", "American Express Centurion Lounge", "TB", "LAX", 2,
            "standard",
        ),
        _lounge(
            "PROD-003", "ORD Terminal 3 Priority Pass Lounge", 25.00,
            [
                _window(6, 100, "Full refund if cancelled within 6 hours of service time"),
                _window(24, 0, "No refund after 6 hours before service time"),
            ],
            hours(25), "DP-456789014", "ORD-T3-PRIORITY", "Priority Pass Lounge", "T3", "ORD", 1, "basic",
        ),
        _lounge(
            "PROD-004", "LHR Terminal 5 Plaza Premium Lounge", 55.00,
            [
                _window(24, 100, "Full refund if cancelled 24 hours before access"),
                _window(6, 50, "50% refund if cancelled between 6-24 hours before access"),
                _window(2, 0, "No refund if cancelled less than 6 hours before access"),
            ],
            hours(30), "DP-456789015", "LHR-T5-PLAZA", "Plaza Premium Lounge", "T5", "LHR", 1, "premium",
        ),
        _lounge(
            "PROD-005", "CDG Terminal 2E Air France Lounge", 40.00,
            [
                _window(12, 100, "Full refund if cancelled within 12 hours of access time"),
                _window(24, 75, "75% refund if cancelled between 12-24 hours before access"),
                _window(48, 25, "25% refund if cancelled between 24-48 hours before access"),
            ],
            hours(1), "DP-456789016", "CDG-T2E-AF", "Air France Lounge", "T2E", "CDG", 2, "standard",
            cancel_condition="only_if_not_activated",
        ),
        # Mozio airport transfers
        _transfer(
            "PROD-006", "Airport Transfer - JFK to Manhattan", 85.00,
            [
                _window(48, 100, "Full refund"),
                _window(12, 80, "80% refund (20% cancellation fee)"),
                _window(2, 0, "No refund - too close to pickup time"),
            ],
            hours(8), "MZ-789456123", "MZDT-365316", "JFK Airport, Terminal 1",
            "Manhattan Hotel, 123 5th Ave", "Sedan", 4, "Daytrip",
        ),
        _transfer(
            "PROD-007", "Airport Transfer - LAX to Beverly Hills", 95.00,
            [
                _window(72, 100, "Full refund"),
                _window(24, 85, "85% refund (15% cancellation fee)"),
                _window(6, 50, "50% refund (50% cancellation fee)"),
                _window(1, 0, "No refund - too close to pickup time"),
            ],
            hours(12), "MZ-789456124", "MZDT-365317", "LAX Airport, Terminal 7",
            "Beverly Hills Hotel, 9641 Sunset Blvd", "SUV", 6, "Blacklane",
        ),
        _transfer(
            "PROD-008", "Airport Transfer - ORD to Downtown Chicago", 75.00,
            [
                _window(24, 100, "Full refund"),
                _window(6, 70, "70% refund (30% cancellation fee)"),
                _window(2, 0, "No refund - too close to pickup time"),
            ],
            hours(18), "MZ-789456125", "MZDT-365318", "ORD Airport, Terminal 3",
            "Downtown Chicago Hotel, 123 Michigan Ave", "Sedan", 4, "Daytrip",
        ),
        # Airalo eSIM data plans
        _esim(
            "PROD-009", "eSIM USA - 5GB 30 Days", 22.00,
            [
                _window(72, 100, "Full refund - eSIM not yet activated"),
                _window(24, 75, "75% refund (25% processing fee)"),
                _window(0, 0, "No refund - eSIM activated or activation deadline passed"),
            ],
            hours(4), days(90), "197564", "change-30days-5gb", "873000000000015081",
            "United States", "US", "5 GB", 30,
        ),
        _esim(
            "PROD-010", "eSIM Europe - 10GB 15 Days", 35.00,
            [
                _window(48, 100, "Full refund - eSIM not yet activated"),
                _window(12, 80, "80% refund (20% processing fee)"),
                _window(0, 0, "No refund - eSIM activated or activation deadline passed"),
            ],
            hours(6), days(60), "197565", "europe-15days-10gb", "873000000000015082",
            "Europe", "EU", "10 GB", 15,
        ),
        _esim(
            "PROD-011", "eSIM Asia - 3GB 7 Days", 18.00,
            [
                _window(24, 100, "Full refund - eSIM not yet activated"),
                _window(6, 60, "60% refund (40% processing fee)"),
                _window(0, 0, "No refund - eSIM activated or activation deadline passed"),
            ],
            hours(10), days(45), "197566", "asia-7days-3gb", "873000000000015083",
            "Asia", "AS", "3 GB", 7,
        ),
    ]
