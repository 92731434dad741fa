#!/usr/bin/env python3
"""
Example: Searching availability and booking an appointment with square_commerce

Needs SQUARE_ACCESS_TOKEN (and optionally SQUARE_LOCATION_ID) in the
environment or a .env file. Runs against the sandbox by default.
"""

import asyncio
import sys
from datetime import datetime, timedelta, timezone

from square_commerce import SquareClient, SquareError
from square_commerce.logging_conf import configure_json_logging
from square_commerce.services.bookings import AppointmentSegmentBuilder


async def main(service_variation_id: str, customer_id: str) -> None:
    async with SquareClient.from_env() as client:
        if not await client.health_check():
            print("❌ Could not reach Square, check SQUARE_ACCESS_TOKEN")
            return

        location_id = client.config.location_id or await client.locations().get_main_location_id()
        print(f"📍 Using location {location_id}")

        variation = await client.catalog().retrieve(service_variation_id)
        version = variation.object.version

        start = datetime.now(timezone.utc) + timedelta(days=1)
        slots = await (client.bookings().availability_builder()
                       .start_at_range(start, start + timedelta(days=7))
                       .location_id(location_id)
                       .add_segment_filter(service_variation_id)
                       .build())
        print(f"🗓️  Found {len(slots)} open slots")
        if not slots:
            return

        slot = slots[0]
        segment = slot.appointment_segments[0]
        booking = await (client.bookings().builder()
                         .start_at(slot.start_at)
                         .customer_id(customer_id)
                         .location_id(location_id)
                         .add_appointment_segment(
                             AppointmentSegmentBuilder()
                             .duration_minutes(segment.duration_minutes)
                             .service_variation_id(service_variation_id)
                             .service_variation_version(version)
                             .team_member_id(segment.team_member_id))
                         .build())
        print(f"✅ Booked {booking.id} at {booking.start_at}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("usage: example_usage.py SERVICE_VARIATION_ID CUSTOMER_ID")
        sys.exit(2)
    configure_json_logging()
    try:
        asyncio.run(main(sys.argv[1], sys.argv[2]))
    except SquareError as e:
        print(f"❌ {type(e).__name__}: {e}")
        sys.exit(1)
