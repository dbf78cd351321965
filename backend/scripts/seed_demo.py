from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import date, time
from pathlib import Path

# Ensure the backend project root (the directory containing the "eventscale"
# package) is on sys.path so this script can be executed from the repo root or backend/.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from eventscale.core.database import AsyncSessionLocal, create_tables
from eventscale.models import Church, Member
from eventscale.services.checklist_tracker import ChecklistTracker
from eventscale.services.db_service import DBService
from eventscale.services.messaging import build_chat_deep_link, build_confirmation_url, compose_scale_message
from eventscale.services.scale_manager import ScaleManager


async def seed(church_name: str, event_date: date) -> None:
    """Create a church with two members, a service, its checklist and scale.

    Prints the confirmation links an operator would send out.
    """
    await create_tables()

    async with AsyncSessionLocal() as session:
        church = Church(name=church_name)
        session.add(church)
        await session.commit()

        ana = Member(church_id=church.id, name="Ana Souza", phone="(91) 99383-7093")
        bruno = Member(church_id=church.id, name="Bruno Lima", phone="+55 91 98888-1234")
        session.add_all([ana, bruno])
        await session.commit()

        db_service = DBService(session)
        event = await db_service.create_event(
            {
                "title": "Sunday Service",
                "type": "service",
                "date": event_date,
                "time": time(19, 0),
                "location": "Main Temple",
            },
            church.id,
        )
        await ChecklistTracker(db_service).apply_template(event.id, "service", church.id)

        manager = ScaleManager(db_service)
        results = await manager.add_entries_bulk(
            event.id,
            [(ana.id, "Sound"), (bruno.id, "Guest")],
            church.id,
        )

        links = []
        for result, member in zip(results, (ana, bruno)):
            if not result.ok:
                links.append({"member": member.name, "error": result.error})
                continue
            url = build_confirmation_url(result.entry.public_token)
            message = compose_scale_message(event, result.entry.role, member.name, url)
            links.append({
                "member": member.name,
                "role": result.entry.role,
                "confirmation_url": url,
                "chat_link": build_chat_deep_link(member.phone, message),
            })

    print(json.dumps({
        "church_id": str(church.id),
        "event_id": str(event.id),
        "links": links,
    }, indent=2))


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed a demo church with an event and scale.")
    parser.add_argument("--church-name", default="Demo Church", help="Name of the church to create")
    parser.add_argument(
        "--date",
        default=date.today().isoformat(),
        help="Event date (YYYY-MM-DD)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    asyncio.run(seed(args.church_name, date.fromisoformat(args.date)))


if __name__ == "__main__":
    main()
