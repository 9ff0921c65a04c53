"""CLI for OrderDesk database setup and technician maintenance."""

from __future__ import annotations

import argparse
import asyncio
import sys


async def cmd_init_db(args):
    """Create all tables."""
    from orderdesk.db.engine import create_all, engine

    await create_all()
    await engine.dispose()
    print("Database initialised")


async def cmd_add_technician(args):
    """Register a technician profile."""
    from orderdesk.db import crud
    from orderdesk.db.engine import async_session_factory, create_all, engine
    from orderdesk.services.auth import ROLES

    if args.role not in ROLES:
        print(f"Role must be one of: {', '.join(ROLES)}")
        sys.exit(1)

    await create_all()
    async with async_session_factory() as db:
        tech = await crud.create_technician(
            db, full_name=args.name, tech_code=args.code, email=args.email, role=args.role,
        )
    await engine.dispose()

    print(f"Technician created: {tech.full_name} ({tech.tech_code or 'no code'})")
    print(f"  id={tech.id} role={tech.role}")


async def cmd_completed_today(args):
    """Print a technician's completed-today count."""
    from orderdesk.db import crud
    from orderdesk.db.engine import async_session_factory, engine
    from orderdesk.services.productivity import count_completed_today

    async with async_session_factory() as db:
        tech = await crud.get_technician(db, args.technician)
        if not tech:
            print(f"Technician not found: {args.technician}")
            sys.exit(1)
        count = await count_completed_today(db, tech.id)
    await engine.dispose()

    print(f"{tech.full_name}: {count} completed today")


def main():
    from orderdesk.main import configure_logging

    configure_logging()

    parser = argparse.ArgumentParser(description="OrderDesk CLI")
    subparsers = parser.add_subparsers(dest="command")

    # init-db
    subparsers.add_parser("init-db", help="Create database tables")

    # add-technician
    at = subparsers.add_parser("add-technician", help="Register a technician profile")
    at.add_argument("--name", required=True, help="Full name")
    at.add_argument("--code", default="", help="Badge / tech id, e.g. T-104")
    at.add_argument("--email", default="", help="Email address")
    at.add_argument("--role", default="tech", help="tech | qa_tech | packer | admin")

    # completed-today
    ct = subparsers.add_parser("completed-today", help="Show a technician's completed-today count")
    ct.add_argument("--technician", required=True, help="Technician id")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "add-technician":
        asyncio.run(cmd_add_technician(args))
    elif args.command == "completed-today":
        asyncio.run(cmd_completed_today(args))


if __name__ == "__main__":
    main()
