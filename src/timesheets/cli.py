from __future__ import annotations

import argparse
import asyncio

import timesheets.db as db
from timesheets.seed_data import PREDEFINED_PHASES
from timesheets.services import create_user, seed_work_phases


async def _init_db() -> None:
    await db.create_schema(db.engine)
    print("Database tables created")


async def _seed_phases() -> None:
    async with db.SessionMaker() as session:
        added = await seed_work_phases(session, PREDEFINED_PHASES)

    skipped = len(PREDEFINED_PHASES) - added
    print(f"Added {added} work phases; skipped {skipped} existing")


async def _create_user(full_name: str, access_code: str | None, is_admin: bool) -> None:
    async with db.SessionMaker() as session:
        try:
            user = await create_user(
                session,
                full_name=full_name,
                access_code=access_code,
                is_admin=is_admin,
            )
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc

    role = "admin" if user.is_admin else "employee"
    print(f"Created {role} {user.full_name!r} with access code {user.access_code!r}")


def main() -> None:
    parser = argparse.ArgumentParser(prog="timesheets")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("init-db")
    sub.add_parser("seed-phases")
    create = sub.add_parser("create-user")
    create.add_argument("full_name")
    create.add_argument("--code", dest="access_code", default=None)
    create.add_argument("--admin", action="store_true")

    args = parser.parse_args()

    if args.cmd == "init-db":
        asyncio.run(_init_db())
    elif args.cmd == "seed-phases":
        asyncio.run(_seed_phases())
    elif args.cmd == "create-user":
        asyncio.run(_create_user(args.full_name, args.access_code, args.admin))
    else:
        raise SystemExit(2)
