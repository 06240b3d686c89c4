"""CLI for Golf Fleet Desk: bootstrap an admin, seed demo data, print QR labels."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

from fastapi import HTTPException

DEMO_COURSES = [
    {"name": "Wembley Golf Course", "contact_name": "Pro Shop", "phone": "08 9484 2500"},
    {"name": "Collier Park Golf Course", "contact_name": "Pro Shop", "phone": "08 9484 3000"},
]
DEMO_LOCATIONS = ["Wangara", "Wembley Downs", "Greenwood"]


def _cli_context():
    from app.services.auth import AuthContext

    return AuthContext(user_id="cli", email="", full_name="CLI", role="admin", course_id=None)


async def cmd_create_admin(args):
    """Create an admin account (same rules as the bootstrap endpoint)."""
    from app.db.engine import async_session_factory, create_all
    from app.services.admin_bootstrap import create_admin

    await create_all()

    password = args.password
    if not password:
        password = getpass.getpass("Admin password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match")
            sys.exit(1)

    async with async_session_factory() as db:
        try:
            admin = await create_admin(db, args.email, password, args.full_name or "")
        except HTTPException as e:
            print(f"Error: {e.detail}")
            sys.exit(1)

    print(f"Admin user: {admin.email} (id={admin.id})")


async def cmd_seed_demo(args):
    """Seed courses, off-site locations and a handful of assets."""
    from app.db import crud
    from app.db.engine import async_session_factory, create_all

    await create_all()
    auth = _cli_context()

    async with async_session_factory() as db:
        existing = {loc.name for loc, _ in await crud.list_locations(db, auth)}
        for name in DEMO_LOCATIONS:
            if name not in existing:
                await crud.create_location(db, auth, name)
                print(f"  Location: {name}")

        courses = {c.name: c for c, _, _ in await crud.list_courses(db, auth)}
        for data in DEMO_COURSES:
            if data["name"] not in courses:
                courses[data["name"]] = await crud.create_course(db, auth, **data)
                print(f"  Course: {data['name']}")

        if await crud.list_assets(db, auth):
            print("Assets already present, skipping asset seed")
            return

        n = 1
        for course in courses.values():
            for _ in range(3):
                await crud.create_asset(
                    db, auth,
                    name=f"Trike {n:02d}", asset_tag=f"GC-{n:03d}",
                    asset_type="trike", course_id=course.id,
                )
                n += 1
        await crud.create_asset(
            db, auth,
            name="Scooter 01", asset_tag="GC-S01",
            asset_type="scooter", location=DEMO_LOCATIONS[0],
        )
        print(f"  Assets: {n}")

    print("Demo data seeded")


async def cmd_qr(args):
    """Write an asset's printable QR label to a PNG file."""
    from app.db import crud
    from app.db.engine import async_session_factory
    from app.services.qr_codes import asset_qr_png, qr_filename

    async with async_session_factory() as db:
        try:
            asset = await crud.get_asset(db, _cli_context(), args.asset_id)
        except HTTPException as e:
            print(f"Error: {e.detail}")
            sys.exit(1)

    out = Path(args.out) if args.out else Path(qr_filename(asset.name))
    out.write_bytes(asset_qr_png(asset, base_url=args.base_url or None))
    print(f"QR label for {asset.name} written to {out}")


def main():
    parser = argparse.ArgumentParser(description="Golf Fleet Desk CLI")
    subparsers = parser.add_subparsers(dest="command")

    # create-admin
    ca = subparsers.add_parser("create-admin", help="Create an admin account")
    ca.add_argument("--email", required=True, help="Admin email")
    ca.add_argument("--password", default="", help="Admin password (prompted if not given)")
    ca.add_argument("--full-name", default="", help="Admin full name")

    # seed-demo
    subparsers.add_parser("seed-demo", help="Seed demo courses, locations and assets")

    # qr
    qr = subparsers.add_parser("qr", help="Write an asset's QR label PNG")
    qr.add_argument("--asset-id", required=True, help="Asset id")
    qr.add_argument("--out", default="", help="Output path (defaults to qr-<name>.png)")
    qr.add_argument("--base-url", default="", help="App URL to encode (defaults to app_url)")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    from app.config import get_settings
    from app.logging_config import setup_logging
    setup_logging(get_settings().log_level)

    if args.command == "create-admin":
        asyncio.run(cmd_create_admin(args))
    elif args.command == "seed-demo":
        asyncio.run(cmd_seed_demo(args))
    elif args.command == "qr":
        asyncio.run(cmd_qr(args))


if __name__ == "__main__":
    main()
