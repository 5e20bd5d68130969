#!/usr/bin/env python3
"""
Startup script for the fleet dashboard backend.

Creates any missing tables, optionally seeds the demo site, then serves
the API with uvicorn.

Usage:
    # Run on the configured HOST/PORT (default 0.0.0.0:3001)
    python run_server.py

    # Seed demo data first
    python run_server.py --seed

    # Run with reload for development
    python run_server.py --port 3002 --reload
"""

import argparse

from dotenv import load_dotenv


def main():
    load_dotenv()

    # Imported after load_dotenv so .env values reach config.py
    from fleet_dashboard.config import HOST, PORT

    parser = argparse.ArgumentParser(description="Run the fleet dashboard backend")
    parser.add_argument(
        "--host",
        default=HOST,
        help=f"Host to bind to (default: {HOST})",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=PORT,
        help=f"Port to run on (default: {PORT})",
    )
    parser.add_argument(
        "--reload",
        "-r",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed demo vehicles, POIs, materials and chat before starting",
    )
    args = parser.parse_args()

    import uvicorn
    from fleet_dashboard.db import SessionLocal, init_db
    from fleet_dashboard.seed import seed_site

    init_db()
    if args.seed:
        db = SessionLocal()
        try:
            counts = seed_site(db)
        finally:
            db.close()
        print(f"Seeded: {counts}")

    print(f"Starting fleet dashboard on {args.host}:{args.port}")
    uvicorn.run(
        "fleet_dashboard.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
