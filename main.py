#!/usr/bin/env python3
"""
BarberDesk -- session relay and service catalogue for barbershops.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --reload

Environment variables (or .env):
  SUPABASE_URL                Project URL, e.g. https://xyz.supabase.co
  SUPABASE_ANON_KEY           Public anon key
  SUPABASE_SERVICE_ROLE_KEY   Service role key (user registration, sign-out)
  DEBUG                       true to start without a Supabase project
  SECURE_COOKIES              false to allow session cookies over plain http
"""

import argparse

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the BarberDesk web server.")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    args = parser.parse_args()

    # Import string, not the app object: --reload needs to re-import it.
    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload, proxy_headers=True)


if __name__ == "__main__":
    main()
