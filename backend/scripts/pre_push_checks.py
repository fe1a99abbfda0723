#!/usr/bin/env python3
"""
Pre-push / production readiness checks.
Run from backend dir with project venv active: python scripts/pre_push_checks.py
"""
import sys
from pathlib import Path

BACKEND = Path(__file__).resolve().parent.parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))


def check_imports():
    from app.main import app
    paths = {route.path for route in app.routes}
    for required in ("/api/auth/register", "/api/auth/login", "/api/ratings", "/api/store-owner/ratings/{store_id}"):
        assert required in paths, f"missing route {required}"
    return "imports"


def check_secret_key():
    from app.config import settings, DEFAULT_SECRET_KEY
    if settings.is_production:
        assert settings.secret_key != DEFAULT_SECRET_KEY, "SECRET_KEY is the default in production"
    return "secret_key"


def check_token_round_trip():
    from app.services.auth import create_access_token, decode_access_token
    claims = decode_access_token(create_access_token(1, "user"))
    assert claims.user_id == 1 and claims.role == "user"
    return "token_round_trip"


def check_init_db():
    from app.database import init_db
    init_db()
    return "init_db"


def main():
    checks = [check_imports, check_secret_key, check_token_round_trip, check_init_db]
    for fn in checks:
        try:
            name = fn()
            print(f"OK {name}")
        except Exception as e:
            print(f"FAIL {fn.__name__}: {e}")
            return 1
    print("All pre-push checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
