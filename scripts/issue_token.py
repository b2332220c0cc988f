"""Mint a signed bearer token for local use.

    python scripts/issue_token.py <user_id> [--email someone@example.com] [--no-admin] [--hours 12]

Tokens carry the admin claim unless --no-admin is given; without it every
resident / medical-record endpoint answers 403.
"""
import argparse
import os
import sys
from datetime import datetime, timedelta, timezone
from jose import jwt

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.core.config import settings

def issue_token(user_id: str, email: str | None = None, admin: bool = True, hours: int = 12) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=hours)).timestamp()),
        settings.ADMIN_CLAIM: admin,
    }
    if email:
        claims["email"] = email
    if settings.REQUIRED_AUDIENCE:
        claims["aud"] = settings.REQUIRED_AUDIENCE
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

def main():
    parser = argparse.ArgumentParser(description="Issue a bearer token for the care EMR API")
    parser.add_argument("user_id")
    parser.add_argument("--email")
    parser.add_argument("--no-admin", action="store_true")
    parser.add_argument("--hours", type=int, default=12)
    args = parser.parse_args()
    print(issue_token(args.user_id, email=args.email, admin=not args.no_admin, hours=args.hours))

if __name__ == "__main__":
    main()
