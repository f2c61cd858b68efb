import os
import sys
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.jsonfmt.models import User  # noqa: E402


def seed_only(*, database_url: str | None = None) -> str:
    """
    Ensure the development user exists (idempotent) and return its id.
    Sign-in itself belongs to the external auth provider; this row only gives
    local sessions a user id to point at.
    """
    email = (os.environ.get("DEV_USER_EMAIL") or "dev@jsonfmt.local").strip().lower()
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///jsonfmt.db").strip()

    engine = create_engine(db_url, future=True, pool_pre_ping=True)
    try:
        with Session(engine, expire_on_commit=False) as s, s.begin():
            user = s.query(User).filter(User.email == email).one_or_none()
            if not user:
                user = User(email=email, is_active=True)
                s.add(user)
                s.flush()
            user_id = user.id
    finally:
        engine.dispose()

    print("Initialized database (seed_only).")
    print(f"Dev user email: {email}")
    print(f"Dev user id: {user_id}")
    return user_id


def main() -> None:
    seed_only(database_url=None)


if __name__ == "__main__":
    main()
