"""
Create the initial Head HR account.

Reads HEAD_HR_EMAIL / HEAD_HR_PASSWORD / HEAD_HR_NAME from the environment
(or .env). Does nothing if an account with that email already exists.

Run this script from the project root after "alembic upgrade head":
    python create_head_hr.py
"""

import logging

from recruitflow.core.config import settings
from recruitflow.core.database import SessionLocal
from recruitflow.core.logging_config import setup_logging
from recruitflow.crud import user as user_crud

logger = logging.getLogger(__name__)


def main():
    setup_logging(settings.LOG_LEVEL, json_logs=False)

    db = SessionLocal()
    try:
        user = user_crud.ensure_head_hr(
            db,
            email=settings.HEAD_HR_EMAIL,
            password=settings.HEAD_HR_PASSWORD,
            name=settings.HEAD_HR_NAME,
        )
        logger.info(f"Head HR account ready: {user.email} (id={user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
