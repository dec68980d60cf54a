import logging
import os

from sqlalchemy.orm import Session

from edura_finance.app.core.constants import ROLE_MANAGER
from edura_finance.app.core.security import get_password_hash
from edura_finance.app.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_DEV_PASSWORD = "Secret123!"
DEFAULT_DEV_MANAGERS = [
    "manager@test.com",
]


def ensure_default_dev_manager(db: Session) -> None:
    """
    Create a default manager account for local development if it does not exist.
    Skips execution when running under pytest to avoid altering test expectations.
    """
    if os.getenv("PYTEST_CURRENT_TEST"):
        return

    created = False
    for email in DEFAULT_DEV_MANAGERS:
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            continue

        user = User(
            email=email,
            hashed_password=get_password_hash(DEFAULT_DEV_PASSWORD),
            role=ROLE_MANAGER,
            is_active=True,
        )
        db.add(user)
        created = True

    if created:
        db.commit()
        logger.info("Seeded default development manager account(s)")
