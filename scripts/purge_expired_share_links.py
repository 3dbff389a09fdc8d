"""
Delete tracking share links whose ttl (epoch seconds) has passed.

Expired links are already refused on resolve; this only reclaims rows.
Run from project root: python -m scripts.purge_expired_share_links
Schedule it (cron / EventBridge) every hour or so.
"""
import logging
import sys
import time

# Add project root so app imports work
sys.path.insert(0, ".")

from sqlalchemy.exc import SQLAlchemyError

from app.core.database import SessionLocal
from app.crud import share_link_crud

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_purge(now_epoch: int = None) -> int:
    now_epoch = int(time.time()) if now_epoch is None else now_epoch
    db = SessionLocal()
    try:
        deleted = share_link_crud.purge_expired(db, now_epoch=now_epoch)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Purge failed: %s", e)
        raise
    finally:
        db.close()
    logger.info("Purged %s expired share links (ttl <= %s)", deleted, now_epoch)
    return deleted


if __name__ == "__main__":
    try:
        run_purge()
    except SQLAlchemyError:
        sys.exit(1)
