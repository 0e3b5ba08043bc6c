import logging
import os
import time

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from travel_ledger.api.routes.routes import router
from travel_ledger.infrastructure.db.models import Base
from travel_ledger.infrastructure.db.session import engine

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Travel Ledger")
app.include_router(router)


def wait_for_ledger_store(
    bind: Engine,
    max_retries: int,
    retry_delay_seconds: float,
) -> None:
    """Blocks until the ledger database answers, e.g. while its container boots."""
    for attempt in range(1, max_retries + 1):
        try:
            with bind.connect() as conn:
                conn.execute(text("SELECT 1"))
        except OperationalError:
            if attempt == max_retries:
                logger.exception(
                    "Ledger store unreachable after %s attempts; check DATABASE_URL",
                    max_retries,
                )
                raise
            logger.warning(
                "Ledger store not ready (%s/%s), next attempt in %.1fs",
                attempt,
                max_retries,
                retry_delay_seconds,
            )
            time.sleep(retry_delay_seconds)
        else:
            logger.info("Ledger store reachable at %s", bind.url.render_as_string())
            return


@app.on_event("startup")
def on_startup() -> None:
    wait_for_ledger_store(
        engine,
        max_retries=int(os.getenv("DB_CONNECT_MAX_RETRIES", "30")),
        retry_delay_seconds=float(os.getenv("DB_CONNECT_RETRY_DELAY", "1.5")),
    )
    Base.metadata.create_all(bind=engine)
