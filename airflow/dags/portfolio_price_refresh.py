"""
Portfolio Price Refresh DAG

Writes the latest NSE prices onto every user's stock and ETF holdings by
calling the backend refresh endpoint. Mutual funds and debt keep their
manually entered prices.

Schedule: Every 15 minutes
- Mon-Fri: Full refresh
- Sat-Sun: Skipped (exchange closed)
"""

import logging
from datetime import UTC, datetime, timedelta

import requests
from airflow.sdk import dag, task

from auth_helper import BACKEND_URL, get_service_headers

logger = logging.getLogger(__name__)

default_args = {
    "owner": "portfolio_tracker",
    "depends_on_past": False,
    "email_on_failure": False,
    "email_on_retry": False,
    "retries": 2,
    "retry_delay": timedelta(minutes=2),
}


@dag(
    dag_id="portfolio_price_refresh",
    default_args=default_args,
    description="Refresh stock and ETF holding prices every 15 minutes",
    schedule="*/15 * * * *",
    start_date=datetime(2026, 1, 1),
    catchup=False,
    max_active_runs=1,
    tags=["portfolio", "prices", "intraday"],
)
def portfolio_price_refresh():
    """DAG to keep holding prices current for the portfolio view."""

    @task(task_id="should_run_this_cycle")
    def should_run_this_cycle() -> dict[str, bool | str]:
        """Skip weekends, when NSE prices do not move."""
        now_utc = datetime.now(UTC)
        is_weekend = now_utc.weekday() >= 5  # Sat=5, Sun=6
        reason = "weekend" if is_weekend else "weekday"

        logger.info("Price refresh check: is_weekend=%s, reason=%s", is_weekend, reason)
        return {"should_run": not is_weekend, "reason": reason}

    @task(task_id="refresh_prices")
    def refresh_prices(run_status: dict[str, bool | str]) -> dict[str, int | str]:
        """
        Call backend API to refresh every user's holding prices.

        Args:
            run_status: Dict with should_run flag and reason

        Returns:
            Result dict with status and statistics
        """
        if not run_status.get("should_run", True):
            logger.info("Skipping price refresh: %s", run_status.get("reason"))
            return {"status": "skipped", "reason": run_status.get("reason", "unknown")}

        try:
            logger.info("Starting holding price refresh via backend API")

            response = requests.post(
                f"{BACKEND_URL}/api/prices/refresh-all",
                headers=get_service_headers(),
                timeout=120,  # 2 minute timeout
            )

            if response.status_code == 200:
                data = response.json()
                logger.info(
                    "Price refresh complete: %d holdings updated, %d failed, %d symbols",
                    data.get("holdings_updated", 0),
                    len(data.get("errors", [])),
                    data.get("symbols_processed", 0),
                )
                return {
                    "status": "success",
                    "updated": data.get("holdings_updated", 0),
                    "failed": len(data.get("errors", [])),
                    "symbols": data.get("symbols_processed", 0),
                }

            error_msg = response.text[:200]  # Truncate long errors
            logger.error("Price refresh API error: %d - %s", response.status_code, error_msg)
            return {"status": "failed", "error": f"HTTP {response.status_code}: {error_msg}"}

        except requests.Timeout:
            logger.exception("Price refresh timed out")
            return {"status": "failed", "error": "Request timed out after 120s"}
        except requests.RequestException as e:
            logger.exception("Network error during price refresh")
            return {"status": "failed", "error": str(e)}

    # Task flow
    run_status = should_run_this_cycle()
    refresh_prices(run_status)


# Instantiate the DAG
dag_instance = portfolio_price_refresh()
