"""
Weekly Rebalance Check DAG

Runs the rule-based rebalance check over every user's portfolio and logs
which users have recommendations.

Schedule: Mondays 03:30 UTC (09:00 IST, before market open)
"""

import logging
from datetime import datetime, timedelta

import requests
from airflow.sdk import dag, task

from auth_helper import BACKEND_URL, get_service_headers

logger = logging.getLogger(__name__)

default_args = {
    "owner": "portfolio_tracker",
    "depends_on_past": False,
    "email_on_failure": False,
    "email_on_retry": False,
    "retries": 1,
    "retry_delay": timedelta(minutes=5),
}


@dag(
    dag_id="weekly_rebalance_check",
    default_args=default_args,
    description="Check every portfolio against the rebalancing rules",
    schedule="30 3 * * 1",
    start_date=datetime(2026, 1, 1),
    catchup=False,
    tags=["portfolio", "rebalance", "weekly"],
)
def weekly_rebalance_check():
    """DAG to flag concentrated or under-diversified portfolios."""

    @task(task_id="check_portfolios")
    def check_portfolios() -> dict[str, int | str]:
        response = requests.post(
            f"{BACKEND_URL}/api/portfolio/rebalance-check",
            headers=get_service_headers(),
            timeout=120,
        )
        response.raise_for_status()
        data = response.json()

        for report in data.get("reports", []):
            logger.info(
                "User %s...: %s",
                report["user_id"][:8],
                "; ".join(report["recommendations"]),
            )
        if data.get("ai_summary"):
            logger.info("AI summary: %s", data["ai_summary"])
        logger.info(
            "Rebalance check complete: %d of %d users flagged",
            data.get("users_flagged", 0),
            data.get("users_checked", 0),
        )
        return {
            "status": "success",
            "users_checked": data.get("users_checked", 0),
            "users_flagged": data.get("users_flagged", 0),
        }

    check_portfolios()


# Instantiate the DAG
dag_instance = weekly_rebalance_check()
