"""Database initialization script with optional demo data."""

import argparse
from decimal import Decimal

from sqlalchemy.orm import Session

from portfolio_tracker.constants import InstrumentType
from portfolio_tracker.database import Base, SessionLocal, engine
from portfolio_tracker.models import Holding

DEMO_HOLDINGS = [
    ("TCS", "Tata Consultancy Services", InstrumentType.STOCK, "10", "3000", "IT"),
    ("INFY", "Infosys", InstrumentType.STOCK, "25", "1450", "IT"),
    ("HDFCBANK", "HDFC Bank", InstrumentType.STOCK, "20", "1600", "Banking"),
    ("NIFTYBEES", "Nippon India ETF Nifty BeES", InstrumentType.ETF, "100", "240", "Index"),
    ("PPFAS-FLEXI", "Parag Parikh Flexi Cap Fund", InstrumentType.MUTUAL_FUND, "150", "65", None),
    ("SGB-2031", "Sovereign Gold Bond 2031", InstrumentType.DEBT, "5", "6100", "Gold"),
]


def create_tables():
    """Create all database tables."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")


def seed_data(db: Session, user_id: str):
    """Seed the database with a demo portfolio for one user."""
    print(f"\nSeeding demo holdings for user {user_id}...")
    for symbol, name, asset_type, quantity, buy_price, sector in DEMO_HOLDINGS:
        db.add(
            Holding(
                user_id=user_id,
                symbol=symbol,
                name=name,
                asset_type=asset_type,
                quantity=Decimal(quantity),
                buy_price=Decimal(buy_price),
                current_price=Decimal(buy_price),
                sector=sector,
            )
        )
    db.commit()
    print(f"Created {len(DEMO_HOLDINGS)} holdings")


def main():
    parser = argparse.ArgumentParser(description="Create tables and optionally seed demo data")
    parser.add_argument("--seed-user", help="User id to own the demo holdings")
    args = parser.parse_args()

    create_tables()
    if args.seed_user:
        db = SessionLocal()
        try:
            seed_data(db, args.seed_user)
        finally:
            db.close()


if __name__ == "__main__":
    main()
