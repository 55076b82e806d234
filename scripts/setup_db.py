"""
Database initialization script for WardShift.

Creates the schema and, optionally, the development accounts.
"""
import sys
import logging
from pathlib import Path

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def setup_database(seed: bool = True):
    """Initialize database with schema."""
    print("\nInitializing WardShift Database...")
    print("=" * 60)

    try:
        from wardshift.db.connection import init_db, get_db, get_session_factory
        from wardshift.core.config import Config
        from wardshift.services.auth import AuthService

        db_url = Config.DATABASE_URL
        print(f"Database URL: {db_url}")

        init_db(db_url)
        print("Database schema created successfully")

        # Test connection
        db = get_db()
        print("Database connection verified")
        db.close()

        if seed:
            created = AuthService(get_session_factory()).seed_demo_accounts()
            print(f"Demo accounts created: {created}")

        # Show database info
        if db_url.startswith('sqlite'):
            db_file = db_url.replace('sqlite:///', '')
            db_path = Path(db_file).resolve()
            print(f"\nSQLite Database: {db_path}")
            if db_path.exists():
                size = db_path.stat().st_size
                print(f"   Size: {size:,} bytes")

        print("\nDatabase ready!")
        print("=" * 60)

        return True

    except Exception as e:
        logger.exception(f"Database initialization failed: {e}")
        return False


if __name__ == "__main__":
    success = setup_database(seed="--no-seed" not in sys.argv)
    sys.exit(0 if success else 1)
