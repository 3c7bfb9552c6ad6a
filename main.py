"""Command line entry point for the WorkSphere backend."""

import argparse
import logging
import sys

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

from config import settings
from core.context import build_context
from database import count_accounts, count_jobs, set_all_companies_active
from identity.credentials import ensure_admin


def setup_logging(verbose: bool = False):
    """Configure logging level."""
    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.getLogger().setLevel(level)
    if verbose:
        logger.info("Verbose logging enabled")


def print_summary(ctx):
    """Print record counts."""
    print("\n" + "=" * 50)
    print("WORKSPHERE SUMMARY")
    print("=" * 50)
    print(f"Users:     {count_accounts(ctx.db, 'user')}")
    print(f"Companies: {count_accounts(ctx.db, 'company')}")
    print(f"Jobs:      {count_jobs(ctx.db)}")
    print("=" * 50 + "\n")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="WorkSphere backend - job board API server and maintenance tasks"
    )
    parser.add_argument(
        '--init-db',
        action='store_true',
        help='Create database tables and indexes'
    )
    parser.add_argument(
        '--seed-admin',
        action='store_true',
        help='Create the seed admin account if it does not exist'
    )
    parser.add_argument(
        '--activate-companies',
        action='store_true',
        help='Mark every company account active'
    )
    parser.add_argument(
        '--web',
        action='store_true',
        help='Start the API server'
    )
    parser.add_argument(
        '--host',
        type=str,
        default='127.0.0.1',
        help='Host for web server (default: 127.0.0.1)'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=5000,
        help='Port for web server (default: 5000)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable detailed logging'
    )

    args = parser.parse_args()
    setup_logging(args.verbose or settings.VERBOSE)

    # Building the context creates the schema
    try:
        ctx = build_context(settings)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        sys.exit(1)

    if args.init_db:
        logger.info(f"Database ready at {ctx.db.path}")

    if args.seed_admin:
        if ensure_admin(ctx, settings.ADMIN_SEED_EMAIL, settings.ADMIN_SEED_PASSWORD):
            logger.info(f"Seed admin {settings.ADMIN_SEED_EMAIL} created")

    if args.activate_companies:
        updated = set_all_companies_active(ctx.db)
        logger.info(f"Activated {updated} companies")

    if args.web:
        from webapp.app import run_web_server
        run_web_server(host=args.host, port=args.port, debug=args.verbose, context=ctx)
    else:
        print_summary(ctx)
        ctx.close()


if __name__ == "__main__":
    main()
