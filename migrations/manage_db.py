import logging
import argparse
from alembic.config import Config
from alembic import command

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def run_migration(args):
    """Run database migrations"""
    try:
        alembic_cfg = Config("alembic.ini")
        if args.downgrade:
            command.downgrade(alembic_cfg, args.revision)
        else:
            command.upgrade(alembic_cfg, args.revision)
        logger.info(f"Migration {'downgrade' if args.downgrade else 'upgrade'} completed")
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        raise

def create_migration(args):
    """Create a new migration"""
    try:
        alembic_cfg = Config("alembic.ini")
        command.revision(
            alembic_cfg,
            message=args.message,
            autogenerate=True
        )
        logger.info("Migration created successfully")
    except Exception as e:
        logger.error(f"Failed to create migration: {e}")
        raise

def main():
    parser = argparse.ArgumentParser(description="Database management commands")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    migrate_parser = subparsers.add_parser("migrate", help="Run migrations")
    migrate_parser.add_argument("--downgrade", action="store_true", help="Downgrade instead of upgrade")
    migrate_parser.add_argument("revision", nargs="?", default="head", help="Revision to migrate to")
    migrate_parser.set_defaults(func=run_migration)

    create_parser = subparsers.add_parser("create", help="Create a new migration")
    create_parser.add_argument("message", help="Migration message")
    create_parser.set_defaults(func=create_migration)

    args = parser.parse_args()
    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
