import argparse
from datetime import datetime, timedelta, timezone

from app.database import SessionLocal
from app.services.canceled_list_retention import purge_canceled_before


def _parse_cutoff(args: argparse.Namespace) -> datetime:
    if args.before:
        cutoff = datetime.fromisoformat(args.before)
        if cutoff.tzinfo is None:
            cutoff = cutoff.replace(tzinfo=timezone.utc)
        return cutoff
    return datetime.now(timezone.utc) - timedelta(days=args.days)


def main() -> None:
    parser = argparse.ArgumentParser(description="Delete old rows from the LIST_CANCELED table.")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--days", type=int, help="Delete rows canceled more than this many days ago")
    group.add_argument("--before", help="Delete rows canceled before this ISO timestamp (UTC if naive)")
    parser.add_argument("--dry-run", action="store_true", help="Roll back instead of committing")

    args = parser.parse_args()
    if args.days is not None and args.days < 0:
        parser.error("--days must not be negative")
    cutoff = _parse_cutoff(args)

    with SessionLocal() as session:
        deleted = purge_canceled_before(session, cutoff)
        if args.dry_run:
            session.rollback()
            print(f"Would delete {deleted} canceled request(s) before {cutoff.isoformat()}")
            return
        session.commit()
    print(f"Deleted {deleted} canceled request(s) before {cutoff.isoformat()}")


if __name__ == "__main__":
    main()
