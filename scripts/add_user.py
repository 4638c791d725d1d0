import argparse

from sqlalchemy.exc import IntegrityError

from app.database import SessionLocal
from app.models import User


def create_user(
    username: str,
    email: str | None = None,
    firstname: str = "",
    lastname: str = "",
    status: str = "ACTIVE",
) -> None:
    with SessionLocal() as session:
        existing = session.query(User).filter(User.username == username).first()
        if existing:
            print(f"User already exists: {existing.uuid} ({existing.username})")
            return

        user = User(
            username=username,
            email=email,
            firstname=firstname,
            lastname=lastname,
            status=status,
        )
        session.add(user)

        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise RuntimeError(f"Failed to create user due to integrity error: {exc}") from exc

        session.refresh(user)
        print(f"Created user {user.uuid} ({user.username})")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a user that can be assigned to requests.")
    parser.add_argument("--username", required=True, help="Login name of the user")
    parser.add_argument("--email", help="Optional email for the new user")
    parser.add_argument("--firstname", default="", help="Given name shown in task lists")
    parser.add_argument("--lastname", default="", help="Family name shown in task lists")
    parser.add_argument(
        "--status",
        default="ACTIVE",
        choices=["ACTIVE", "INACTIVE"],
        help="Optional status for the user",
    )

    args = parser.parse_args()
    create_user(
        username=args.username,
        email=args.email,
        firstname=args.firstname,
        lastname=args.lastname,
        status=args.status,
    )


if __name__ == "__main__":
    main()
