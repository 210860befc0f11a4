"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [role] [--full-name NAME] [--email EMAIL] [--mobile NUM]
Example:
  python -m app.scripts.create_user admin your-secure-password Admin
"""
import argparse
import logging
import sys

from app.core.database import session_scope
from app.models import UserRole
from app.schemas.users import CreateUserRequest
from app.services.user_store import SqlUserStore
from app.services.users import UserNameTakenError, UserService, UserValidationError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a user without going through the API.")
    parser.add_argument("username", help="User name (1-100 chars)")
    parser.add_argument("password", help="Password")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.READ_ONLY.value,
        choices=[r.value for r in UserRole],
    )
    parser.add_argument("--full-name", default="", help="Full name (defaults to username)")
    parser.add_argument("--email", default="", help="Email address")
    parser.add_argument("--mobile", default="", help="Mobile number")
    args = parser.parse_args()

    username = args.username.strip()
    if not username or len(username) > 100:
        print("Invalid username length.", file=sys.stderr)
        return 1

    request = CreateUserRequest(
        user_name=username,
        password=args.password,
        full_name=args.full_name or username,
        role=args.role,
        email_id=args.email,
        mobile_num=args.mobile,
    )
    try:
        with session_scope() as db:
            created = UserService(SqlUserStore(db)).create(request)
    except (UserValidationError, UserNameTakenError) as e:
        print(e.message, file=sys.stderr)
        return 1
    logger.info("Created user '%s' (id=%s) with role '%s'.", created.user_name, created.id, created.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
