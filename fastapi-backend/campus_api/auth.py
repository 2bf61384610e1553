from typing import Optional
import logging

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from .config import get_settings
from .errors import BadRequestError, ConflictError, UnauthorizedError
from .models import Account, AccountKind

logger = logging.getLogger("campus_api.auth")

# pbkdf2_sha256 is salted and needs no C-extension, unlike bcrypt.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


async def _find_account(session: AsyncSession, kind: AccountKind, **criteria) -> Optional[Account]:
    statement = select(Account).where(Account.kind == kind.value)
    for column, value in criteria.items():
        statement = statement.where(getattr(Account, column) == value)
    result = await session.exec(statement)
    return result.first()


async def signup(
    session: AsyncSession,
    kind: AccountKind,
    username: str,
    email: str,
    password: str,
) -> Account:
    """Create an account of the given kind with a hashed password.

    Email is checked before username so the conflict message names the email
    when both are taken. No session or token is issued.
    """
    # Sequential lookups instead of an OR clause keep the message deterministic.
    if await _find_account(session, kind, email=email):
        raise ConflictError("Email already registered")
    if await _find_account(session, kind, username=username):
        raise ConflictError("Username already taken")

    account = Account(
        kind=kind.value,
        username=username,
        email=email,
        password_hash=get_password_hash(password),
    )
    session.add(account)
    try:
        await session.commit()
    except IntegrityError as exc:
        # A concurrent signup won the race between our lookup and insert.
        await session.rollback()
        raise ConflictError("Username or email already registered") from exc
    await session.refresh(account)
    logger.info("Created %s account %s", kind.value, account.username)
    return account


async def login(session: AsyncSession, kind: AccountKind, username: str, password: str) -> Account:
    account = await _find_account(session, kind, username=username)
    if not account:
        logger.info("Rejected %s login for unknown username %s", kind.value, username)
        raise UnauthorizedError("Invalid username")
    if not verify_password(password, account.password_hash):
        logger.info("Rejected %s login for %s: bad password", kind.value, username)
        raise UnauthorizedError("Invalid password")
    return account


async def signup_user(session: AsyncSession, username: str, email: str, password: str) -> Account:
    return await signup(session, AccountKind.USER, username, email, password)


async def login_user(session: AsyncSession, username: str, password: str) -> Account:
    return await login(session, AccountKind.USER, username, password)


async def signup_admin(
    session: AsyncSession,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> Account:
    """Admin signup: every field required and the email must carry the admin domain."""
    if not username or not email or not password:
        raise BadRequestError("All fields are required")

    domain = get_settings().admin_email_domain
    if not email.endswith(domain):
        raise BadRequestError(f"Email must end with {domain}")

    return await signup(session, AccountKind.ADMIN, username, email, password)


async def login_admin(session: AsyncSession, username: str, password: str) -> Account:
    return await login(session, AccountKind.ADMIN, username, password)
