import pytest
from sqlmodel import select

from campus_api import auth
from campus_api.errors import ConflictError, UnauthorizedError
from campus_api.models import Account, AccountKind


async def _signup(client, path, username, email, password="s3cret!"):
    return await client.post(path, json={"username": username, "email": email, "password": password})


@pytest.mark.asyncio
async def test_user_signup_and_login(client):
    resp = await _signup(client, "/user/signup", "asha", "asha@campus.edu")
    assert resp.status_code == 201, resp.text
    assert resp.json() == {"message": "User signup successful!"}

    resp = await client.post("/user/login", json={"username": "asha", "password": "s3cret!"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["message"] == "Login successful!"


@pytest.mark.asyncio
async def test_user_signup_duplicate_email(client):
    await _signup(client, "/user/signup", "asha", "asha@campus.edu")
    resp = await _signup(client, "/user/signup", "asha2", "asha@campus.edu")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
async def test_user_signup_duplicate_username(client):
    await _signup(client, "/user/signup", "asha", "asha@campus.edu")
    resp = await _signup(client, "/user/signup", "asha", "other@campus.edu")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Username already taken"


@pytest.mark.asyncio
async def test_email_conflict_reported_before_username(client):
    await _signup(client, "/user/signup", "asha", "asha@campus.edu")
    await _signup(client, "/user/signup", "bala", "bala@campus.edu")
    # username belongs to one account, email to another
    resp = await _signup(client, "/user/signup", "asha", "bala@campus.edu")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
async def test_login_distinguishes_unknown_user_from_bad_password(client):
    await _signup(client, "/user/signup", "asha", "asha@campus.edu")

    unknown = await client.post("/user/login", json={"username": "nobody", "password": "s3cret!"})
    assert unknown.status_code == 401
    assert unknown.json()["detail"] == "Invalid username"

    wrong = await client.post("/user/login", json={"username": "asha", "password": "wrong"})
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Invalid password"


@pytest.mark.asyncio
async def test_admin_signup_requires_admin_domain(client):
    resp = await _signup(client, "/admin/signup", "warden", "x@example.com")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email must end with @admin.com"

    resp = await _signup(client, "/admin/signup", "warden", "x@admin.com")
    assert resp.status_code == 201, resp.text
    assert resp.json()["message"] == "Admin signup successful!"


@pytest.mark.asyncio
async def test_admin_signup_missing_field(client):
    resp = await client.post("/admin/signup", json={"username": "warden", "email": "w@admin.com"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "All fields are required"

    resp = await client.post("/admin/signup", json={"username": "", "email": "w@admin.com", "password": "x"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_admin_login(client):
    await _signup(client, "/admin/signup", "warden", "warden@admin.com", password="keys")

    ok = await client.post("/admin/login", json={"username": "warden", "password": "keys"})
    assert ok.status_code == 200
    assert ok.json()["message"] == "Admin login successful!"

    bad = await client.post("/admin/login", json={"username": "warden", "password": "nope"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid password"


@pytest.mark.asyncio
async def test_user_and_admin_namespaces_are_disjoint(client):
    resp = await _signup(client, "/user/signup", "kiran", "kiran@admin.com")
    assert resp.status_code == 201

    # A user account does not log in as admin.
    resp = await client.post("/admin/login", json={"username": "kiran", "password": "s3cret!"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid username"

    # Same username and email are free in the admin namespace.
    resp = await _signup(client, "/admin/signup", "kiran", "kiran@admin.com")
    assert resp.status_code == 201, resp.text


@pytest.mark.asyncio
async def test_user_signup_missing_field_is_rejected(client):
    resp = await client.post("/user/signup", json={"username": "asha"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_signup_stores_salted_hash(session):
    first = await auth.signup(session, AccountKind.USER, "u1", "u1@campus.edu", "same-password")
    second = await auth.signup(session, AccountKind.USER, "u2", "u2@campus.edu", "same-password")

    assert first.password_hash != "same-password"
    assert first.password_hash != second.password_hash
    assert auth.verify_password("same-password", first.password_hash)


@pytest.mark.asyncio
async def test_service_errors(session):
    await auth.signup_user(session, "meena", "meena@campus.edu", "pw")

    with pytest.raises(ConflictError, match="Email already registered"):
        await auth.signup_user(session, "meena2", "meena@campus.edu", "pw")
    with pytest.raises(UnauthorizedError, match="Invalid username"):
        await auth.login_admin(session, "meena", "pw")

    account = await auth.login_user(session, "meena", "pw")
    assert account.kind == AccountKind.USER.value


@pytest.mark.asyncio
async def test_signup_race_on_unique_constraint_is_a_conflict(session, monkeypatch):
    session.add(
        Account(
            kind=AccountKind.USER.value,
            username="devi",
            email="devi@campus.edu",
            password_hash=auth.get_password_hash("pw"),
        )
    )
    await session.commit()

    # Simulate a concurrent insert landing between lookup and commit.
    async def not_found(*args, **kwargs):
        return None

    monkeypatch.setattr(auth, "_find_account", not_found)

    with pytest.raises(ConflictError, match="Username or email already registered"):
        await auth.signup_user(session, "devi", "devi@campus.edu", "pw")

    # The session was rolled back and still works.
    result = await session.exec(select(Account).where(Account.username == "devi"))
    assert len(result.all()) == 1
