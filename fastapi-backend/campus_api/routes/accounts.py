"""Signup and login for user and admin accounts.

Logins are stateless: a successful call only confirms the credentials, no
token or session is handed out.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from .. import auth
from ..database import get_session
from ..errors import ServiceError
from ..schemas import AdminSignupRequest, LoginRequest, MessageResponse, SignupRequest

logger = logging.getLogger("campus_api.routes.accounts")

router = APIRouter()


@router.post("/user/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def user_signup(body: SignupRequest, session: AsyncSession = Depends(get_session)):
    try:
        await auth.signup_user(session, body.username, body.email, body.password)
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception("User signup failed")
        raise HTTPException(status_code=500, detail="Signup failed. Please try again.") from exc
    return MessageResponse(message="User signup successful!")


@router.post("/user/login", response_model=MessageResponse)
async def user_login(body: LoginRequest, session: AsyncSession = Depends(get_session)):
    try:
        await auth.login_user(session, body.username, body.password)
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception("User login failed")
        raise HTTPException(status_code=500, detail="Login failed. Please try again.") from exc
    return MessageResponse(message="Login successful!")


@router.post("/admin/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def admin_signup(body: AdminSignupRequest, session: AsyncSession = Depends(get_session)):
    try:
        await auth.signup_admin(session, body.username, body.email, body.password)
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception("Admin signup failed")
        raise HTTPException(status_code=500, detail="Admin signup failed. Please try again.") from exc
    return MessageResponse(message="Admin signup successful!")


@router.post("/admin/login", response_model=MessageResponse)
async def admin_login(body: LoginRequest, session: AsyncSession = Depends(get_session)):
    try:
        await auth.login_admin(session, body.username, body.password)
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception("Admin login failed")
        raise HTTPException(status_code=500, detail="Login failed. Please try again.") from exc
    return MessageResponse(message="Admin login successful!")
