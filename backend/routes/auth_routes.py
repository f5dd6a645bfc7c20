"""
Auth routes: register, login (registers a session), logout (revokes it), me.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from auth import create_token, get_current_user, get_token_payload, verify_token
from database import get_db
from models.session import Session as AuthSession
from services.user_service import UserService

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


# ── Pydantic schemas ──────────────────────────────────────────────
class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


def _issue_token(db: Session, user, request: Request) -> str:
    token = create_token({"user_id": user.id, "email": user.email})
    jti = verify_token(token)["jti"]
    db.add(AuthSession(
        user_id=user.id,
        token_jti=jti,
        ip_address=request.client.host if request.client else "unknown",
        user_agent=request.headers.get("user-agent", "unknown"),
        is_revoked=False,
    ))
    db.commit()
    return token


# ── Routes ────────────────────────────────────────────────────────
@router.post("/register", status_code=201)
async def register(body: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    user = UserService.register(db, body.name, body.email, body.password)
    token = _issue_token(db, user, request)
    return {
        "status": "success",
        "data": {"token": token, "user": {**UserService.public_profile(user), "email": user.email}},
    }


@router.post("/login")
async def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Authenticate with email + password."""
    user = UserService.authenticate(db, body.email, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    token = _issue_token(db, user, request)
    return {
        "status": "success",
        "data": {"token": token, "user": {**UserService.public_profile(user), "email": user.email}},
    }


@router.post("/logout")
async def logout(payload: dict = Depends(get_token_payload), db: Session = Depends(get_db)):
    session = db.query(AuthSession).filter_by(token_jti=payload["jti"]).first()
    if session is None:
        session = AuthSession(user_id=payload["user_id"], token_jti=payload["jti"])
        db.add(session)
    session.is_revoked = True
    db.commit()
    return {"status": "success"}


@router.get("/me")
async def me(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Return the current user's profile from the token."""
    user = UserService.get(db, user_id)
    return {"status": "success", "data": {**UserService.public_profile(user), "email": user.email}}
