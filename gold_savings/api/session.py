"""
Session endpoints for the signed-in member.
"""

from fastapi import APIRouter, Depends, HTTPException, Response

from gold_savings.api.deps import get_session_manager, to_http
from gold_savings.errors import SchemeError
from gold_savings.schemas.account import AccountResponse, LoginRequest
from gold_savings.services.session_manager import SessionManager

router = APIRouter(prefix="/session", tags=["Session"])


@router.get("", response_model=AccountResponse)
def get_session(
    session_manager: SessionManager = Depends(get_session_manager),
):
    if session_manager.current is None:
        raise HTTPException(status_code=404, detail="No active session")
    return session_manager.current


@router.post("/login", response_model=AccountResponse)
def login(
    request: LoginRequest,
    session_manager: SessionManager = Depends(get_session_manager),
):
    """Sign in with a book id."""
    try:
        return session_manager.authenticate(request.bookid.strip())
    except SchemeError as e:
        raise to_http(e)


@router.post("/refresh", response_model=AccountResponse)
def refresh(
    session_manager: SessionManager = Depends(get_session_manager),
):
    """Re-read the signed-in account. Keeps the old copy if the read fails."""
    current = session_manager.current
    if current is None:
        raise HTTPException(status_code=404, detail="No active session")
    return session_manager.refresh(current.id)


@router.post("/logout", status_code=204)
def logout(
    session_manager: SessionManager = Depends(get_session_manager),
):
    session_manager.sign_out()
    return Response(status_code=204)
