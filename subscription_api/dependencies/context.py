"""
Per-request access to the application context and request-scoped services
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..core.context import AppContext
from ..db import get_db
from ..services.identity_masker import IdentityMasker
from ..services.otp_workflow import OtpWorkflow
from ..services.session_store import SessionStore


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_session_store(db: Session = Depends(get_db)) -> SessionStore:
    return SessionStore(db)


def get_identity_masker(db: Session = Depends(get_db)) -> IdentityMasker:
    return IdentityMasker(db)


def get_otp_workflow(
    context: AppContext = Depends(get_context),
    masker: IdentityMasker = Depends(get_identity_masker),
) -> OtpWorkflow:
    return OtpWorkflow(
        providers=context.providers,
        client=context.provider_client,
        masker=masker,
        whitelist=context.whitelist,
        save_max_attempts=context.settings.IDENTITY_SAVE_MAX_ATTEMPTS,
        save_backoff_seconds=context.settings.IDENTITY_SAVE_BACKOFF_SECONDS,
    )
