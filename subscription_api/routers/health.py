from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Welcome to the API"


@router.get("/healthz")
def healthz():
    return {"ok": True, "service": "subscription-api"}
