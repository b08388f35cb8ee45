from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def home():
    return "This is the Pokedex catalog backend!"


@router.get("/health")
def health():
    return {"status": "ok"}
