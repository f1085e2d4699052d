from fastapi import APIRouter, Depends

from reqbridge.config import Settings
from reqbridge.presentation.api.dependencies import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health(cfg: Settings = Depends(get_settings)) -> dict[str, str]:  # type: ignore[misc]
    return {"status": "ok", "engine": cfg.engine}
