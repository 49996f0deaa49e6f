"""
Identity-provider webhooks. The provider's own signature scheme is not
verified here; deployments put the endpoint behind a shared secret.
"""
import logging
import secrets

from fastapi import APIRouter, Header, HTTPException, status

from fleetfusion.api.deps import DB
from fleetfusion.core.config import settings
from fleetfusion.schemas.webhook import IdentityEvent, IdentityEventResult
from fleetfusion.services.identity_sync import IdentitySyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/identity", response_model=IdentityEventResult)
async def identity_webhook(
    event: IdentityEvent,
    db: DB,
    x_webhook_secret: str | None = Header(default=None),
):
    if settings.IDENTITY_WEBHOOK_SECRET:
        if not x_webhook_secret or not secrets.compare_digest(
            x_webhook_secret, settings.IDENTITY_WEBHOOK_SECRET
        ):
            logger.warning("Rejected identity webhook %s: bad or missing secret", event.type)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook secret")

    outcome = await IdentitySyncService(db).handle_event(event.type, event.data)
    await db.commit()
    return IdentityEventResult(type=event.type, outcome=outcome)
