from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, Depends, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.params import Query

from echobot.config import settings
from echobot.api.webhook import verify_webhook, handle_message
from echobot.logging import setup_logger, log_exception
from echobot.services.messaging.client import WhatsApp

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create the WhatsApp client on startup and log shutdown
    """
    missing = settings.missing_whatsapp_settings()
    if missing:
        logger.error(f"Missing WhatsApp settings: {', '.join(missing)}")
        raise RuntimeError(f"Set {', '.join(missing)} to run the webhook service")

    app.state.whatsapp = WhatsApp(
        token=settings.WHATSAPP_TOKEN,
        phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
        api_version=settings.WHATSAPP_API_VERSION,
        timeout=settings.WHATSAPP_TIMEOUT,
    )
    logger.info(f"WhatsApp client ready for phone number {settings.WHATSAPP_PHONE_NUMBER_ID}")

    yield
    logger.info("Application shutdown")


def get_whatsapp(request: Request) -> WhatsApp:
    return request.app.state.whatsapp


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    lifespan=lifespan,
)


@app.get("/", tags=["root"])
async def root():
    return JSONResponse(content={"status": "ok"}, status_code=status.HTTP_200_OK)


# WhatsApp webhook endpoints
@app.get("/webhook")
async def webhook_verification(
    hub_mode: str = Query(None, alias="hub.mode"),
    hub_verify_token: str = Query(None, alias="hub.verify_token"),
    hub_challenge: str = Query(None, alias="hub.challenge"),
) -> Response:
    return await verify_webhook(hub_mode, hub_verify_token, hub_challenge)


@app.post("/webhook")
async def webhook_handler(
    request: Request,
    background_tasks: BackgroundTasks,
    client: WhatsApp = Depends(get_whatsapp),
):
    try:
        data = await request.json()
        return await handle_message(data, client, background_tasks)
    except Exception as e:
        log_exception(logger, "Error handling webhook", e)
        return JSONResponse(
            content={"status": "error", "message": str(e)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
