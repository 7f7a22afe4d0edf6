import asyncio
import contextlib
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import AppSettings, EmailConfig, load_config
from .email_sender import send_verification_email
from .errors import VerificationError
from .operations import Sender, dispatch
from .verify import VerificationStore

logger = logging.getLogger(__name__)


async def _sweep_expired(store: VerificationStore, interval: float):
    while True:
        await asyncio.sleep(interval)
        store.purge_expired()


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    interval = AppSettings().sweep_interval
    task = None
    if interval > 0:
        task = asyncio.create_task(_sweep_expired(app.state.store, interval))
    yield
    if task is not None:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


app = FastAPI(lifespan=lifespan)
app.state.store = VerificationStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store(request: Request) -> VerificationStore:
    return request.app.state.store


def get_config() -> EmailConfig:
    return load_config()


def get_sender() -> Sender:
    return send_verification_email


@app.exception_handler(VerificationError)
async def verification_error_handler(request: Request, exc: VerificationError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


@app.get("/health")
def health():
    return {"ok": True}


async def _run(operation: str | None, request: Request, store, config, sender):
    body = await request.body()
    return await run_in_threadpool(dispatch, operation, body, store, config, sender)


@app.post("/")
async def run_configured_operation(
    request: Request,
    store: VerificationStore = Depends(get_store),
    config: EmailConfig = Depends(get_config),
    sender: Sender = Depends(get_sender),
):
    return await _run(AppSettings().function_name, request, store, config, sender)


@app.post("/{operation}")
async def run_operation(
    operation: str,
    request: Request,
    store: VerificationStore = Depends(get_store),
    config: EmailConfig = Depends(get_config),
    sender: Sender = Depends(get_sender),
):
    return await _run(operation, request, store, config, sender)
