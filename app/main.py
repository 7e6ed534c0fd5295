from fastapi import FastAPI, HTTPException, Request, Depends, BackgroundTasks
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Callable, Optional
from contextlib import asynccontextmanager
import logging
import traceback
import time
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from dotenv import load_dotenv

from .config import settings
from .schemas import FeedbackRequest, FeedbackResponse, ErrorResponse
from .prompts import get_system_prompt, get_temperature, UnknownGroupError
from .providers import ChatProvider, ProviderError, build_provider
from .interaction_log import AirtableLogger


load_dotenv()

# Add logging configuration
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unknown server error occurred."

@asynccontextmanager
async def lifespan(app: FastAPI):
    global _provider
    yield
    if _provider is not None:
        await _provider.aclose()
        _provider = None

app = FastAPI(lifespan=lifespan)

# Load allowed frontend origins from .env or default
frontend_origins = settings.frontend_origins.split(",")

# Add dev URLs for local testing if not already included
dev_origins = [
    "http://localhost:8888",
    "http://127.0.0.1:8888",
    "http://localhost:3000",
    "http://127.0.0.1:3000"
]

# Clean up any empty strings and remove duplicates
frontend_origins = list(set([origin.strip() for origin in frontend_origins + dev_origins if origin.strip()]))

logger.info(f"CORS allowed origins: {frontend_origins}")

# Apply middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=frontend_origins,
    allow_credentials=True,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["*"],
)

if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        integrations=[FastApiIntegration()],
        traces_sample_rate=0.5,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {str(exc)}")
    logger.error(f"Stack trace:\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_ERROR}
    )

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request body: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body."}
    )


# One provider, and so one AsyncOpenAI connection pool, per process
_provider: Optional[ChatProvider] = None

def shared_provider() -> ChatProvider:
    global _provider
    if _provider is None:
        _provider = build_provider(settings)
    return _provider

def get_provider_factory() -> Callable[[], ChatProvider]:
    # Built lazily so a bad group is rejected before provider config is touched
    return shared_provider

def get_interaction_logger() -> AirtableLogger:
    return AirtableLogger.from_settings(settings)


# Add health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.post(
    "/api/get-feedback",
    response_model=FeedbackResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@app.post("/.netlify/functions/get-feedback", response_model=FeedbackResponse, include_in_schema=False)
async def get_feedback(
    input: FeedbackRequest,
    background_tasks: BackgroundTasks,
    provider_factory: Callable[[], ChatProvider] = Depends(get_provider_factory),
    interaction_logger: AirtableLogger = Depends(get_interaction_logger),
):
    """
    Relay a piece of student writing to the configured model with the
    group's instruction prompt and return the generated feedback.

    The interaction is written to Airtable after the response is sent;
    a failed write never affects the response.
    """
    try:
        system_prompt = get_system_prompt(input.group, settings)
        temperature = get_temperature(input.group)
    except UnknownGroupError:
        logger.warning(f"Invalid group {input.group!r} from participant {input.participant_id}")
        raise HTTPException(status_code=400, detail="Invalid group specified.")

    try:
        t0 = time.time()
        provider = provider_factory()
        logger.info(f"Requesting {input.group} feedback from {provider.name} for participant {input.participant_id}")
        feedback = await provider.complete(system_prompt, input.input_text, temperature)
        logger.info(f"{provider.name} responded in {time.time() - t0:.2f}s")
    except ProviderError as e:
        logger.error(f"Upstream error in get_feedback: {str(e)}")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)
    except Exception as e:
        logger.error(f"Error in get_feedback: {type(e).__name__} - {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    background_tasks.add_task(
        interaction_logger.log_interaction,
        participant_id=input.participant_id,
        group=input.group,
        input_text=input.input_text,
        feedback=feedback,
    )

    return FeedbackResponse(feedback=feedback)
