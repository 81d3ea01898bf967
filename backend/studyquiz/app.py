# backend/studyquiz/app.py

import os, logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.middleware.base import BaseHTTPMiddleware
from dotenv import load_dotenv

from studyquiz.core.schemas import GenerateRequest, GenerateResponse, ErrorResponse
from studyquiz.core.errors import GENERIC_MESSAGE, QuizGenerationError
from studyquiz.core.openai_qg import generate_quiz

# ------------------------------------------------------------
# Setup
# ------------------------------------------------------------
load_dotenv()
logging.basicConfig(level=os.getenv("LOG_LEVEL", "DEBUG").upper())
logger = logging.getLogger("studyquiz")

LOGGED_BODY_CHARS = 500

app = FastAPI(title="Study Quiz API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware to log requests
class LogRequestMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            body = await request.body()
            text = body.decode("utf-8", errors="replace")
            if len(text) > LOGGED_BODY_CHARS:
                text = text[:LOGGED_BODY_CHARS] + "..."
            logger.info(f"Incoming {request.method} {request.url.path} body={text}")
        except Exception:
            logger.warning("Could not read request body")
        return await call_next(request)

app.add_middleware(LogRequestMiddleware)

# ------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"error": "Request must be JSON with a non-empty 'prompt'.", "detail": jsonable_encoder(exc.errors())},
    )

@app.exception_handler(QuizGenerationError)
async def quiz_generation_exception_handler(request: Request, exc: QuizGenerationError):
    logger.error(f"{type(exc).__name__}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_message},
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_MESSAGE},
    )

# ------------------------------------------------------------
# Routes
# ------------------------------------------------------------
@app.post(
    "/api/generate-quiz",
    response_model=GenerateResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_quiz_route(req: GenerateRequest):
    questions = await generate_quiz(req.prompt)
    logger.debug(f"Returning {len(questions)} questions")
    return {"questions": questions}

@app.get("/healthz")
def healthz():
    return {"ok": True}
