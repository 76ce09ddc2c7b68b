import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from ai_reply import AiReplyBridge
from auth import CredentialVerifier, EnvCredentialVerifier
from database import JsonFileStore
from errors import NotFound, StorageUnavailable, UpstreamUnavailable, ValidationFailed
from schemas import AiReplyRequest, ContactForm, LoginRequest
from service import SubmissionService
from validation import validate_field

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)
log = logging.getLogger("api")

app = FastAPI(title="Contact App Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_service = SubmissionService(JsonFileStore(config.DATA_FILE))
_bridge = AiReplyBridge(config.GEMINI_API_KEY, model=config.GEMINI_MODEL, timeout=config.AI_TIMEOUT_SECONDS)
_verifier = EnvCredentialVerifier(config.ADMIN_EMAIL, config.ADMIN_PASSWORD)


def get_service() -> SubmissionService:
    return _service


def get_ai_bridge() -> AiReplyBridge:
    return _bridge


def get_verifier() -> CredentialVerifier:
    return _verifier


NOT_FOUND = {"message": "Submission not found"}
SERVER_ERROR = {"message": "Internal server error"}


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed input the same way the contact rules do."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        if loc and loc[0] == "path":
            # A non-numeric id can never match a submission.
            return JSONResponse(status_code=404, content=NOT_FOUND)
        field = loc[-1] if len(loc) > 1 and isinstance(loc[-1], str) else "body"
        errors.setdefault(field, validate_field(field, None) or "Invalid request body.")
    return JSONResponse(status_code=400, content={"errors": errors})


@app.get("/")
def read_root():
    return {"message": "Contact App API is running"}


@app.get("/health")
def health(service: SubmissionService = Depends(get_service), bridge: AiReplyBridge = Depends(get_ai_bridge)):
    """Check that the backend is up and the submission store is readable."""
    response: Dict[str, Any] = {
        "backend": "running",
        "store": service.store.describe() if hasattr(service.store, "describe") else "custom",
        "submissions": None,
        "ai_reply": "configured" if bridge.configured else "not configured",
    }
    try:
        response["submissions"] = len(service.list())
    except Exception:
        log.exception("Health check could not read the store")
        response["store"] = "unavailable"
    return response


@app.post("/api/contact", status_code=201)
def create_submission(form: ContactForm, service: SubmissionService = Depends(get_service)):
    """Validate and store a new contact form submission."""
    try:
        submission = service.create(form.model_dump())
    except ValidationFailed as e:
        return JSONResponse(status_code=400, content={"errors": e.errors})
    except StorageUnavailable:
        return JSONResponse(status_code=500, content=SERVER_ERROR)
    return {"id": submission.id, "message": "Thank you for your message!"}


@app.get("/api/contact")
def list_submissions(service: SubmissionService = Depends(get_service)):
    """All submissions, newest first. The admin panel filters by status itself."""
    try:
        submissions = service.list()
    except StorageUnavailable:
        return JSONResponse(status_code=500, content=SERVER_ERROR)
    return {"submissions": [s.to_json() for s in submissions]}


@app.patch("/api/contact/{submission_id}/resolve")
def resolve_submission(submission_id: int, service: SubmissionService = Depends(get_service)):
    try:
        submission = service.resolve(submission_id)
    except NotFound:
        return JSONResponse(status_code=404, content=NOT_FOUND)
    except StorageUnavailable:
        return JSONResponse(status_code=500, content=SERVER_ERROR)
    return {"message": "Submission resolved", "submission": submission.to_json()}


@app.delete("/api/contact/{submission_id}")
def delete_submission(submission_id: int, service: SubmissionService = Depends(get_service)):
    try:
        service.delete(submission_id)
    except NotFound:
        return JSONResponse(status_code=404, content=NOT_FOUND)
    except StorageUnavailable:
        return JSONResponse(status_code=500, content=SERVER_ERROR)
    return {"message": "Submission deleted"}


@app.post("/api/ai-reply")
def ai_reply(body: AiReplyRequest, bridge: AiReplyBridge = Depends(get_ai_bridge)):
    """Draft a reply with Gemini. Never touches stored submissions."""
    if not bridge.configured:
        log.error("AI reply requested but GEMINI_API_KEY is not set")
        return JSONResponse(status_code=500, content={"error": "Server missing API Key."})
    try:
        reply = bridge.draft_reply(body.name or "", body.subject or "", body.message or "")
    except UpstreamUnavailable:
        return JSONResponse(status_code=500, content={"error": "Failed to generate AI reply."})
    return {"reply": reply}


@app.post("/api/admin/login")
def admin_login(body: LoginRequest, verifier: CredentialVerifier = Depends(get_verifier)):
    if verifier.verify(body.email, body.password):
        log.info("Admin login succeeded")
        return {"authorized": True}
    log.warning("Admin login rejected")
    return JSONResponse(status_code=401, content={"authorized": False, "message": "Invalid email or password."})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
