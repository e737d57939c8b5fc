"""Document API routes.

FastAPI router exposing the workflow operations:
- POST /v1/accounts/{account}/register
- POST /v1/accounts/{account}/documents
- POST /v1/accounts/{account}/documents/{owner}/{document_id}/sign
- GET  /v1/accounts/{account}/documents
- GET  /v1/accounts/{owner}/documents/{document_id}
- GET  /v1/documents/content/{content_id}

The acting account is a path parameter. Authenticating it is the ledger's
job: every write is a transaction the account itself signs.

Domain errors are rendered as RFC 7807 problem details with the error's
own status code.
"""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import Response

from hashsign.api.dependencies.document import get_workflow_orchestrator
from hashsign.api.models.document import (
    CreateDocumentResponse,
    DocumentListResponse,
    DocumentResponse,
    DocumentStatusResponse,
    ProblemResponse,
    RegisterAccountResponse,
    SignDocumentResponse,
)
from hashsign.application.services.workflow_orchestrator import WorkflowOrchestrator
from hashsign.domain.errors import PayloadTooLargeError
from hashsign.domain.exceptions import HashSignError

router = APIRouter(prefix="/v1", tags=["documents"])


def _problem(error: HashSignError, request: Request) -> HTTPException:
    detail = error.to_rfc7807_dict()
    detail["instance"] = str(request.url)
    return HTTPException(status_code=error.status, detail=detail)


@router.post(
    "/accounts/{account}/register",
    response_model=RegisterAccountResponse,
    responses={503: {"model": ProblemResponse, "description": "Ledger unreachable"}},
    summary="Register an account",
    description="Create the account's document store unless it already exists.",
)
async def register_account(
    account: str,
    request: Request,
    orchestrator: WorkflowOrchestrator = Depends(get_workflow_orchestrator),
) -> RegisterAccountResponse:
    try:
        registered = await orchestrator.onboard(account)
    except HashSignError as e:
        raise _problem(e, request) from None
    return RegisterAccountResponse(account=account, registered=registered)


@router.post(
    "/accounts/{account}/documents",
    response_model=CreateDocumentResponse,
    status_code=201,
    responses={
        400: {"model": ProblemResponse, "description": "Empty or duplicate signer list"},
        404: {"model": ProblemResponse, "description": "Account not registered"},
        413: {"model": ProblemResponse, "description": "Payload too large"},
        500: {"model": ProblemResponse, "description": "Created but id unresolved"},
        502: {"model": ProblemResponse, "description": "Upload failed or orphaned"},
    },
    summary="Create a document",
    description=(
        "Upload the payload to the blob store and register it as a document "
        "awaiting the listed signers. Signers are comma-separated."
    ),
)
async def create_document(
    account: str,
    request: Request,
    payload: UploadFile = File(..., description="Document content"),
    signers: str = Form(..., description="Comma-separated signer accounts"),
    name: str | None = Form(None, description="Name recorded with the upload"),
    orchestrator: WorkflowOrchestrator = Depends(get_workflow_orchestrator),
) -> CreateDocumentResponse:
    limit = orchestrator.max_payload_bytes
    try:
        # At most limit + 1 bytes are read; the extra byte proves the overflow.
        if payload.size is not None and payload.size > limit:
            raise PayloadTooLargeError(payload.size, limit)
        content = await payload.read(limit + 1)
        if len(content) > limit:
            raise PayloadTooLargeError(payload.size or len(content), limit)
        created = await orchestrator.create_document(
            account, content, signers, name=name or payload.filename
        )
    except HashSignError as e:
        raise _problem(e, request) from None
    return CreateDocumentResponse.from_domain(created)


@router.post(
    "/accounts/{account}/documents/{owner}/{document_id}/sign",
    response_model=SignDocumentResponse,
    responses={
        403: {"model": ProblemResponse, "description": "Account is not a signer"},
        404: {"model": ProblemResponse, "description": "Document not found"},
        409: {"model": ProblemResponse, "description": "Already signed or completed"},
    },
    summary="Sign a document",
    description="Attach the account's signature to a document held in owner's store.",
)
async def sign_document(
    account: str,
    owner: str,
    document_id: int,
    request: Request,
    orchestrator: WorkflowOrchestrator = Depends(get_workflow_orchestrator),
) -> SignDocumentResponse:
    try:
        await orchestrator.sign_document(account, document_id, owner=owner)
    except HashSignError as e:
        raise _problem(e, request) from None
    return SignDocumentResponse(owner=owner, document_id=document_id, signer=account)


@router.get(
    "/accounts/{account}/documents",
    response_model=DocumentListResponse,
    responses={404: {"model": ProblemResponse, "description": "Account not registered"}},
    summary="List documents created by an account",
)
async def list_documents(
    account: str,
    request: Request,
    orchestrator: WorkflowOrchestrator = Depends(get_workflow_orchestrator),
) -> DocumentListResponse:
    try:
        documents = await orchestrator.list_documents(account)
    except HashSignError as e:
        raise _problem(e, request) from None
    return DocumentListResponse(
        account=account,
        documents=[DocumentResponse.from_domain(d) for d in documents],
        total=len(documents),
    )


@router.get(
    "/accounts/{owner}/documents/{document_id}",
    response_model=DocumentStatusResponse,
    responses={404: {"model": ProblemResponse, "description": "Document not found"}},
    summary="Get document status",
)
async def document_status(
    owner: str,
    document_id: int,
    request: Request,
    orchestrator: WorkflowOrchestrator = Depends(get_workflow_orchestrator),
) -> DocumentStatusResponse:
    try:
        status = await orchestrator.document_status(owner, document_id)
    except HashSignError as e:
        raise _problem(e, request) from None
    return DocumentStatusResponse.from_domain(owner, status)


@router.get(
    "/documents/content/{content_id}",
    response_class=Response,
    responses={
        200: {"content": {"application/octet-stream": {}}},
        404: {"model": ProblemResponse, "description": "Unknown content id"},
        502: {"model": ProblemResponse, "description": "Fetch failed"},
    },
    summary="Download a document's content",
)
async def view_document(
    content_id: str,
    request: Request,
    orchestrator: WorkflowOrchestrator = Depends(get_workflow_orchestrator),
) -> Response:
    try:
        content = await orchestrator.view_document(content_id)
    except HashSignError as e:
        raise _problem(e, request) from None
    return Response(content=content, media_type="application/octet-stream")
