"""API routes for user administration and credential documents."""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from fastapi.responses import FileResponse

from nightguard.api.deps import get_document_store, require_admin, require_staff
from nightguard.api.schemas import DocumentResult, DocumentVerify, ErrorResponse, UserResponse, UserRoleUpdate
from nightguard.models.domain import User
from nightguard.services.documents import DocumentStore
from nightguard.services.errors import NotFound, RegisterError, ValidationError
from nightguard.services.workflow import Workflow
from nightguard.storage.base import Storage
from nightguard.storage.factory import get_storage

router = APIRouter()


# User endpoints
@router.get("/users", response_model=List[UserResponse])
def list_users(storage: Storage = Depends(get_storage), admin: User = Depends(require_admin)):
    return storage.get_users()


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, storage: Storage = Depends(get_storage), admin: User = Depends(require_admin)):
    user = storage.get_user(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user_role(
    user_id: int,
    role_data: UserRoleUpdate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Change a user's role. This is the only way to create managers and admins."""
    return Workflow(storage).change_role(user_id, role_data.role)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, storage: Storage = Depends(get_storage), admin: User = Depends(require_admin)):
    Workflow(storage).delete_user(admin, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Document endpoints
@router.post("/documents/upload", response_model=DocumentResult, responses={
    400: {"model": ErrorResponse, "description": "Invalid or oversize document"}
})
def upload_document(
    document: Optional[UploadFile] = File(None),
    document_type: Optional[str] = Form(None),
    storage: Storage = Depends(get_storage),
    documents: DocumentStore = Depends(get_document_store),
    user: User = Depends(require_staff)
):
    """
    Upload the caller's credential document.

    The type must match the caller's role. Everything is validated before
    the file is written, and every upload resets verification.
    """
    if document is None or not document.filename:
        raise ValidationError("No file uploaded")

    workflow = Workflow(storage)
    workflow.check_document_type(user, document_type)

    if document.size is not None:
        documents.check_upload(document.filename, document.size)
    content = documents.read_upload(document.file)
    filename = documents.save(document.filename, content)
    try:
        updated = workflow.attach_document(user, document_type, documents.public_path(filename))
    except RegisterError:
        documents.discard(filename)
        raise

    return {"message": "Document uploaded successfully", "user": updated}


@router.post("/documents/verify/{user_id}", response_model=DocumentResult)
def verify_document(
    user_id: int,
    verification: DocumentVerify,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    updated = Workflow(storage).verify_document(user_id, verification.verified)
    message = "Document verified successfully" if verification.verified else "Document verification revoked"
    return {"message": message, "user": updated}


@router.get("/documents/{filename}")
def get_document(
    filename: str,
    documents: DocumentStore = Depends(get_document_store),
    user: User = Depends(require_staff)
):
    """
    Serve a stored document by exact filename.

    Any signed-in user can read any document; there is no ownership check.
    """
    return FileResponse(documents.path_for(filename))
