from fastapi import APIRouter, Depends, HTTPException, status

from app.core.security import require_api_key
from app.schemas.users import SavedAnalysesResponse, SavedAnalysis, SavedAnalysisCreate, User, UserCreate
from app.storage.users import UserExistsError, UserNotFoundError, UserStore, get_user_store

router = APIRouter(dependencies=[Depends(require_api_key)])


def _not_found(exc: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, store: UserStore = Depends(get_user_store)):
    try:
        return store.create(payload.username.strip(), payload.email)
    except UserExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.get("/users/{email}", response_model=User)
async def get_user(email: str, store: UserStore = Depends(get_user_store)):
    user = store.find_by_email(email.strip().lower())
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/users/{email}/analyses", response_model=SavedAnalysesResponse)
async def list_saved_analyses(email: str, store: UserStore = Depends(get_user_store)):
    try:
        return SavedAnalysesResponse(saved_resumes=store.list_analyses(email.strip().lower()))
    except UserNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post("/users/{email}/analyses", response_model=SavedAnalysis, status_code=status.HTTP_201_CREATED)
async def save_analysis(email: str, payload: SavedAnalysisCreate, store: UserStore = Depends(get_user_store)):
    if not payload.resume_id or not payload.letter_grade or not payload.rejection_letter:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required resume data")
    try:
        return store.save(email.strip().lower(), payload)
    except UserNotFoundError as exc:
        raise _not_found(exc) from exc


@router.delete("/users/{email}/analyses/{resume_id}", response_model=SavedAnalysesResponse)
async def delete_saved_analysis(email: str, resume_id: str, store: UserStore = Depends(get_user_store)):
    key = email.strip().lower()
    try:
        deleted = store.delete_analysis(key, resume_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Saved resume not found")
        return SavedAnalysesResponse(saved_resumes=store.list_analyses(key))
    except UserNotFoundError as exc:
        raise _not_found(exc) from exc
