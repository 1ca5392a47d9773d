from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_store
from ..models import NewUser
from ..passwords import hash_password, verify_password
from ..schemas.users import LoginRequest, UserCreate, UserOut
from ..storage import DuplicateUsername, RecordStore

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserOut, status_code=201)
def register_user(payload: UserCreate, store: RecordStore = Depends(get_store)):
    if store.get_user_by_username(payload.username) is not None:
        raise HTTPException(status_code=409, detail="Username already taken")
    try:
        user = store.create_user(
            NewUser(username=payload.username, password=hash_password(payload.password))
        )
    except DuplicateUsername:
        raise HTTPException(status_code=409, detail="Username already taken")
    return UserOut(id=user.id, username=user.username)


@router.post("/login", response_model=UserOut)
def login(payload: LoginRequest, store: RecordStore = Depends(get_store)):
    user = store.get_user_by_username(payload.username)
    if user is None or not verify_password(payload.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return UserOut(id=user.id, username=user.username)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, store: RecordStore = Depends(get_store)):
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut(id=user.id, username=user.username)
