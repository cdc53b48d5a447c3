import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator, model_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.dependencies import get_current_user
from backend.auth.passwords import hash_password, verify_password
from backend.database import get_db
from backend.models.file import File
from backend.models.user import User

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if '@' not in normalized:
        raise ValueError('A valid email is required.')
    return normalized


class CreateUserRequest(BaseModel):
    name: str
    email: str
    password: str
    provider: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must have at least {MIN_PASSWORD_LENGTH} characters.')
        return value


class UpdateUserRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    avatar_id: int | None = None
    old_password: str | None = None
    password: str | None = None
    confirm_password: str | None = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _normalize_email(value)

    @model_validator(mode='after')
    def validate_password_change(self) -> 'UpdateUserRequest':
        if self.password is None:
            return self
        if not self.old_password:
            raise ValueError('Current password is required to set a new one.')
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must have at least {MIN_PASSWORD_LENGTH} characters.')
        if self.password != self.confirm_password:
            raise ValueError('Password confirmation does not match.')
        return self


class CreateSessionRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    provider: bool
    avatar_id: int | None = None

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    user: UserResponse
    token: str


@router.post('/users', response_model=UserResponse)
def create_user(data: CreateUserRequest, db: Session = Depends(get_db)):
    try:
        if db.query(User).filter(User.email == data.email).first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='User already exists.')

        user = User(
            name=data.name,
            email=data.email,
            hashed_password=hash_password(data.password),
            provider=data.provider,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to register user %s', data.email)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Database unavailable. Verify DATABASE_URL and database credentials.',
        ) from exc

    return user


@router.put('/users', response_model=UserResponse)
def update_user(
    data: UpdateUserRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        if data.email and data.email != current_user.email:
            if db.query(User).filter(User.email == data.email).first():
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='User already exists.')
            current_user.email = data.email

        if data.password is not None:
            if not verify_password(data.old_password, current_user.hashed_password):
                raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Password does not match.')
            current_user.hashed_password = hash_password(data.password)

        if data.avatar_id is not None:
            if db.get(File, data.avatar_id) is None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Avatar not found.')
            current_user.avatar_id = data.avatar_id

        if data.name:
            current_user.name = data.name.strip()

        db.commit()
        db.refresh(current_user)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Database unavailable. Verify DATABASE_URL and database credentials.',
        ) from exc

    return current_user


@router.post('/sessions', response_model=SessionResponse)
def create_session(data: CreateSessionRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='User not found.')

    if not verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Password does not match.')

    token = jwt_handler.create_access_token(user.id)
    return {'user': UserResponse.model_validate(user), 'token': token}
