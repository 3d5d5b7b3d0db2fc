from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlmodel import Session, select
from pydantic import BaseModel, Field
from epharmacy.api.deps import get_db, access_security, get_current_user
from epharmacy.models.user import User, UserRole
from epharmacy.core.security import hash_password, verify_password

router = APIRouter(prefix="/api/auth", tags=["auth"])


# === Schemas ===

class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    first_name: str = ""
    last_name: str = ""


class LoginRequest(BaseModel):
    username: str
    password: str


class UserResponse(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: str
    role: UserRole

    class Config:
        from_attributes = True


def issue_token(response: Response, user: User) -> None:
    subject = {"id": user.id, "role": user.role.value}
    access_token = access_security.create_access_token(subject=subject)
    access_security.set_access_cookie(response, access_token)


# === Routes ===

@router.post("/register", response_model=UserResponse)
def register(data: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    existing = db.exec(select(User).where(User.username == data.username)).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered"
        )
    
    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=UserRole.CUSTOMER
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    
    issue_token(response, user)
    return user


@router.post("/login", response_model=UserResponse)
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.exec(select(User).where(User.username == data.username)).first()
    
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )
    
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )
    
    issue_token(response, user)
    return user


@router.post("/logout")
def logout(response: Response):
    access_security.unset_access_cookie(response)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
