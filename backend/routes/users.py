# backend/routes/users.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token, get_current_user, get_current_admin
from utils.audit import write_log, client_ip
from utils.storage import DbStorage
from services.cart_store import CART_STORAGE_KEY
from models.users import User
from models.order import Order
from models.product import Product
from models.storage import StoredState
from models.log import Log
from schemas import user as schemas

router = APIRouter(prefix="/api/users", tags=["Users"])


def _token_for(user: User) -> dict:
    access_token = create_access_token(data={"sub": str(user.id), "is_admin": user.is_admin})
    return {"access_token": access_token, "token_type": "bearer", "user": schemas.UserResponse.model_validate(user)}


def _email_taken(db: Session, email: str, exclude_id: int = None) -> bool:
    query = db.query(User).filter(func.lower(User.email) == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


# Register a new shopper account
@router.post("/register", response_model=schemas.Token, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    normalized_email = payload.email.strip().lower()

    if _email_taken(db, normalized_email):
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": normalized_email, "reason": "Email exists"})
        raise HTTPException(status_code=400, detail="User already exists")

    new_user = User(
        name=payload.name,
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        is_admin=False,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    write_log(db, user_id=new_user.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": new_user.email})
    return _token_for(new_user)


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    db_user = db.query(User).filter(User.email == email).first()

    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": db_user.email})
    return _token_for(db_user)


# Tokens are stateless; logging out drops the stored cart like the storefront does
@router.post("/logout")
def logout(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    DbStorage(db, current_user.id).remove_item(CART_STORAGE_KEY)
    write_log(db, user_id=current_user.id, action="LOGOUT", resource="auth",
              status="SUCCESS", ip=client_ip(request))
    return {"message": "Logged out successfully"}


# =========================
# PROFILE
# =========================
@router.get("/profile", response_model=schemas.UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=schemas.UserResponse)
def update_profile(
    payload: schemas.ProfileUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.name is not None:
        current_user.name = payload.name
    if payload.email is not None:
        email = payload.email.strip().lower()
        if _email_taken(db, email, exclude_id=current_user.id):
            raise HTTPException(status_code=400, detail="Email already in use")
        current_user.email = email
    if payload.password:
        current_user.password_hash = get_password_hash(payload.password)

    db.commit()
    db.refresh(current_user)

    write_log(db, user_id=current_user.id, action="PROFILE_UPDATE", resource="users",
              status="SUCCESS", ip=client_ip(request))
    return current_user


# =========================
# ADMIN
# =========================
@router.get("", response_model=List[schemas.UserResponse])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return db.query(User).order_by(User.id.asc()).all()


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/{user_id}", response_model=schemas.UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return _get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=schemas.UserResponse)
def update_user(
    user_id: int,
    payload: schemas.UserAdminUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    user = _get_user_or_404(db, user_id)

    if payload.name is not None:
        user.name = payload.name
    if payload.email is not None:
        email = payload.email.strip().lower()
        if _email_taken(db, email, exclude_id=user.id):
            raise HTTPException(status_code=400, detail="Email already in use")
        user.email = email
    if payload.is_admin is not None:
        user.is_admin = payload.is_admin

    db.commit()
    db.refresh(user)

    write_log(db, user_id=current_user.id, action="USER_UPDATE", resource="users",
              status="SUCCESS", ip=client_ip(request), meta={"id": user.id, "is_admin": user.is_admin})
    return user


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    user = _get_user_or_404(db, user_id)

    if user.is_admin:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete admin user")

    # Orders are kept as purchase history
    if db.query(Order).filter(Order.user_id == user.id).first():
        write_log(db, user_id=current_user.id, action="USER_DELETE", resource="users", status="FAIL",
                  ip=client_ip(request), meta={"id": user_id, "reason": "User has orders"})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete user with orders")

    email = user.email
    db.query(StoredState).filter(StoredState.user_id == user.id).delete(synchronize_session=False)
    db.query(Product).filter(Product.user_id == user.id).update({Product.user_id: None}, synchronize_session=False)
    db.query(Log).filter(Log.user_id == user.id).update({Log.user_id: None}, synchronize_session=False)
    db.delete(user)
    db.commit()

    write_log(db, user_id=current_user.id, action="USER_DELETE", resource="users",
              status="SUCCESS", ip=client_ip(request), meta={"id": user_id})
    return {"message": f"User {email} has been deleted"}
