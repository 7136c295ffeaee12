# weekly_survey/api/v1/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from weekly_survey.core.security import (
    get_current_user,
    hash_password,
    token_for_user,
    verify_password,
)
from weekly_survey.db.session import get_db
from weekly_survey.models.user import ROLE_ADMIN, User
from weekly_survey.schemas.auth import LoginIn, RegisterIn, TokenOut
from weekly_survey.schemas.common import UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


@router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def register(data: RegisterIn, db: Session = Depends(get_db)):
    """
    Registra una cuenta de administrador y devuelve su token.
    """
    id_number = data.id_number.strip()

    # se revisa si ya existe antes de validar la contraseña
    if db.query(User.id).filter(User.id_number == id_number).first():
        raise HTTPException(status_code=400, detail="El usuario ya existe")

    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres",
        )

    user = User(
        name=data.name.strip(),
        id_number=id_number,
        role=ROLE_ADMIN,
        password_hash=hash_password(data.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="El usuario ya existe")
    db.refresh(user)

    logger.info("admin registrado: %s (id=%s)", user.id_number, user.id)
    return TokenOut(token=token_for_user(user), user=UserOut.model_validate(user))


@router.post("/login", response_model=TokenOut)
def login(data: LoginIn, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id_number == data.id_number.strip()).first()
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Usuario o contraseña incorrectos")

    if user.role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Permisos insuficientes")

    return TokenOut(token=token_for_user(user), user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    """
    Devuelve el usuario actual según el token.
    """
    return current_user
