# weekly_survey/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from weekly_survey.db.session import get_db
from weekly_survey.schemas.common import UserOut
from weekly_survey.services.submissions import get_user_by_id_number as _get_user_by_id_number

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/by-id-number/{id_number}", response_model=UserOut)
def get_user_by_id_number(
    id_number: str = Path(..., max_length=50),
    db: Session = Depends(get_db),
):
    # el frontend lo usa para autocompletar el nombre antes de responder
    user = _get_user_by_id_number(db, id_number)
    if not user:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")
    return user
