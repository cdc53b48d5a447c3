from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from backend.auth.dependencies import get_current_user
from backend.database import get_db
from backend.models.user import User
from backend.routes.appointment_routes import ProviderResponse

router = APIRouter(tags=['providers'])


@router.get('/providers', response_model=list[ProviderResponse], dependencies=[Depends(get_current_user)])
def list_providers(db: Session = Depends(get_db)):
    return (
        db.query(User)
        .options(joinedload(User.avatar))
        .filter(User.provider.is_(True))
        .order_by(User.name.asc())
        .all()
    )
