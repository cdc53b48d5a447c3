import logging
import os
import shutil
import uuid

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.core import config
from backend.database import get_db
from backend.models.file import File

router = APIRouter(tags=['files'])

logger = logging.getLogger(__name__)


class FileResponse(BaseModel):
    id: int
    name: str
    path: str
    url: str

    class Config:
        from_attributes = True


def build_stored_name(original_name: str) -> str:
    _, extension = os.path.splitext(original_name or '')
    return f'{uuid.uuid4().hex}{extension.lower()}'


@router.post('/files', response_model=FileResponse, dependencies=[Depends(get_current_user)])
def upload_file(file: UploadFile, db: Session = Depends(get_db)):
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='File is required.')

    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    stored_name = build_stored_name(file.filename)
    with open(os.path.join(config.UPLOAD_DIR, stored_name), 'wb') as destination:
        shutil.copyfileobj(file.file, destination)

    record = File(name=file.filename, path=stored_name)
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info('Stored upload %s as %s', file.filename, stored_name)
    return record
