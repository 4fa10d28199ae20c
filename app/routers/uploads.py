from fastapi import APIRouter, Depends, HTTPException, status

from app.core.current_user import get_current_user
from app.schemas.upload import UploadRequest, UploadResponse
from app.services.storage import InvalidUpload, UploadTooLarge, save_base64_upload

router = APIRouter()


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_user)],
)
def upload_file(payload: UploadRequest):
    if not payload.filename or not payload.data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing filename or data")

    try:
        stored_name, _size = save_base64_upload(payload.filename, payload.data)
    except InvalidUpload as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UploadTooLarge as e:
        raise HTTPException(status_code=413, detail=str(e))
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Failed to write file: {e}")

    return UploadResponse(url=f"/uploads/{stored_name}", filename=stored_name)
