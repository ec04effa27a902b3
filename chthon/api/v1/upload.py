from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse
from loguru import logger
from chthon.core.config import settings
from chthon.models.user import User
from chthon.schemas.upload import UploadOut
from chthon.services.auth_service import get_current_user
from chthon.services.storage_service import UploadRejected, store_image
from chthon.services.user_service import user_limits

router = APIRouter(tags=['upload'])


@router.post('/upload', response_model=UploadOut)
async def upload_image(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
):
    if not user_limits(user).can_upload_images:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Image uploads not allowed for tier')
    contents = await file.read(settings.UPLOAD_MAX_BYTES + 1)
    try:
        url = store_image(contents, file.filename, file.content_type)
    except UploadRejected as exc:
        logger.warning('upload.rejected', user_id=user.id, reason=exc.message, content_type=file.content_type)
        body = {'detail': exc.message}
        if exc.code:
            body['code'] = exc.code
        return JSONResponse(status_code=exc.status_code, content=body)
    except OSError as exc:
        logger.exception('upload.write_failed', user_id=user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload file: {exc}",
        ) from exc
    return UploadOut(url=url)
