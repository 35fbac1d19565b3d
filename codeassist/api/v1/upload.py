from fastapi import APIRouter

from codeassist.schemas.settings import UploadProcessOut

router = APIRouter(prefix='/upload', tags=['upload'])


@router.post('/process', response_model=UploadProcessOut)
def probe_file_processing() -> UploadProcessOut:
    # files are read in the browser and sent as chat text; this only reports availability
    return UploadProcessOut(message='File processing endpoint is active')
