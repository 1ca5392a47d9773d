from typing import Optional

from .coins import WireModel


class UploadOut(WireModel):
    success: bool = True
    image_url: str
    file_name: Optional[str] = None
    file_size: int
