import logging
import time
import cloudinary
from cloudinary import uploader
from cloudinary.exceptions import Error as CloudinaryError
from poetportal.core import config

cloudinary.config(
    cloud_name=config.CLOUDINARY_CLOUD_NAME,
    api_key=config.CLOUDINARY_API_KEY,
    api_secret=config.CLOUDINARY_API_SECRET,
    secure=True
)


def upload_avatar(data: bytes, user_id: int) -> dict:
    """Store an avatar image and return its ``url`` and ``public_id``."""
    result = uploader.upload(
        data,
        folder="avatars",
        public_id=f"user_{user_id}_{int(time.time())}",
        resource_type="image",
        overwrite=True,
        quality="auto:good"
    )
    return {"url": result["secure_url"], "public_id": result["public_id"]}


def destroy_avatar(public_id: str) -> None:
    try:
        uploader.destroy(public_id)
    except CloudinaryError as e:
        logging.error(f"Cloudinary delete error: {str(e)}")
