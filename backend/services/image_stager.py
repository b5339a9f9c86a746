"""
Image Stager — makes an uploaded image addressable until fulfillment.

Exactly one strategy is active per deployment (IMAGE_STRATEGY):

    upload  Push the image to the asset host before checkout and carry the
            returned asset id in the Stripe session metadata.
    url     The client already hosts the image; its URL is carried as-is.
    buffer  Keep the decoded bytes in the key-value store under a generated
            order id; the bytes are uploaded to Prodigi at fulfillment time.

Staging fails closed: if the asset host does not hand back an id, checkout
is aborted rather than created without an image.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel

from config import Settings
from domain.constants import METADATA_ASSET_ID, METADATA_IMAGE_KEY, METADATA_IMAGE_URL
from domain.enums import ImageReferenceKind
from domain.errors import ImagePreparationError
from exceptions import AssetUploadError
from services.kv_store import InMemoryTTLStore, KeyValueStore
from services.prodigi_service import ProdigiClient
from utils.validators import decode_image_data, validate_image_url

logger = logging.getLogger(__name__)

_METADATA_KEYS = {
    ImageReferenceKind.ASSET: METADATA_ASSET_ID,
    ImageReferenceKind.URL: METADATA_IMAGE_URL,
    ImageReferenceKind.HANDLE: METADATA_IMAGE_KEY,
}


class ImageReference(BaseModel):
    kind: ImageReferenceKind
    value: str

    def to_metadata(self) -> dict:
        return {_METADATA_KEYS[self.kind]: self.value}

    @classmethod
    def from_metadata(cls, metadata: Optional[dict]) -> Optional["ImageReference"]:
        """Rebuild the reference from round-tripped session metadata."""
        for kind, key in _METADATA_KEYS.items():
            value = (metadata or {}).get(key)
            if value:
                return cls(kind=kind, value=value)
        return None


class ImageStager(ABC):
    strategy: str = ""

    @abstractmethod
    async def stage(self, image_data: str) -> ImageReference:
        ...

    def resolve(self, key: str) -> Optional[bytes]:
        """Only the buffer strategy holds bytes locally."""
        return None

    def release(self, key: str) -> bool:
        return False


class AssetUploadStager(ImageStager):
    strategy = "upload"

    def __init__(self, prodigi: ProdigiClient):
        self.prodigi = prodigi

    async def stage(self, image_data: str) -> ImageReference:
        decode_image_data(image_data)
        try:
            asset_id = await self.prodigi.upload_asset(image_data)
        except AssetUploadError as e:
            raise ImagePreparationError(details={"reason": e.message})
        return ImageReference(kind=ImageReferenceKind.ASSET, value=asset_id)


class ClientUrlStager(ImageStager):
    strategy = "url"

    async def stage(self, image_data: str) -> ImageReference:
        return ImageReference(kind=ImageReferenceKind.URL, value=validate_image_url(image_data))


class BufferedImageStager(ImageStager):
    strategy = "buffer"

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def stage(self, image_data: str) -> ImageReference:
        decoded = decode_image_data(image_data)
        key = f"order_{uuid.uuid4().hex}"
        self.store.put(key, decoded)
        logger.info(f"Image buffered under {key} ({len(decoded)} bytes)")
        return ImageReference(kind=ImageReferenceKind.HANDLE, value=key)

    def resolve(self, key: str) -> Optional[bytes]:
        return self.store.get(key)

    def release(self, key: str) -> bool:
        return self.store.delete(key)


def build_image_stager(
    settings: Settings,
    prodigi: ProdigiClient,
    store: Optional[KeyValueStore] = None,
) -> ImageStager:
    """Instantiate the stager selected by IMAGE_STRATEGY."""
    if settings.image_strategy == "upload":
        return AssetUploadStager(prodigi)
    if settings.image_strategy == "url":
        return ClientUrlStager()
    if settings.image_strategy == "buffer":
        return BufferedImageStager(store if store is not None else InMemoryTTLStore(settings.image_ttl_seconds))
    raise ValueError(f"Unknown IMAGE_STRATEGY: {settings.image_strategy}")
