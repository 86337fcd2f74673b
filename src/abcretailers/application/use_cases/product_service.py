"""Product catalogue use cases."""

from typing import Any, List, Mapping, Optional

from ...core.constants import PRODUCT_IMAGES_CONTAINER
from ...core.exceptions import StorageError
from ...core.structured_logger import get_logger
from ...core.utils import blob_name_from_url
from ...domain.entities import PRODUCT_PARTITION, Product
from ...domain.errors import EntityNotFoundError, InvalidEntityDataError
from ..dto import UploadedFile
from ..ports import StorageGateway
from ._editing import apply_changes, coerce_field

logger = get_logger(__name__)

EDITABLE_FIELDS = ("product_name", "description", "price", "stock_available")


def validate_product(product: Product) -> None:
    product.price = coerce_field(product, "price", product.price)
    product.stock_available = coerce_field(product, "stock_available", product.stock_available)
    if product.price is None or not product.price > 0:
        raise InvalidEntityDataError("price", product.price, "Price must be greater than $0.00")
    if product.stock_available is not None and product.stock_available < 0:
        raise InvalidEntityDataError(
            "stock_available", product.stock_available, "Stock cannot be negative"
        )


class ProductService:
    """
    Product CRUD with image handling.

    Images go to the public ``product-images`` container before the product
    is written. If the write fails the uploaded image is left in place; it is
    not referenced by any product and can be cleaned up offline.
    """

    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    async def list_products(self) -> List[Product]:
        return await self._gateway.list_all(Product)

    async def get_product(self, product_id: str) -> Product:
        product = await self._gateway.get(Product, PRODUCT_PARTITION, product_id)
        if product is None:
            raise EntityNotFoundError("Product", product_id)
        return product

    async def _upload_image(self, image: Optional[UploadedFile]) -> Optional[str]:
        if image is None or image.is_empty:
            return None
        return await self._gateway.upload_image(image.data, image.filename, PRODUCT_IMAGES_CONTAINER)

    async def create_product(self, product: Product, image: Optional[UploadedFile] = None) -> Product:
        validate_product(product)
        product.partition_key = PRODUCT_PARTITION

        image_url = await self._upload_image(image)
        if image_url:
            product.image_url = image_url

        created = await self._gateway.add(product)
        logger.info(
            "✅ Product created",
            product_id=created.product_id,
            product_name=created.product_name,
            price=created.price,
        )
        return created

    async def update_product(
        self,
        product_id: str,
        changes: Mapping[str, Any],
        image: Optional[UploadedFile] = None,
    ) -> Product:
        """
        Apply ``changes`` (and optionally a new image) to the stored product.

        A replaced image is deleted only after the product update succeeded.
        """
        product = await self.get_product(product_id)
        previous_image_url = product.image_url
        apply_changes(product, changes, EDITABLE_FIELDS)
        validate_product(product)

        image_url = await self._upload_image(image)
        if image_url:
            product.image_url = image_url

        updated = await self._gateway.update(product)
        logger.info("✅ Product updated", product_id=product_id)

        if image_url and previous_image_url:
            await self._delete_image(previous_image_url)
        return updated

    async def delete_product(self, product_id: str) -> None:
        product = await self._gateway.get(Product, PRODUCT_PARTITION, product_id)
        await self._gateway.delete(Product, PRODUCT_PARTITION, product_id)
        logger.info("✅ Product deleted", product_id=product_id)
        if product is not None and product.image_url:
            await self._delete_image(product.image_url)

    async def _delete_image(self, image_url: str) -> None:
        blob_name = blob_name_from_url(image_url)
        if not blob_name:
            return
        try:
            await self._gateway.delete_blob(blob_name, PRODUCT_IMAGES_CONTAINER)
        except StorageError as e:
            # The product write is already committed; the old image stays as an orphan
            logger.warning("Could not delete old product image", blob_name=blob_name, error=e.message)
