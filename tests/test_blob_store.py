"""
Azure Blob adapter tests.
"""

from datetime import datetime

import pytest
from azure.core.exceptions import HttpResponseError, ServiceResponseError
from azure.storage.blob import PublicAccess

from abcretailers.core.exceptions import (
    BackendUnavailableError,
    ProvisioningError,
    StoredFileNotFoundError,
)
from abcretailers.core.utils import blob_name_from_url, timestamped_name


@pytest.fixture
def blobs(gateway):
    return gateway.blobs


@pytest.mark.asyncio
async def test_image_upload_returns_url_with_extension(blobs, account):
    url = await blobs.upload_image(b"PNGDATA", "a.png")

    assert url.endswith(".png")
    assert "/product-images/" in url
    stored = account.containers["product-images"]["blobs"][blob_name_from_url(url)]
    assert stored["data"] == b"PNGDATA"
    assert stored["content_type"] == "image/png"


@pytest.mark.asyncio
async def test_two_identical_image_uploads_get_distinct_urls(blobs, account):
    first = await blobs.upload_image(b"PNGDATA", "a.png")
    second = await blobs.upload_image(b"PNGDATA", "a.png")

    assert first != second
    assert len(account.containers["product-images"]["blobs"]) == 2


@pytest.mark.asyncio
async def test_image_container_is_public_document_container_private(blobs, account):
    await blobs.upload_image(b"img", "a.jpg")
    await blobs.upload_document(b"%PDF", "proof.pdf")

    assert account.containers["product-images"]["public_access"] == PublicAccess.BLOB
    assert account.containers["payment-proofs"]["public_access"] is None


@pytest.mark.asyncio
async def test_document_upload_uses_timestamped_name(blobs, account):
    name = await blobs.upload_document(b"%PDF", "proof.pdf")

    prefix, original = name.split(" - ", 1)
    assert original == "proof.pdf"
    datetime.strptime(prefix, "%Y%m%d_%H%M%S")
    assert await blobs.download_blob(name, "payment-proofs") == b"%PDF"


def test_same_second_documents_share_a_name():
    moment = datetime(2025, 1, 14, 9, 30, 0)
    assert timestamped_name("proof.pdf", moment) == "20250114_093000 - proof.pdf"
    assert timestamped_name("proof.pdf", moment) == timestamped_name("proof.pdf", moment)


@pytest.mark.asyncio
async def test_download_missing_blob_raises_not_found(blobs):
    await blobs.ensure_container("payment-proofs")
    with pytest.raises(StoredFileNotFoundError) as exc_info:
        await blobs.download_blob("nope.pdf", "payment-proofs")
    assert exc_info.value.error_code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_delete_blob_is_idempotent(blobs, account):
    url = await blobs.upload_image(b"img", "a.png")
    name = blob_name_from_url(url)

    await blobs.delete_blob(name, "product-images")
    await blobs.delete_blob(name, "product-images")

    assert account.containers["product-images"]["blobs"] == {}


@pytest.mark.asyncio
async def test_ensure_container_twice_is_harmless(blobs, account):
    await blobs.ensure_container("product-images", public=True)
    await blobs.ensure_container("product-images", public=True)
    assert await blobs.container_exists("product-images")
    assert not await blobs.container_exists("other")


@pytest.mark.asyncio
async def test_container_creation_failure_is_provisioning_error(blobs, account):
    account.fail("create_container", HttpResponseError(message="AuthorizationFailure"))
    with pytest.raises(ProvisioningError):
        await blobs.ensure_container("product-images", public=True)


@pytest.mark.asyncio
async def test_upload_failure_is_backend_unavailable(blobs, account):
    account.fail("upload_blob", ServiceResponseError("connection reset"))
    with pytest.raises(BackendUnavailableError) as exc_info:
        await blobs.upload_image(b"img", "a.png")
    assert exc_info.value.details["container"] == "product-images"


def test_blob_name_from_url():
    assert blob_name_from_url("https://acct.blob.core.windows.net/product-images/abc.png") == "abc.png"
    assert blob_name_from_url("https://acct.blob.core.windows.net/c/20250114_093000%20-%20a.pdf") == "20250114_093000 - a.pdf"
    assert blob_name_from_url("") is None
    assert blob_name_from_url(None) is None
