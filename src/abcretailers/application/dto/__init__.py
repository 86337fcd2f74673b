"""Data transfer objects passed into and out of the use cases."""

from .retail_dto import HomeSummary, PaymentProofReceipt, UploadedFile

__all__ = ["HomeSummary", "PaymentProofReceipt", "UploadedFile"]
