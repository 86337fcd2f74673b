"""
ABC Retailers: retail management back end on Azure Storage

Customers, products and orders are kept in Azure Table storage, product
images and payment proofs in Blob storage, notifications in Queue storage
and contract documents in an Azure File Share.
"""

__version__ = "0.1.0"
__author__ = "ABC Retailers Team"
__description__ = "Retail management storage gateway on Azure Storage"
