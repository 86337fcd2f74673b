"""
Shared constants for ABC Retailers.

Table, container, queue and share names are the durable contract with the
storage account: renaming any of them orphans the existing data.
"""

# Table storage
CUSTOMERS_TABLE = "Customers"
PRODUCTS_TABLE = "Products"
ORDERS_TABLE = "Orders"

# Blob storage
PRODUCT_IMAGES_CONTAINER = "product-images"
PAYMENT_PROOFS_CONTAINER = "payment-proofs"

# Queue storage
ORDER_NOTIFICATIONS_QUEUE = "order-notifications"
STOCK_UPDATES_QUEUE = "stock-updates"

# File shares
CONTRACTS_SHARE = "contracts"
PAYMENTS_DIRECTORY = "payments"

# Timestamp prefix for documents and share files, e.g. "20250114_093000 - invoice.pdf"
STORED_NAME_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# Number of products shown on the dashboard
FEATURED_PRODUCT_COUNT = 5
