"""Fixed storage policy constants."""

# Multipart planning bounds
MIN_PART_SIZE = 10 * 1024 * 1024
MAX_PART_SIZE = 100 * 1024 * 1024

# Block identifiers are zero-padded to this width before encoding so that
# their lexical order matches upload order
BLOCK_ID_WIDTH = 6
MAX_PART_COUNT = 10**BLOCK_ID_WIDTH

# Worker pool size handed to the SDK transfer managers
UPLOAD_CONCURRENCY = 20
AZURE_UPLOAD_BLOCK_SIZE = 4 * 1024 * 1024

DOWNLOAD_CHUNK_SIZE = 1024 * 1024

AZURE_BLOB_HOST_TEMPLATE = "https://{account_name}.blob.core.windows.net"
