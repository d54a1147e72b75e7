from prometheus_client import Counter

# mode: single | multipart; outcome: success | aborted | failed
UPLOADS = Counter(
    "objstore_uploads_total",
    "Object uploads by path and outcome",
    ["mode", "outcome"],
)

UPLOAD_PARTS = Counter(
    "objstore_upload_parts_total",
    "Multipart parts uploaded successfully",
)

UPLOAD_BYTES = Counter(
    "objstore_upload_bytes_total",
    "Bytes accepted by the storage service",
)

# kind: objects | buckets
LIST_PAGES = Counter(
    "objstore_list_pages_total",
    "Listing pages fetched",
    ["kind"],
)
