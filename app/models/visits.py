"""Visit request documents (``visitRequests`` collection)."""

VISIT_REQUESTS = "visitRequests"

VISIT_REQUEST_FIELDS = (
    "homeownerId",
    "visitorId",
    "classification",
    "visitDate",
    "visitTime",
)
