"""
Prometheus metrics definitions for the storage API.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Upload metrics
uploads_total = Counter(
    'uploads_total',
    'Total upload attempts',
    ['category', 'status']
)

upload_size_bytes = Histogram(
    'upload_size_bytes',
    'Size of successfully uploaded files in bytes',
    ['category'],
    buckets=[1024, 10 * 1024, 100 * 1024, 512 * 1024, 1024 * 1024, 2 * 1024 * 1024, 5 * 1024 * 1024]
)

staging_cleanup_failures_total = Counter(
    'staging_cleanup_failures_total',
    'Staging files that could not be removed',
    ['category']
)

# Asset operations against the object store
asset_operations_total = Counter(
    'asset_operations_total',
    'Object store operations by outcome',
    ['category', 'operation', 'status']
)
