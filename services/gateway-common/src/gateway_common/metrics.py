from prometheus_client import Counter, Histogram

STORE_OPERATIONS_TOTAL = Counter(
    "store_operations_total", "Total number of store operations", ["table", "operation", "outcome"]
)

STORE_OPERATION_SECONDS = Histogram(
    "store_operation_seconds", "Time spent waiting on the store", ["table", "operation"]
)

IMPORTED_RECORDS_TOTAL = Counter(
    "imported_records_total", "Activity records processed by the batch importer", ["outcome"]
)
