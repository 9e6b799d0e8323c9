"""
Defaults and fixed strings for the checker.

Centralizes values shared between settings, the gRPC host and the
response builder so they stay consistent.
"""

from __future__ import annotations

# =============================================================================
# Network
# =============================================================================

# Default OTLP gRPC port
OTLP_DEFAULT_GRPC_PORT = 4317

DEFAULT_ADDRESS = f"0.0.0.0:{OTLP_DEFAULT_GRPC_PORT}"

# Worker threads serving concurrent Export calls
DEFAULT_MAX_WORKERS = 10

# Seconds in-flight calls get to finish when the server stops
DEFAULT_SHUTDOWN_GRACE_S = 5.0

# =============================================================================
# Responses
# =============================================================================

# partial_success.error_message on a rejecting response
REJECTION_MESSAGE = "missing attributes"

# =============================================================================
# Files
# =============================================================================

DEFAULT_CONFIG_PATH = "semconv-checker.yaml"

BUNDLED_CATALOG = "semconv.yaml"
