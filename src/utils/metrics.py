"""
Prometheus metrics collection.
"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry

# Create a custom registry
registry = CollectorRegistry()

# HTTP metrics
http_requests = Counter(
    "studio_http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status_code"],
    registry=registry,
)

http_request_duration = Histogram(
    "studio_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
    registry=registry,
)

# Pipeline metrics
pipeline_runs = Counter(
    "studio_pipeline_runs_total",
    "Total pipeline invocations",
    ["mode", "agent_context", "status"],
    registry=registry,
)

pipeline_duration = Histogram(
    "studio_pipeline_duration_seconds",
    "Pipeline invocation duration in seconds",
    ["mode"],
    registry=registry,
)

# Agent stage metrics (planner, writer)
stage_count = Counter(
    "studio_agent_stage_total",
    "Total agent stage executions",
    ["stage", "status"],
    registry=registry,
)

stage_duration = Histogram(
    "studio_agent_stage_duration_seconds",
    "Agent stage duration in seconds",
    ["stage"],
    registry=registry,
)

# Image generation metrics
image_generation_count = Counter(
    "studio_image_generation_total",
    "Image generation requests by outcome",
    ["model", "status"],
    registry=registry,
)

images_generated = Counter(
    "studio_images_generated_total",
    "Total images returned by the image model",
    ["model"],
    registry=registry,
)

# System metrics
active_generations = Gauge(
    "studio_active_generations",
    "Number of pipeline invocations in progress",
    registry=registry,
)

# Error metrics
error_count = Counter(
    "studio_errors_total",
    "Total errors",
    ["error_code", "component"],
    registry=registry,
)
