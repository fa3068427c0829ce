"""City imagery pipeline: batch image acquisition for catalog locations."""

from .pipeline import (
    generate_sample_locations,
    load_locations,
    run_pipeline,
    run_pipeline_async,
)

__all__ = [
    "generate_sample_locations",
    "load_locations",
    "run_pipeline",
    "run_pipeline_async",
]
