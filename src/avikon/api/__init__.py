"""AvikonAI — FastAPI REST API layer.

Modules
-------
main
    FastAPI application with the generation routes and the ``main()`` server
    entry point.
models
    Pydantic response models.
errors
    Error taxonomy and vendor-failure classification.
"""
