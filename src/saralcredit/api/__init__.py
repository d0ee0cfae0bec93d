"""SaralCredit Relay - FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request/response
models, and the prompt templates.

Modules
-------
main
    FastAPI application with all route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request and response validation.
prompt_templates
    Fixed instruction templates selected by request type.
"""
