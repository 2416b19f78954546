"""
Interfaces layer package.

Contains Pydantic wire and response schemas and the FastAPI error handlers.
No business logic belongs here.
"""
