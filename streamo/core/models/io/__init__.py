"""
I/O models for API requests and responses.

Pydantic schemas that define the contract between the API and its clients.
Entities never leave the API directly; routers convert them with
``model_validate`` on these models.
"""
