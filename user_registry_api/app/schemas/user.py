"""
Pydantic models for user data.

A user is nothing more than a username and a password.  The password
travels in plain text at the API boundary and is stored as supplied;
``authenticate`` returns the stored record as is.
"""

from pydantic import BaseModel, Field


class User(BaseModel):
    """Schema for registering, authenticating and listing users."""

    username: str = Field(..., min_length=1, description="Unique user name", examples=["alice"])
    password: str = Field(..., description="Password in plain text", examples=["S3cr3t!"])
