"""
Option model: one entry of a dropdown list.
"""

from pydantic import BaseModel


class Option(BaseModel):
    code: str
    label: str
