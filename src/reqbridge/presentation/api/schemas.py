"""Request bodies accepted by the API."""

from typing import Any, Union

from pydantic import BaseModel, Field


class OutboundCall(BaseModel):
    """An outbound call to execute or to emit as client code.

    ``headers`` is either a mapping or an ordered list of [name, value] pairs
    (duplicates allowed). ``body`` is sent as JSON when it is an object or
    array, verbatim when it is a string.
    """

    method: str = "GET"
    url: str
    headers: Union[dict[str, str], list[tuple[str, str]], None] = None
    body: Any = None
    options: dict[str, Any] = Field(default_factory=dict)
