"""
Intake payload variants.

The webhook body is parsed into one of two typed shapes before normalization:
a vendor call webhook, or a generic lead payload.
"""

from typing import Any

from pydantic import BaseModel, Field

CALL_ANALYZED_EVENT = "call_analyzed"


class VendorPayload(BaseModel):
    """Phone vendor webhook: an event name plus the call object."""

    event: str
    call: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.event == CALL_ANALYZED_EVENT


class GenericPayload(BaseModel):
    """Anything else: a `lead` object, or the body itself."""

    lead: dict[str, Any] = Field(default_factory=dict)


IntakePayload = VendorPayload | GenericPayload


def parse_intake_payload(body: dict[str, Any]) -> IntakePayload:
    """
    Tag a decoded JSON body as vendor or generic.

    A body with an `event` field is a vendor webhook. A `call_analyzed` event
    with no `call` object has nothing vendor-specific to read, so it drops to
    the generic path.
    """
    event = body.get("event")
    call = body.get("call")

    if event is not None:
        event = str(event)
        if event != CALL_ANALYZED_EVENT:
            return VendorPayload(event=event)
        if isinstance(call, dict):
            return VendorPayload(event=event, call=call)

    lead = body.get("lead")
    return GenericPayload(lead=lead if isinstance(lead, dict) else body)
