from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    """
    Client and routing facts about one inbound request.

    Built once at the edge and passed by value. The acting user is not part
    of it; use cases pass the actor explicitly when they record.
    """

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    endpoint: Optional[str] = None
    method: Optional[str] = None
    journey_id: Optional[str] = None
