from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from authtrail.domain.entities import AuditAction, AuditStatus


class AuditSink(ABC):
    """
    Where use cases report auditable outcomes.

    Implementations must not raise and must not make the caller wait on
    persistence.
    """

    @abstractmethod
    def record(
        self,
        action: Union[AuditAction, str],
        status: AuditStatus,
        *,
        actor_id: Optional[UUID] = None,
        before: Optional[Mapping[str, Any]] = None,
        after: Optional[Mapping[str, Any]] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        pass
