# quattrodue/services - Query surface for callers
from .work_schedule import WorkScheduleService, build_service

__all__ = ["WorkScheduleService", "build_service"]
