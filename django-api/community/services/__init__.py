from community.services.base import BaseService
from community.services.event_service import EventService
from community.services.post_service import PostService
from community.services.report_service import ReportService
from community.services.user_service import UserService

__all__ = [
    "BaseService",
    "EventService",
    "PostService",
    "ReportService",
    "UserService",
]
