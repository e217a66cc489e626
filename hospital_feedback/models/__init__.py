from .feedback import Feedback, STATUSES, STATUS_PENDING

__all__ = ["Feedback", "STATUSES", "STATUS_PENDING"]
