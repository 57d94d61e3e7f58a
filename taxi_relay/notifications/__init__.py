from .composer import NotificationComposer
from .schemas import DeviceRequest, NotificationPayload

__all__ = ["DeviceRequest", "NotificationComposer", "NotificationPayload"]
