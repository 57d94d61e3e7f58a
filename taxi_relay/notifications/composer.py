from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from .schemas import DeviceRequest, NotificationPayload

TITLE_TEMPLATE = "🚕 طلب سيارة نوع {request_type}"
BODY_TEMPLATE = "الجهاز ذو الرقم {device_id} المركب بمكان {location} طلب سيارة {request_type} في {time}"
TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


class NotificationComposer:
    """Formats validated device requests into push notifications. No validation happens here."""

    def __init__(self, tz_name: str = "Asia/Damascus"):
        self.tz = ZoneInfo(tz_name)

    def render_time(self, now: datetime) -> str:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.tz).strftime(TIME_FORMAT)

    def compose(self, request: DeviceRequest, now: datetime) -> NotificationPayload:
        time_str = self.render_time(now)
        fields = dict(
            device_id=request.device_id,
            location=request.location,
            request_type=request.request_type,
            time=time_str,
        )
        return NotificationPayload(
            title=TITLE_TEMPLATE.format(**fields),
            body=BODY_TEMPLATE.format(**fields),
            data={
                "serial": request.device_id,
                "location": request.location,
                "type": request.request_type,
                "time": time_str,
            },
        )
