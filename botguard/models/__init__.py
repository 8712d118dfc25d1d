from botguard.models.setting import Setting
from botguard.models.user import User

__all__ = [
    "Setting",
    "User",
]
