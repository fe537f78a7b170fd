### models/__init__.py
from .base import Base
from .user import User, SENSITIVE_USER_FIELDS
from .vehicle import Vehicle, VEHICLE_TYPES
from .event import Event, EVENT_TYPES
from .comment import Comment
from .image import Image
from .like import Like
