from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.allocation import ClassAllocation, ComplementaryAllocation  # noqa: F401
from app.models.booking import ResourceBooking  # noqa: F401
from app.models.calendar_event import CalendarEvent  # noqa: F401
from app.models.institution_settings import InstitutionSettings  # noqa: F401
from app.models.portal_link import PortalLink  # noqa: F401
from app.models.professional import Professional  # noqa: F401
from app.models.resource import Resource, ResourceType  # noqa: F401
from app.models.school_class import SchoolClass  # noqa: F401
from app.models.student import Student  # noqa: F401
from app.models.subject import Subject  # noqa: F401
from app.models.time_slot import SlotKind, TimeSlot  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401
from app.models.user_preference import UserPreference  # noqa: F401
