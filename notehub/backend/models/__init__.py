# Database models package. Importing it registers every table on Base.metadata.
from notehub.backend.models.base import Base
from notehub.backend.models.course import Course
from notehub.backend.models.note import Note
from notehub.backend.models.profile import Profile, ProfileInterest, ProfileProject
from notehub.backend.models.project import Project, ProjectInterest
from notehub.backend.models.rating import Rating, RatingSummary
from notehub.backend.models.user import RoleAssignment, User

__all__ = [
    "Base",
    "Course",
    "Note",
    "Profile",
    "ProfileInterest",
    "ProfileProject",
    "Project",
    "ProjectInterest",
    "Rating",
    "RatingSummary",
    "RoleAssignment",
    "User",
]
