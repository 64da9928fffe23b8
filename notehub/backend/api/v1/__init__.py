"""
Versioned REST router. Mounted under application.api_prefix (/api/v1).
"""

from fastapi import APIRouter

from notehub.backend.api.v1.endpoints import auth, courses, notes, profiles, projects, publications

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
router.include_router(courses.router, prefix="/courses", tags=["courses"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(publications.router, prefix="/publications", tags=["publications"])
