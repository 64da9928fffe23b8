"""
NoteHub Application Modules.

- backend/: API, database models, services, live publications, configuration
"""
