# Services package init
"""
TutorMatch Backend: Services Layer
====================================

What:  Business logic between routes (HTTP) and database (persistence).
How:   Services accept a database session plus plain values, apply business
       rules, and return pydantic view-models or raise application exceptions.

Service Inventory:
    - CategoryService:   Search categories (majors) for every page header
    - SearchService:     Filtered, paginated tutor-post search
    - TutorPostService:  Course options for the form; post creation with thumbnail
    - DashboardService:  The caller's inbound messages
    - FileService:       Upload validation and per-request temporary files
    - ImageService:      Thumbnail resizing with Pillow
"""
