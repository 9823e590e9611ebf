# Routes package init
"""
TutorMatch Backend: Routes Package
====================================

What:  HTTP route handlers; thin wrappers around the services.

Route Inventory:
    - search.py:      GET  /  and  GET /search     (tutor-post search page)
    - dashboard.py:   GET  /dashboard              (inbox, login required)
    - tutor_post.py:  GET  /tutor-post             (post form data)
                      POST /tutor-post             (create post, login required)
    - health.py:      GET  /health                 (service health check)

Every page route runs `clear_lazy_registration` and embeds the header
categories from `load_search_categories`.
"""
