"""
Nexio Backend — API Routes Package
===================================

Route Inventory:
    - auth.py:           /api/auth/signup, /api/auth/login
    - users.py:          /api/users/{id} (+ posts, saved, followers, following, follow)
    - posts.py:          /api/posts (+ trending, detail, upvote, save, comments)
    - comments.py:       /api/comments/{id}
    - notifications.py:  /api/notifications (+ mark-all-read, {id}/read)
    - reports.py:        /api/reports
    - search.py:         /api/search
    - health.py:         /health
    - deps.py:           caller identity dependencies

Routes are thin: parse the request, call a service, return its result.
"""
