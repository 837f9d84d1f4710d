"""
Nexio Backend — Services Layer
===============================

What:  Business rules between the routes (HTTP) and Storage (SQL).
How:   Each service is a stateless class with a module-level singleton; every
       method receives the request's AsyncSession.

Service Inventory:
    - Storage:             rows, counters and cascades for every entity
    - ImageService:        data URL checks for post images
    - AuthService:         signup, login, caller resolution
    - UserService:         profiles and the follow graph
    - PostService:         feeds, post CRUD, upvote/save toggles
    - CommentService:      comments and their counter
    - NotificationService: inbox and follow/upvote/comment fan-out
    - ReportService:       reports and admin moderation
    - SearchService:       combined post + user search
"""
