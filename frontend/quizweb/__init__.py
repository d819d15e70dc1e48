"""Quiz Builder frontend package.

Server-rendered pages for browsing and building quizzes. Pages talk to
the Quiz Store over HTTP through `api.QuizApiClient`, and reads go
through the tag-addressable `cache.QueryCache` so writes can invalidate
what the list page shows.
"""
