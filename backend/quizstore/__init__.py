"""Quiz Store backend package.

This package exposes the service, repository and model modules used by
the FastAPI application that stores quizzes and their ordered
questions. Individual modules contain the concrete implementations and
documentation.
"""
