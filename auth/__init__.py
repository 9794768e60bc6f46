"""
Auth package for FastAPI applications.

Provides registration, login and bearer-token protection for write routes:
passwords are hashed with passlib, tokens are JWTs signed with python-jose.
Designed to be modular: the app factory builds one `AuthService`, mounts the
router from `build_auth_router()` and guards routes with `BearerGuard`.
"""
