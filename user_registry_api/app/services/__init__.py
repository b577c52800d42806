"""
Service layer abstraction.

Business rules live in ``user_service``; they reach storage only
through the ``UserStore`` interface and the breach corpus only through
a checker object, so both can be swapped without touching API handlers.
"""
