"""Users app package.

Holds the account model (``apps.users.models.CustomUser``, the project's
AUTH_USER_MODEL), the guide profile that turns an account into a guide once
approved, and the authentication and guide-application endpoints.
"""
