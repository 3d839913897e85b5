"""MongoDB adapter for the user store."""

USERS_COLLECTION_NAME = 'users'
