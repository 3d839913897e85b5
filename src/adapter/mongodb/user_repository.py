"""MongoDB implementation of UserRepository."""

from logging import getLogger

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, NotFoundError, PersistenceError
from domain.model.user import User

logger = getLogger(__name__)

# (name, keys, options) for every index the users collection carries
USER_INDEXES = [
    ('idx_users_email', [('email', 1)], {'unique': True}),
    ('idx_users_api_key', [('api_key', 1)], {'unique': True}),
    ('idx_users_created_at', [('created_at', -1)], {}),
]

# IndexOptionsConflict, IndexKeySpecsConflict
_INDEX_CONFLICT_CODES = (85, 86)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection.

        The unique email index is what actually guarantees one user per email
        when two registrations race past the service-level pre-check.
        """
        try:
            for name, keys, options in USER_INDEXES:
                self._create_index(name, keys, options)
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _create_index(self, name: str, keys: list, options: dict) -> None:
        """Create one index, replacing an older index that clashes with it.

        A clash is an index under the same name with other keys or options
        (e.g. a non-unique email index left by an earlier deployment), or the
        same keys under another name. Anything else is re-raised.
        """
        try:
            self.collection.create_index(keys, name=name, **options)
            return
        except OperationFailure as e:
            if e.code not in _INDEX_CONFLICT_CODES and 'already exists' not in str(e):
                raise
            conflict = e

        wanted_keys = dict(keys)
        for idx_name, idx_info in self.collection.index_information().items():
            if idx_name == '_id_':
                continue
            if idx_name == name or dict(idx_info.get('key', [])) == wanted_keys:
                logger.warning("Replacing conflicting index", extra={"index": idx_name, "wanted": name})
                self.collection.drop_index(idx_name)
                self.collection.create_index(keys, name=name, **options)
                return

        raise conflict

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            name=doc['name'],
            password_hash=doc['password_hash'],
            api_key=doc['api_key'],
            is_active=doc.get('is_active', True),
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
        )

    def _to_document(self, user: User) -> dict:
        return {
            '_id': user.id,
            'email': user.email,
            'name': user.name,
            'password_hash': user.password_hash,
            'api_key': user.api_key,
            'is_active': user.is_active,
            'created_at': user.created_at,
            'updated_at': user.updated_at,
        }

    def _find_one(self, query: dict, field: str) -> User | None:
        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error(f"Failed to get user by {field}", extra={"error": str(e)})
            raise PersistenceError(f"Failed to get user by {field}") from e
        return self._to_domain(doc) if doc else None

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> None:
        """Insert a new user document."""
        try:
            self.collection.insert_one(self._to_document(user))
        except DuplicateKeyError as e:
            logger.warning("User creation failed: email already exists", extra={"email": user.email})
            raise DuplicateError("User with this email already exists") from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": user.email, "error": str(e)})
            raise PersistenceError("Failed to create user") from e
        logger.info("User created", extra={"userId": user.id, "email": user.email})

    def update(self, user: User) -> None:
        """Overwrite the mutable fields of an existing user."""
        fields = self._to_document(user)
        del fields['_id'], fields['created_at']
        try:
            result = self.collection.update_one({'_id': user.id}, {'$set': fields})
        except DuplicateKeyError as e:
            logger.warning("User update failed: unique key conflict", extra={"userId": user.id})
            raise DuplicateError("User with this email already exists") from e
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user.id, "error": str(e)})
            raise PersistenceError("Failed to update user") from e
        if result.matched_count == 0:
            raise NotFoundError(f"User {user.id} not found")
        logger.debug("User updated", extra={"userId": user.id})

    def delete(self, user_id: str) -> None:
        try:
            result = self.collection.delete_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            raise PersistenceError("Failed to delete user") from e
        if result.deleted_count == 0:
            raise NotFoundError(f"User {user_id} not found")
        logger.info("User deleted", extra={"userId": user_id})

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        return self._find_one({'_id': user_id}, 'id')

    def get_by_email(self, email: str) -> User | None:
        return self._find_one({'email': email}, 'email')

    def get_by_api_key(self, api_key: str) -> User | None:
        return self._find_one({'api_key': api_key}, 'api_key')

    def list_page(self, offset: int = 0, limit: int = 20) -> list[User]:
        """List users newest first."""
        try:
            docs = (
                self.collection.find({})
                .sort('created_at', -1)
                .skip(offset)
                .limit(limit)
            )
            return [self._to_domain(doc) for doc in docs]
        except PyMongoError as e:
            logger.error("Failed to list users", extra={"error": str(e)})
            raise PersistenceError("Failed to list users") from e

    def count(self) -> int:
        try:
            return self.collection.count_documents({})
        except PyMongoError as e:
            logger.error("Failed to count users", extra={"error": str(e)})
            raise PersistenceError("Failed to count users") from e
