from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from loguru import logger
from bson import ObjectId
from bson.errors import InvalidId

from taskhub.config import settings
from taskhub.exceptions import DuplicateEmailError


def utcnow() -> datetime:
    # BSON dates only keep millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class MongoDB:

    client: Optional[AsyncIOMotorClient] = None
    db = None

    @classmethod
    async def connect(cls, client: Optional[AsyncIOMotorClient] = None):
        try:
            cls.client = client if client is not None else AsyncIOMotorClient(settings.MONGODB_URL)
            cls.db = cls.client[settings.MONGODB_DB_NAME]

            if client is None:
                await cls.client.admin.command('ping')
            logger.info(f"Connected to MongoDB: {settings.MONGODB_DB_NAME}")

            await cls.create_indexes()

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    @classmethod
    async def create_indexes(cls):
        await cls.db.users.create_index("email", unique=True)
        await cls.db.tasks.create_index("created_by")
        await cls.db.tasks.create_index([("created_at", DESCENDING)])

    @classmethod
    async def disconnect(cls):
        if cls.client is not None:
            cls.client.close()
            logger.info("Disconnected from MongoDB")
        cls.client = None
        cls.db = None

    @classmethod
    async def ping(cls) -> bool:
        if cls.client is None:
            return False
        await cls.client.admin.command('ping')
        return True

    @classmethod
    def get_collection(cls, name: str):
        if cls.db is None:
            raise RuntimeError("Database not connected")
        return cls.db[name]


class UserDB:

    @staticmethod
    async def create_user(name: str, email: str, hashed_password: str) -> Dict[str, Any]:
        collection = MongoDB.get_collection("users")

        now = utcnow()
        user_doc = {
            "name": name,
            "email": email,
            "hashed_password": hashed_password,
            "created_at": now,
            "updated_at": now
        }

        try:
            result = await collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            raise DuplicateEmailError(email) from e

        user_doc["_id"] = result.inserted_id
        return user_doc

    @staticmethod
    async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
        collection = MongoDB.get_collection("users")
        return await collection.find_one({"email": email.strip().lower()})

    @staticmethod
    async def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
        collection = MongoDB.get_collection("users")

        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await collection.find_one({"_id": oid})


class TaskDB:

    @staticmethod
    async def insert_task(task_doc: Dict[str, Any]) -> Dict[str, Any]:
        collection = MongoDB.get_collection("tasks")

        now = utcnow()
        task_doc = {**task_doc, "created_at": now, "updated_at": now}

        result = await collection.insert_one(task_doc)
        task_doc["_id"] = result.inserted_id

        return task_doc

    @staticmethod
    async def find_tasks(
        filter_dict: Dict[str, Any],
        skip: int,
        limit: int
    ) -> List[Dict[str, Any]]:
        collection = MongoDB.get_collection("tasks")

        cursor = collection.find(
            filter_dict,
            sort=[("created_at", DESCENDING), ("_id", DESCENDING)],
            skip=skip,
            limit=limit
        )
        return await cursor.to_list(length=limit)

    @staticmethod
    async def count_tasks(filter_dict: Dict[str, Any]) -> int:
        collection = MongoDB.get_collection("tasks")
        return await collection.count_documents(filter_dict)

    @staticmethod
    async def get_task(task_id: str) -> Optional[Dict[str, Any]]:
        collection = MongoDB.get_collection("tasks")

        oid = to_object_id(task_id)
        if oid is None:
            return None
        return await collection.find_one({"_id": oid})

    @staticmethod
    async def update_task(
        filter_dict: Dict[str, Any],
        changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        collection = MongoDB.get_collection("tasks")

        return await collection.find_one_and_update(
            filter_dict,
            {"$set": {**changes, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    @staticmethod
    async def delete_task(filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        collection = MongoDB.get_collection("tasks")
        return await collection.find_one_and_delete(filter_dict)
