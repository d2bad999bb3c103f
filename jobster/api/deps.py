from fastapi import Depends

from jobster.db.mongodb import MongoDatabase, get_database
from jobster.services.mongo_service import JobService, UserService


def get_user_service(database: MongoDatabase = Depends(get_database)) -> UserService:
    return UserService(database)


def get_job_service(database: MongoDatabase = Depends(get_database)) -> JobService:
    return JobService(database)
