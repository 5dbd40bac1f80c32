from fastapi import APIRouter, Depends, Response, status
from pymongo.database import Database

from treeplant.errors import ServiceError, to_http_exception
from treeplant.models import UserCreate, UserCreateResponse
from treeplant.mongo import get_db
from treeplant.user_service import get_user_service

# Initialize router
user_router = APIRouter(prefix="/users", tags=["Users"])


@user_router.post(
    "",
    response_model=UserCreateResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_user(user_data: UserCreate, response: Response, db: Database = Depends(get_db)):
    """Register a user; an already registered email answers 200 instead of 201."""
    try:
        result = get_user_service(db).register(user_data.email, user_data.name)
    except ServiceError as e:
        raise to_http_exception(e)

    if not result["inserted"]:
        response.status_code = status.HTTP_200_OK
        return UserCreateResponse(message="User already exists", inserted=False)

    return UserCreateResponse(message="User created successfully", insertedId=result["insertedId"])
