from pydantic import BaseModel


class DeleteResult(BaseModel):
    deleted: int


class ErrorResponse(BaseModel):
    error: str
