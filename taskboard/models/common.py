from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error_code: str
    error: str


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    data_file: str
    total: int
