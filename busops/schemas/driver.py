from pydantic import BaseModel


class DriverResponse(BaseModel):
    id: str
    full_name: str
    license_number: str | None = None
    is_active: bool

    model_config = {"from_attributes": True}
