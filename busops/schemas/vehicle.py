from pydantic import BaseModel


class VehicleResponse(BaseModel):
    id: str
    label: str
    plate: str | None = None
    make_model: str | None = None
    capacity: int | None = None
    is_active: bool

    model_config = {"from_attributes": True}
