from pydantic import BaseModel, Field


class NamedRef(BaseModel):
    id: int | None = None
    name: str | None = None


class Asset(BaseModel):
    id: int
    name: str | None = None
    serial_number: str | None = Field(None, alias="serialNumber")
    location: str | None = None
    status: str | None = None
    vendor: NamedRef | None = None

    model_config = {"populate_by_name": True}


class Movement(BaseModel):
    id: int
    atm: NamedRef | None = None
    from_location: str | None = Field(None, alias="fromLocation")
    to_location: str | None = Field(None, alias="toLocation")
    docket_no: str | None = Field(None, alias="docketNo")
    status: str | None = None

    model_config = {"populate_by_name": True}


class Vendor(BaseModel):
    id: int
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    status: str | None = None


class CostingRecord(BaseModel):
    id: int
    atm: NamedRef | None = None
    vendor: NamedRef | None = None
    billing_status: str | None = Field(None, alias="billingStatus")
    final_amount: float | None = Field(None, alias="finalAmount")

    model_config = {"populate_by_name": True}
