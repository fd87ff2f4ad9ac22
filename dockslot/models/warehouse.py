"""
Warehouse model - immutable reference data loaded once at startup.
"""
from pydantic import BaseModel, ConfigDict


class Warehouse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # stable external code, e.g. INTGHYD00763
    name: str
    city: str
    state: str

    def __repr__(self) -> str:
        return f"<Warehouse {self.id} {self.city}>"
