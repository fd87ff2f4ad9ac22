"""
Warehouse directory - static catalog of inbound warehouses.

The catalog is grouped by state and city the way the network is organised
and flattened once at load. Read-only after construction.
"""
import logging
from typing import Optional

from dockslot.errors import NotFound
from dockslot.models.warehouse import Warehouse

logger = logging.getLogger(__name__)

WAREHOUSE_CATALOG: list[dict] = [
    {
        "state": "Andhra Pradesh",
        "code": "AP",
        "locations": [
            {"city": "Vijayawada", "warehouses": [("INAPBZA00022", "OHS AUTONAGAR VIJAYAWADA")]},
            {"city": "Vizag", "warehouses": [("INAPVSK00107", "VIZAG WAREHOUSE")]},
        ],
    },
    {
        "state": "Karnataka",
        "code": "KA",
        "locations": [
            {
                "city": "Bangalore",
                "warehouses": [
                    ("INKABLR00255", "OHS FMCG BENGALURU INVENTORY"),
                    ("INKABLR00174", "PBTA-OHS-BENGALURU-INVENTORY"),
                    ("INKABLR00701", "ADKAMARANAHALLI FMCG PRIVATE LABEL WAREHOUSE"),
                ],
            },
            {"city": "Hubli", "warehouses": [("INKAHBL00055", "HUBLI WAREHOUSE")]},
        ],
    },
    {
        "state": "Maharashtra",
        "code": "MH",
        "locations": [
            {"city": "Pune", "warehouses": [("INMHPNQ00087", "PBTA-OHS-PUNE-NEW INVENTORY PNQ")]},
            {"city": "Mumbai", "warehouses": [("INMHMUM00007", "OHS WAREHOUSE MUMBAI MUM")]},
            {"city": "Bhiwandi", "warehouses": [("INMHMUM00053", "OHS BHIWANDI WAREHOUSE MUMBAI MUM")]},
            {"city": "Nagpur", "warehouses": [("INMHNAG00066", "OHS NAGPUR WAREHOUSE NAG")]},
        ],
    },
    {
        "state": "Odisha",
        "code": "OD",
        "locations": [
            {
                "city": "Bhubaneswar",
                "warehouses": [
                    ("INORBBI00011", "OHS NEW BHUBANESWAR OR pharma"),
                    ("INORBBI00090", "OGALAPADA WAREHOUSE ODISHA OR general"),
                ],
            },
        ],
    },
    {
        "state": "West Bengal",
        "code": "WB",
        "locations": [
            {"city": "Kolkata", "warehouses": [("INWBCCU00250", "OHS NILGUNGE WAREHOUSE KOLKATA")]},
            {"city": "Hoogly", "warehouses": [("INWBHGY00031", "HOOGLY WAREHOUSE")]},
        ],
    },
    {
        "state": "Tamil Nadu",
        "code": "TN",
        "locations": [
            {
                "city": "Chennai",
                "warehouses": [
                    ("INTNMAS00120", "OHS FMCG INVENTORY CHENNAI"),
                    ("INTNMAS00103", "PBTA-OHS-CHENNAI-INVENTORY"),
                ],
            },
            {"city": "Kovur", "warehouses": [("INTNMAS00389", "OHS FMCG WAREHOUSE KOVUR")]},
            {"city": "Vellavedu", "warehouses": [("INTNMAS00560", "OHS VELLAVEDU NEW WARE HOUSE")]},
            {"city": "Madurai", "warehouses": [("INTNIXM00083", "MADURAI WAREHOUSE")]},
        ],
    },
    {
        "state": "Telangana",
        "code": "TG",
        "locations": [
            {
                "city": "Hyderabad",
                "warehouses": [
                    ("INAPHYD00384", "PBTA-OHS-HYD-INVENTORY"),
                    ("INTGHYD00763", "OPTIVAL NSP WAREHOUSE"),
                ],
            },
            {
                "city": "Medchal",
                "warehouses": [
                    ("INTGMDC00005", "OHS MEDICINE WAREHOUSE SOMARAM HYDERABAD"),
                    ("INTGHYD00545", "OHS MEDCHAL INVENTORY"),
                ],
            },
            {"city": "Shamirpet", "warehouses": [("INTGHYD01044", "OHS SHAMIRPET WAREHOUSE")]},
        ],
    },
]


def flatten_catalog(catalog: list[dict]) -> list[Warehouse]:
    """Flatten state -> city -> warehouse nesting, preserving catalog order."""
    warehouses = []
    for state in catalog:
        for location in state["locations"]:
            for warehouse_id, name in location["warehouses"]:
                warehouses.append(Warehouse(
                    id=warehouse_id,
                    name=name,
                    city=location["city"],
                    state=state["state"],
                ))
    return warehouses


class WarehouseDirectory:
    """Load-once lookup over the warehouse catalog."""

    def __init__(self, catalog: Optional[list[dict]] = None):
        self._warehouses = flatten_catalog(catalog if catalog is not None else WAREHOUSE_CATALOG)
        self._by_id: dict[str, Warehouse] = {}
        for wh in self._warehouses:
            if wh.id in self._by_id:
                raise ValueError(f"Duplicate warehouse id in catalog: {wh.id}")
            self._by_id[wh.id] = wh
        logger.info("Warehouse directory loaded: %d warehouses", len(self._warehouses))

    def list_warehouses(self) -> list[Warehouse]:
        return list(self._warehouses)

    def get_warehouse(self, warehouse_id: str) -> Warehouse:
        wh = self._by_id.get(warehouse_id)
        if wh is None:
            raise NotFound("Warehouse", warehouse_id)
        return wh

    def exists(self, warehouse_id: str) -> bool:
        return warehouse_id in self._by_id

    def list_states(self) -> list[str]:
        return sorted({wh.state for wh in self._warehouses})

    def list_by_state(self, state: str) -> list[Warehouse]:
        return [wh for wh in self._warehouses if wh.state == state]

    def list_by_city(self, city: str) -> list[Warehouse]:
        return [wh for wh in self._warehouses if wh.city.lower() == city.lower()]
