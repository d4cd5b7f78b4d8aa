from models.vehicle_hirings import VehicleHiring as VehicleHiringModel
from routers.freight_registers import build_register_router
from schemas.vehicle_hirings import VehicleHiring, VehicleHiringCreate, VehicleHiringUpdate

router = build_register_router(
    prefix="/vehicle-hirings",
    tag="Vehicle Hirings",
    label="Vehicle hiring",
    model=VehicleHiringModel,
    read_schema=VehicleHiring,
    create_schema=VehicleHiringCreate,
    update_schema=VehicleHiringUpdate,
    search_columns=(VehicleHiringModel.lorry_no, VehicleHiringModel.gr_no, VehicleHiringModel.driver_no),
)
