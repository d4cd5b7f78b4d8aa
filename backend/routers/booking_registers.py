from models.booking_registers import BookingRegister as BookingRegisterModel
from routers.freight_registers import build_register_router
from schemas.booking_registers import BookingRegister, BookingRegisterCreate, BookingRegisterUpdate

router = build_register_router(
    prefix="/booking-registers",
    tag="Booking Registers",
    label="Booking register entry",
    model=BookingRegisterModel,
    read_schema=BookingRegister,
    create_schema=BookingRegisterCreate,
    update_schema=BookingRegisterUpdate,
    search_columns=(BookingRegisterModel.party_name, BookingRegisterModel.lorry_no, BookingRegisterModel.gr_no),
)
