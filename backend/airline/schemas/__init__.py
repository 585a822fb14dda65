from airline.schemas.auth import AuthResult, ClientLogin, ClientRegister, ClientResponse, Tokens
from airline.schemas.booking import BookingCreate, BookingCreated, BookingResponse, PassengerInput, PassengerResponse
from airline.schemas.common import ApiResponse, ErrorResponse, Pagination
from airline.schemas.flight import FlightCreate, FlightDetail, FlightSearchResult
from airline.schemas.payment import PaymentCreate, PaymentResponse, Receipt

__all__ = [
    "AuthResult", "ClientLogin", "ClientRegister", "ClientResponse", "Tokens",
    "BookingCreate", "BookingCreated", "BookingResponse", "PassengerInput", "PassengerResponse",
    "ApiResponse", "ErrorResponse", "Pagination",
    "FlightCreate", "FlightDetail", "FlightSearchResult",
    "PaymentCreate", "PaymentResponse", "Receipt",
]
