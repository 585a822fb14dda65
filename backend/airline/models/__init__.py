from airline.models.client import Client
from airline.models.airport import Airport
from airline.models.airplane import Airplane
from airline.models.seat import Seat
from airline.models.flight import Flight
from airline.models.booking import Booking
from airline.models.passenger import Passenger
from airline.models.payment import Payment
from airline.models.baggage import Baggage

__all__ = [
    "Client",
    "Airport",
    "Airplane",
    "Seat",
    "Flight",
    "Booking",
    "Passenger",
    "Payment",
    "Baggage",
]
