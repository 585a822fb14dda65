"""
One Repository per table, shared by the services.
"""

from airline.models import Airplane, Airport, Baggage, Booking, Client, Flight, Passenger, Payment, Seat
from airline.repositories.base import Repository

clients = Repository(Client)
airports = Repository(Airport)
airplanes = Repository(Airplane)
seats = Repository(Seat)
flights = Repository(Flight)
bookings = Repository(Booking)
passengers = Repository(Passenger)
payments = Repository(Payment)
baggage = Repository(Baggage)
